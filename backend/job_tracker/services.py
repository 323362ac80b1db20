# backend/job_tracker/services.py
import io
import os
import json
import logging
from typing import Optional, Type, TypeVar

import pypdf
import docx2txt
import google.generativeai as genai
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from . import schemas
from .errors import AnalysisUnavailableError

load_dotenv()

logger = logging.getLogger(__name__)

# --- Configuration ---
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
if not GEMINI_API_KEY:
    raise ValueError("GEMINI_API_KEY environment variable not set")

genai.configure(api_key=GEMINI_API_KEY)

GENERATION_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-pro")
REQUEST_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "120"))

PDF_TYPES = {"application/pdf"}
DOCX_TYPES = {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}
WORD_TYPES = DOCX_TYPES | {"application/msword"}
ACCEPTED_UPLOAD_TYPES = PDF_TYPES | WORD_TYPES | {"text/plain"}

T = TypeVar("T", bound=BaseModel)

# --- File Processing ---
def extract_text_from_file(filename: str, content: bytes, content_type: Optional[str] = None) -> str:
    """Extracts text from an uploaded resume (PDF, DOCX or plain text).

    A known ``content_type`` decides the format; the filename extension is
    only consulted when the content type is missing or unrecognised. Legacy
    .doc files and plain text are decoded as UTF-8 with undecodable bytes
    dropped.
    """
    if content_type in ACCEPTED_UPLOAD_TYPES:
        is_pdf = content_type in PDF_TYPES
        is_docx = content_type in DOCX_TYPES
    else:
        name = (filename or "").lower()
        is_pdf = name.endswith(".pdf")
        is_docx = name.endswith(".docx")

    if is_pdf:
        try:
            pdf_reader = pypdf.PdfReader(io.BytesIO(content))
            return "".join(page.extract_text() or "" for page in pdf_reader.pages)
        except Exception:
            logger.warning("Could not read PDF %s", filename, exc_info=True)
            return ""
    if is_docx:
        try:
            return docx2txt.process(io.BytesIO(content)) or ""
        except Exception:
            logger.warning("Could not read DOCX %s", filename, exc_info=True)
            return ""
    return content.decode("utf-8", errors="ignore")

# --- Gemini plumbing ---

def _strip_code_fence(text: str) -> str:
    # Some models wrap JSON in ```json fences even in JSON mode
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()

async def _generate(prompt: str, task: str, system_instruction: Optional[str] = None, json_output: bool = False) -> str:
    generation_config = {"response_mime_type": "application/json"} if json_output else None
    try:
        model = genai.GenerativeModel(
            GENERATION_MODEL,
            system_instruction=system_instruction,
            generation_config=generation_config,
        )
        response = await model.generate_content_async(prompt, request_options={"timeout": REQUEST_TIMEOUT})
        text = (response.text or "").strip()
    except Exception as e:
        logger.exception("%s: generation model '%s' failed", task, GENERATION_MODEL)
        raise AnalysisUnavailableError(f"Failed to run {task}: {e}") from e
    if not text:
        logger.warning("%s: empty response from model '%s'", task, GENERATION_MODEL)
        raise AnalysisUnavailableError(f"Failed to run {task}: empty response from model")
    return text

async def call_gemini_api(prompt: str, response_model: Type[T], task: str, system_instruction: Optional[str] = None) -> T:
    """Call Gemini in JSON mode and validate the reply against ``response_model``.

    Raises AnalysisUnavailableError for transport failures, empty replies and
    replies that are not valid JSON of the expected shape. Never retries.
    """
    schema = response_model.model_json_schema()
    full_prompt = f"{prompt}\n\nStrictly follow this JSON schema for your response:\n{json.dumps(schema)}"
    text = await _generate(full_prompt, task, system_instruction=system_instruction, json_output=True)
    try:
        return response_model.model_validate_json(_strip_code_fence(text))
    except ValidationError as e:
        logger.warning("%s: model response did not match %s: %s", task, response_model.__name__, e)
        raise AnalysisUnavailableError(f"Failed to run {task}: malformed model response") from e

# --- AI Services ---

RESUME_ANALYSIS_INSTRUCTION = """You are an expert ATS (Applicant Tracking System) and resume analyzer.
Analyze the provided resume and extract:
- skills: programming languages, frameworks and tools
- experience: a brief summary of work experience
- education: education details
- atsScore: an integer from 0 to 100 based on keyword density, formatting and relevance
- strengths: skills and experiences that stand out
- weaknesses: missing keywords or areas for improvement
- suggestions: detailed suggestions for improvement
Respond with JSON only."""

async def analyze_resume(resume_text: str) -> schemas.ResumeAnalysis:
    prompt = f"Resume:\n---\n{resume_text}\n---"
    return await call_gemini_api(prompt, schemas.ResumeAnalysis, "resume analysis", RESUME_ANALYSIS_INSTRUCTION)

JOB_MATCH_INSTRUCTION = """You are an expert job matching analyst. Compare the resume with the job description.
Calculate:
- matchPercentage: overall match as an integer from 0 to 100
- skillsMatch: matched over required skills, e.g. "15/18"
- experienceMatch: experience level match, e.g. "4/5"
- educationMatch: whether the education requirements are met (boolean)
- missingSkills: skills the job requires that the resume lacks
Respond with JSON only."""

async def analyze_job_match(resume_text: str, job_text: str, job_title: str) -> schemas.JobMatchAnalysis:
    prompt = f"""Job Title: {job_title}

Resume:
---
{resume_text}
---

Job Description:
---
{job_text}
---

Analyze the match between this resume and job description."""
    return await call_gemini_api(prompt, schemas.JobMatchAnalysis, "job match analysis", JOB_MATCH_INSTRUCTION)

async def generate_cover_letter(resume_text: str, job_text: str, job_title: str, company: str) -> str:
    """Free-text generation; no JSON contract beyond a non-empty reply."""
    prompt = f"""Create a professional, personalized cover letter based on the following information:

Job Title: {job_title}
Company: {company}
Resume: {resume_text}
Job Description: {job_text}

Requirements:
- Professional tone and format
- Highlight relevant experience from the resume
- Address specific requirements mentioned in the job description
- Show enthusiasm for the role and company
- Include a proper opening and closing
- Keep it concise but impactful (3-4 paragraphs)
- Use only the applicant's actual experience and skills from the resume

Write the complete cover letter."""
    return await _generate(prompt, "cover letter generation")

INTERVIEW_QUESTIONS_INSTRUCTION = """You are an expert interviewer and HR professional.
Generate interview questions for the job in three categories:
- general: 5-7 questions about the role and company fit
- technical: 5-7 questions specific to the technical requirements
- behavioral: 5-7 STAR method questions
Respond with JSON only."""

async def generate_interview_questions(job_text: str, job_title: str) -> schemas.InterviewQuestions:
    prompt = f"Job Title: {job_title}\nJob Description: {job_text}\n\nGenerate comprehensive interview questions for this position."
    return await call_gemini_api(
        prompt, schemas.InterviewQuestions, "interview question generation", INTERVIEW_QUESTIONS_INSTRUCTION
    )

SKILL_GAP_INSTRUCTION = """You are a career development expert. Analyze the gap between the candidate's skills and the job requirements.
Identify:
- missingSkills: skills required or preferred for the job that the candidate lacks
- priority: "high", "medium" or "low" depending on how critical the gap is
- recommendations: specific recommendations for acquiring these skills
Respond with JSON only."""

async def analyze_skill_gap(resume_text: str, job_text: str) -> schemas.SkillGapAnalysis:
    prompt = f"""Candidate Resume:
---
{resume_text}
---

Job Requirements:
---
{job_text}
---

Analyze the skill gap and provide learning recommendations."""
    return await call_gemini_api(prompt, schemas.SkillGapAnalysis, "skill gap analysis", SKILL_GAP_INSTRUCTION)

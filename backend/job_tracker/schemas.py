# backend/job_tracker/schemas.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional, List, Literal
from datetime import datetime

# The client speaks camelCase; snake_case is accepted too.
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

ApplicationStatus = Literal["draft", "applied", "interview", "offer", "rejected"]

Percentage = Annotated[int, Field(ge=0, le=100)]

DEFAULT_MATCH_THRESHOLD = 75


def _reject_null(value):
    # Omit a field to leave it unchanged; null would clear a required column
    if value is None:
        raise ValueError("may not be null")
    return value

# --- AI Model Schemas ---
# These double as the response contract for the Gemini calls: any reply that
# does not validate against them is treated as an unavailable analysis.
class ResumeAnalysis(CamelModel):
    skills: List[str]
    experience: str
    education: str
    ats_score: Percentage
    strengths: List[str]
    weaknesses: List[str]
    suggestions: str

class JobMatchAnalysis(CamelModel):
    match_percentage: Percentage
    skills_match: str = Field(pattern=r"^\s*\d+\s*/\s*\d+\s*$")
    experience_match: str = Field(pattern=r"^\s*\d+\s*/\s*\d+\s*$")
    education_match: bool
    missing_skills: List[str]

class InterviewQuestions(CamelModel):
    general: List[str]
    technical: List[str]
    behavioral: List[str]

class SkillGapAnalysis(CamelModel):
    missing_skills: List[str]
    priority: Literal["high", "medium", "low"]
    recommendations: str

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

class JobMatchResult(JobMatchAnalysis):
    job_description_id: Optional[str] = None

# --- Create / Update Schemas ---
class UserCreate(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

class ResumeUpdate(CamelModel):
    filename: Optional[str] = None
    skills: Optional[List[str]] = None
    experience: Optional[str] = None
    education: Optional[str] = None
    ats_score: Optional[int] = Field(default=None, ge=0, le=100)
    strengths: Optional[List[str]] = None
    weaknesses: Optional[List[str]] = None
    suggestions: Optional[str] = None

    not_null = field_validator("filename", "skills", "ats_score", "strengths", "weaknesses")(_reject_null)

class JobDescriptionCreate(CamelModel):
    user_id: str
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    content: str = Field(min_length=1)
    required_skills: List[str] = []
    experience_level: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[str] = None

class ApplicationCreate(CamelModel):
    user_id: str
    resume_id: str
    job_description_id: str
    status: ApplicationStatus = "applied"
    match_percentage: int = Field(default=0, ge=0, le=100)
    interview_date: Optional[datetime] = None
    notes: Optional[str] = None

class StatusUpdate(CamelModel):
    status: ApplicationStatus

class ApplicationUpdate(CamelModel):
    status: Optional[ApplicationStatus] = None
    # Both may be cleared with null
    interview_date: Optional[datetime] = None
    notes: Optional[str] = None

    not_null = field_validator("status")(_reject_null)

# --- Workflow Requests ---
class JobMatchRequest(CamelModel):
    resume_id: str
    job_description_id: str

class CoverLetterRequest(CamelModel):
    user_id: str
    resume_id: str
    job_description_id: str

class InterviewQuestionsRequest(CamelModel):
    user_id: str
    job_description_id: str

class SkillGapRequest(CamelModel):
    user_id: str
    resume_id: str
    job_description_id: str

class AutoApplyRequest(CamelModel):
    user_id: str
    job_description_id: str
    resume_id: str

class BulkAutoApplyRequest(CamelModel):
    user_id: str
    resume_id: str
    match_threshold: int = Field(default=DEFAULT_MATCH_THRESHOLD, ge=0, le=100)

# --- Response Schemas ---
class User(CamelModel):
    id: str
    username: str
    created_at: datetime

class Resume(CamelModel):
    id: str
    user_id: str
    filename: str
    content: str
    skills: List[str] = []
    experience: Optional[str] = None
    education: Optional[str] = None
    ats_score: int = 0
    strengths: List[str] = []
    weaknesses: List[str] = []
    suggestions: Optional[str] = None
    created_at: datetime

class JobDescription(CamelModel):
    id: str
    user_id: str
    title: str
    company: str
    content: str
    required_skills: List[str] = []
    experience_level: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[str] = None
    created_at: datetime

class Application(CamelModel):
    id: str
    user_id: str
    resume_id: str
    job_description_id: str
    status: str
    match_percentage: int = 0
    applied_at: datetime
    interview_date: Optional[datetime] = None
    notes: Optional[str] = None

class CoverLetter(CamelModel):
    id: str
    user_id: str
    application_id: str
    content: str
    created_at: datetime

class InterviewQuestionSet(CamelModel):
    id: str
    user_id: str
    job_description_id: str
    general_questions: List[str] = []
    technical_questions: List[str] = []
    behavioral_questions: List[str] = []
    created_at: datetime

class SkillGap(CamelModel):
    id: str
    user_id: str
    missing_skills: List[str] = []
    priority: str
    recommendations: Optional[str] = None
    created_at: datetime

class AutoApplyResponse(CamelModel):
    application: Application
    message: str

class AppliedJob(CamelModel):
    application: Application
    match_percentage: int

class SkippedJob(CamelModel):
    job_description: JobDescription
    reason: str

class BulkAutoApplyResult(CamelModel):
    applied: int
    skipped: int
    applications: List[AppliedJob]
    skipped_details: List[SkippedJob]
    message: str

class DashboardStats(CamelModel):
    active_applications: int
    interviews: int
    offers: int
    avg_ats_score: int

import asyncio
import json
from types import SimpleNamespace

import pytest

from job_tracker import services
from job_tracker.errors import AnalysisUnavailableError


def install_model(monkeypatch, reply=None, error=None):
    """Replace genai.GenerativeModel with a stub returning ``reply``."""
    seen = {}

    class StubModel:
        def __init__(self, model_name, system_instruction=None, generation_config=None):
            seen["model_name"] = model_name
            seen["system_instruction"] = system_instruction
            seen["generation_config"] = generation_config

        async def generate_content_async(self, prompt, request_options=None):
            seen["prompt"] = prompt
            seen["request_options"] = request_options
            if error is not None:
                raise error
            return SimpleNamespace(text=reply)

    monkeypatch.setattr(services.genai, "GenerativeModel", StubModel)
    return seen


RESUME_REPLY = {
    "skills": ["Python", "Django"],
    "experience": "Five years building web backends",
    "education": "BSc Computer Science",
    "atsScore": 82,
    "strengths": ["Python"],
    "weaknesses": ["Testing"],
    "suggestions": "Add measurable outcomes",
}


def test_analyze_resume_parses_camel_case_reply(monkeypatch):
    seen = install_model(monkeypatch, json.dumps(RESUME_REPLY))

    result = asyncio.run(services.analyze_resume("Senior engineer with 5 years Python"))

    assert result.ats_score == 82
    assert result.skills == ["Python", "Django"]
    assert seen["generation_config"] == {"response_mime_type": "application/json"}
    assert "Senior engineer with 5 years Python" in seen["prompt"]
    assert "atsScore" in seen["prompt"]
    assert seen["request_options"] == {"timeout": services.REQUEST_TIMEOUT}


def test_analyze_resume_accepts_fenced_json(monkeypatch):
    install_model(monkeypatch, "```json\n" + json.dumps(RESUME_REPLY) + "\n```")

    assert asyncio.run(services.analyze_resume("text")).ats_score == 82


@pytest.mark.parametrize(
    "reply",
    [
        json.dumps({**RESUME_REPLY, "atsScore": 140}),
        json.dumps({k: v for k, v in RESUME_REPLY.items() if k != "skills"}),
        "not json at all",
        "",
        None,
    ],
    ids=["score-out-of-range", "missing-key", "not-json", "empty", "none"],
)
def test_analyze_resume_rejects_unusable_replies(monkeypatch, reply):
    install_model(monkeypatch, reply)

    with pytest.raises(AnalysisUnavailableError):
        asyncio.run(services.analyze_resume("text"))


def test_transport_failure_becomes_analysis_unavailable(monkeypatch):
    install_model(monkeypatch, error=ConnectionError("boom"))

    with pytest.raises(AnalysisUnavailableError, match="boom"):
        asyncio.run(services.analyze_job_match("resume", "job", "Engineer"))


def test_analyze_job_match_validates_ratios(monkeypatch):
    reply = {
        "matchPercentage": 77,
        "skillsMatch": "15/18",
        "experienceMatch": "4/5",
        "educationMatch": True,
        "missingSkills": ["Kafka"],
    }
    install_model(monkeypatch, json.dumps(reply))
    result = asyncio.run(services.analyze_job_match("resume", "job", "Data Engineer"))
    assert result.match_percentage == 77
    assert result.missing_skills == ["Kafka"]

    install_model(monkeypatch, json.dumps({**reply, "skillsMatch": "most of them"}))
    with pytest.raises(AnalysisUnavailableError):
        asyncio.run(services.analyze_job_match("resume", "job", "Data Engineer"))


def test_generate_cover_letter_returns_plain_text(monkeypatch):
    seen = install_model(monkeypatch, "  Dear Hiring Manager,\nThanks.  ")

    letter = asyncio.run(services.generate_cover_letter("resume", "job", "Engineer", "Acme"))

    assert letter == "Dear Hiring Manager,\nThanks."
    assert seen["generation_config"] is None
    assert "Company: Acme" in seen["prompt"]


def test_generate_cover_letter_empty_reply(monkeypatch):
    install_model(monkeypatch, "   ")

    with pytest.raises(AnalysisUnavailableError):
        asyncio.run(services.generate_cover_letter("resume", "job", "Engineer", "Acme"))


def test_generate_interview_questions(monkeypatch):
    reply = {"general": ["Why us?"], "technical": ["What is a closure?"], "behavioral": ["Describe a failure."]}
    install_model(monkeypatch, json.dumps(reply))

    result = asyncio.run(services.generate_interview_questions("job", "Engineer"))

    assert result.technical == ["What is a closure?"]


def test_analyze_skill_gap_normalizes_priority(monkeypatch):
    reply = {"missingSkills": ["Terraform"], "priority": " High ", "recommendations": "Practice IaC"}
    install_model(monkeypatch, json.dumps(reply))
    assert asyncio.run(services.analyze_skill_gap("resume", "job")).priority == "high"

    install_model(monkeypatch, json.dumps({**reply, "priority": "urgent"}))
    with pytest.raises(AnalysisUnavailableError):
        asyncio.run(services.analyze_skill_gap("resume", "job"))


def test_extract_text_from_plain_text_upload():
    assert services.extract_text_from_file("cv.txt", "Python dev".encode("utf-8"), "text/plain") == "Python dev"
    assert services.extract_text_from_file("cv.doc", b"Python \xff dev", "application/msword") == "Python  dev"


def test_extract_text_prefers_content_type_over_extension():
    assert services.extract_text_from_file("cv.pdf", b"Plain text resume", "text/plain") == "Plain text resume"
    # Unknown content type falls back to the extension
    assert services.extract_text_from_file("cv.pdf", b"not a pdf", "application/octet-stream") == ""


def test_extract_text_from_broken_pdf_is_empty():
    assert services.extract_text_from_file("cv.pdf", b"not a pdf", "application/pdf") == ""

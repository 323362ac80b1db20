import os

# Must be set before the application modules are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GEMINI_API_KEY"] = "test-key"

import pytest
from fastapi.testclient import TestClient

from job_tracker import crud, schemas, services
from job_tracker.database import Base, SessionLocal, engine
from job_tracker.main import app


class FakeAnalysis:
    """Stands in for the Gemini-backed functions in ``services``.

    Match scores are looked up by job title; a value that is an exception is
    raised instead of returned.
    """

    def __init__(self):
        self.resume = schemas.ResumeAnalysis(
            skills=["Python", "SQL"],
            experience="5 years of backend development",
            education="BSc Computer Science",
            ats_score=82,
            strengths=["Python"],
            weaknesses=["No cloud experience"],
            suggestions="Quantify achievements",
        )
        self.match_scores = {}
        self.default_match = 80
        self.cover_letter = "Dear Hiring Manager,\n\nI am excited to apply."
        self.questions = schemas.InterviewQuestions(
            general=["Why this company?"],
            technical=["Explain Python generators."],
            behavioral=["Tell me about a conflict you resolved."],
        )
        self.skill_gap = schemas.SkillGapAnalysis(
            missing_skills=["Kubernetes"],
            priority="high",
            recommendations="Take a Kubernetes course",
        )
        self.calls = []

    @staticmethod
    def _result(value):
        if isinstance(value, Exception):
            raise value
        return value

    async def analyze_resume(self, resume_text):
        self.calls.append(("analyze_resume", resume_text))
        return self._result(self.resume)

    async def analyze_job_match(self, resume_text, job_text, job_title):
        self.calls.append(("analyze_job_match", job_title))
        value = self._result(self.match_scores.get(job_title, self.default_match))
        return schemas.JobMatchAnalysis(
            match_percentage=value,
            skills_match="3/4",
            experience_match="4/5",
            education_match=True,
            missing_skills=["Go"],
        )

    async def generate_cover_letter(self, resume_text, job_text, job_title, company):
        self.calls.append(("generate_cover_letter", job_title))
        return self._result(self.cover_letter)

    async def generate_interview_questions(self, job_text, job_title):
        self.calls.append(("generate_interview_questions", job_title))
        return self._result(self.questions)

    async def analyze_skill_gap(self, resume_text, job_text):
        self.calls.append(("analyze_skill_gap", job_text))
        return self._result(self.skill_gap)


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def fake_analysis(monkeypatch):
    fake = FakeAnalysis()
    for name in (
        "analyze_resume",
        "analyze_job_match",
        "generate_cover_letter",
        "generate_interview_questions",
        "analyze_skill_gap",
    ):
        monkeypatch.setattr(services, name, getattr(fake, name))
    return fake


@pytest.fixture
def user_id(db):
    return crud.create_user(db, "jane", "s3cret").id


@pytest.fixture
def make_resume(db, user_id):
    def _make(ats_score=70, content="Senior engineer with 5 years Python", owner=None):
        return crud.create_resume(
            db,
            user_id=owner or user_id,
            filename="resume.txt",
            content=content,
            skills=["Python"],
            ats_score=ats_score,
        ).id
    return _make


@pytest.fixture
def make_job(db, user_id):
    def _make(title="Backend Engineer", company="Acme", owner=None):
        return crud.create_job_description(
            db,
            user_id=owner or user_id,
            title=title,
            company=company,
            content=f"{title} at {company}. Python, SQL, AWS.",
        ).id
    return _make

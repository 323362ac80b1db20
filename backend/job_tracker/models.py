# backend/job_tracker/models.py
import uuid
import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, JSON, Text, DateTime
from sqlalchemy.orm import relationship
from .database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class User(Base):
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=_new_id)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    resumes = relationship("Resume", back_populates="owner")
    job_descriptions = relationship("JobDescription", back_populates="owner")


class Resume(Base):
    __tablename__ = "resumes"
    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    filename = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    skills = Column(JSON, default=list)
    experience = Column(Text)
    education = Column(Text)
    ats_score = Column(Integer, default=0)
    strengths = Column(JSON, default=list)
    weaknesses = Column(JSON, default=list)
    suggestions = Column(Text)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)

    owner = relationship("User", back_populates="resumes")


class JobDescription(Base):
    __tablename__ = "job_descriptions"
    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    title = Column(String, index=True, nullable=False)
    company = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    required_skills = Column(JSON, default=list)
    experience_level = Column(String)
    location = Column(String)
    salary = Column(String)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)

    owner = relationship("User", back_populates="job_descriptions")


class Application(Base):
    __tablename__ = "applications"
    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    resume_id = Column(String(36), ForeignKey("resumes.id"), nullable=False)
    job_description_id = Column(String(36), ForeignKey("job_descriptions.id"), nullable=False)
    status = Column(String, nullable=False, default="applied")  # draft, applied, interview, offer, rejected
    match_percentage = Column(Integer, default=0)
    applied_at = Column(DateTime(timezone=True), default=_utcnow, index=True)
    interview_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    cover_letters = relationship("CoverLetter", back_populates="application")


class CoverLetter(Base):
    __tablename__ = "cover_letters"
    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    application_id = Column(String(36), ForeignKey("applications.id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)

    application = relationship("Application", back_populates="cover_letters")


class InterviewQuestionSet(Base):
    __tablename__ = "interview_questions"
    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    job_description_id = Column(String(36), ForeignKey("job_descriptions.id"), nullable=False)
    general_questions = Column(JSON, default=list)
    technical_questions = Column(JSON, default=list)
    behavioral_questions = Column(JSON, default=list)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)


class SkillGap(Base):
    __tablename__ = "skill_gaps"
    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    missing_skills = Column(JSON, default=list)
    priority = Column(String, nullable=False)  # high, medium, low
    recommendations = Column(Text)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)

# backend/job_tracker/crud.py
"""Typed data access for every table. No business rules live here.

Create helpers commit by default. Pass ``commit=False`` to only flush, so a
caller can group several writes into one transaction and commit (or roll
back) them together.
"""
import math
from typing import Any, Dict, List, Optional

import bcrypt
from sqlalchemy.orm import Session

from . import models


def _save(db: Session, obj, commit: bool):
    db.add(obj)
    if commit:
        db.commit()
        db.refresh(obj)
    else:
        db.flush()
    return obj


def _apply_fields(db: Session, obj, fields: Dict[str, Any]):
    for key, value in fields.items():
        setattr(obj, key, value)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(obj)
    return obj


# --- Users ---

def get_user(db: Session, user_id: str) -> Optional[models.User]:
    return db.get(models.User, user_id)


def get_user_by_username(db: Session, username: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.username == username).first()


def create_user(db: Session, username: str, password: str) -> models.User:
    password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
    return _save(db, models.User(username=username, password_hash=password_hash), commit=True)


# --- Resumes ---

def create_resume(db: Session, commit: bool = True, **fields) -> models.Resume:
    return _save(db, models.Resume(**fields), commit)


def get_resumes_by_user(db: Session, user_id: str) -> List[models.Resume]:
    return db.query(models.Resume).filter(
        models.Resume.user_id == user_id
    ).order_by(models.Resume.created_at.desc()).all()


def get_resume(db: Session, resume_id: str) -> Optional[models.Resume]:
    return db.get(models.Resume, resume_id)


def update_resume(db: Session, resume_id: str, fields: Dict[str, Any]) -> Optional[models.Resume]:
    resume = get_resume(db, resume_id)
    if resume is None:
        return None
    return _apply_fields(db, resume, fields)


# --- Job descriptions ---

def create_job_description(db: Session, commit: bool = True, **fields) -> models.JobDescription:
    return _save(db, models.JobDescription(**fields), commit)


def get_job_descriptions_by_user(db: Session, user_id: str) -> List[models.JobDescription]:
    return db.query(models.JobDescription).filter(
        models.JobDescription.user_id == user_id
    ).order_by(models.JobDescription.created_at.desc()).all()


def get_job_description(db: Session, job_description_id: str) -> Optional[models.JobDescription]:
    return db.get(models.JobDescription, job_description_id)


# --- Applications ---

def create_application(db: Session, commit: bool = True, **fields) -> models.Application:
    return _save(db, models.Application(**fields), commit)


def get_applications_by_user(db: Session, user_id: str) -> List[models.Application]:
    return db.query(models.Application).filter(
        models.Application.user_id == user_id
    ).order_by(models.Application.applied_at.desc()).all()


def get_application(db: Session, application_id: str) -> Optional[models.Application]:
    return db.get(models.Application, application_id)


def update_application(db: Session, application_id: str, fields: Dict[str, Any]) -> Optional[models.Application]:
    application = get_application(db, application_id)
    if application is None:
        return None
    return _apply_fields(db, application, fields)


def update_application_status(db: Session, application_id: str, status: str) -> Optional[models.Application]:
    return update_application(db, application_id, {"status": status})


# --- Cover letters ---

def create_cover_letter(db: Session, commit: bool = True, **fields) -> models.CoverLetter:
    return _save(db, models.CoverLetter(**fields), commit)


def get_cover_letters_by_user(db: Session, user_id: str) -> List[models.CoverLetter]:
    return db.query(models.CoverLetter).filter(
        models.CoverLetter.user_id == user_id
    ).order_by(models.CoverLetter.created_at.desc()).all()


def get_cover_letter_by_application(db: Session, application_id: str) -> Optional[models.CoverLetter]:
    return db.query(models.CoverLetter).filter(
        models.CoverLetter.application_id == application_id
    ).order_by(models.CoverLetter.created_at.desc()).first()


# --- Interview questions ---

def create_interview_questions(db: Session, commit: bool = True, **fields) -> models.InterviewQuestionSet:
    return _save(db, models.InterviewQuestionSet(**fields), commit)


def get_interview_questions_by_job(db: Session, job_description_id: str) -> Optional[models.InterviewQuestionSet]:
    """Latest question set generated for a job description."""
    return db.query(models.InterviewQuestionSet).filter(
        models.InterviewQuestionSet.job_description_id == job_description_id
    ).order_by(models.InterviewQuestionSet.created_at.desc()).first()


# --- Skill gaps ---

def create_skill_gap(db: Session, commit: bool = True, **fields) -> models.SkillGap:
    return _save(db, models.SkillGap(**fields), commit)


def get_skill_gaps_by_user(db: Session, user_id: str) -> List[models.SkillGap]:
    return db.query(models.SkillGap).filter(
        models.SkillGap.user_id == user_id
    ).order_by(models.SkillGap.created_at.desc()).all()


# --- Dashboard ---

def get_dashboard_stats(db: Session, user_id: str) -> Dict[str, int]:
    applications = db.query(models.Application).filter(models.Application.user_id == user_id).all()
    resumes = db.query(models.Resume).filter(models.Resume.user_id == user_id).all()

    active = sum(1 for a in applications if a.status in ("applied", "interview"))
    interviews = sum(1 for a in applications if a.status == "interview")
    offers = sum(1 for a in applications if a.status == "offer")
    avg_ats = 0
    if resumes:
        mean = sum(r.ats_score or 0 for r in resumes) / len(resumes)
        # Half-up rounding, not Python's round-half-to-even
        avg_ats = int(math.floor(mean + 0.5))

    return {
        "active_applications": active,
        "interviews": interviews,
        "offers": offers,
        "avg_ats_score": avg_ats,
    }

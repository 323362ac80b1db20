# backend/job_tracker/workflows.py
"""User-facing workflows: load records, call the analysis gateway, persist.

Every write is made on behalf of an explicit ``user_id``; there is no
default user.
"""
import logging
from typing import Any, Dict, List, Set, Tuple

from sqlalchemy.orm import Session

from . import crud, models, schemas, services
from .errors import AnalysisUnavailableError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_MATCH_THRESHOLD = schemas.DEFAULT_MATCH_THRESHOLD
AUTO_APPLY_NOTE = "Auto-applied via AI Job Tracker"


def _require_user(db: Session, user_id: str) -> models.User:
    user = crud.get_user(db, user_id)
    if user is None:
        raise NotFoundError("User")
    return user


def _require_resume(db: Session, resume_id: str) -> models.Resume:
    resume = crud.get_resume(db, resume_id)
    if resume is None:
        raise NotFoundError("Resume")
    return resume


def _require_job_description(db: Session, job_description_id: str) -> models.JobDescription:
    job = crud.get_job_description(db, job_description_id)
    if job is None:
        raise NotFoundError("Job description")
    return job


# --- Resumes ---

async def upload_resume(db: Session, user_id: str, filename: str, content: str) -> models.Resume:
    """Analyze the resume text and store it. Nothing is stored if analysis fails."""
    _require_user(db, user_id)
    analysis = await services.analyze_resume(content)
    resume = crud.create_resume(
        db,
        user_id=user_id,
        filename=filename,
        content=content,
        **analysis.model_dump(),
    )
    logger.info("Stored resume %s for user %s (ATS %s)", resume.id, user_id, resume.ats_score)
    return resume


def update_resume(db: Session, resume_id: str, payload: schemas.ResumeUpdate) -> models.Resume:
    resume = crud.update_resume(db, resume_id, payload.model_dump(exclude_unset=True))
    if resume is None:
        raise NotFoundError("Resume")
    return resume


# --- Job descriptions ---

def create_job_description(db: Session, payload: schemas.JobDescriptionCreate) -> models.JobDescription:
    _require_user(db, payload.user_id)
    job = crud.create_job_description(db, **payload.model_dump())
    logger.info("Stored job description %s (%s at %s)", job.id, job.title, job.company)
    return job


async def match(db: Session, resume_id: str, job_description_id: str) -> schemas.JobMatchResult:
    """Score a resume against a job description. Nothing is persisted."""
    resume = _require_resume(db, resume_id)
    job = _require_job_description(db, job_description_id)
    analysis = await services.analyze_job_match(resume.content, job.content, job.title)
    return schemas.JobMatchResult(**analysis.model_dump(), job_description_id=job.id)


# --- Applications ---

def apply(db: Session, payload: schemas.ApplicationCreate) -> models.Application:
    _require_user(db, payload.user_id)
    _require_resume(db, payload.resume_id)
    _require_job_description(db, payload.job_description_id)
    application = crud.create_application(db, **payload.model_dump())
    logger.info("Created %s application %s for user %s", application.status, application.id, payload.user_id)
    return application


def auto_apply(db: Session, user_id: str, job_description_id: str, resume_id: str) -> Dict[str, Any]:
    _require_user(db, user_id)
    job = _require_job_description(db, job_description_id)
    _require_resume(db, resume_id)
    application = crud.create_application(
        db,
        user_id=user_id,
        resume_id=resume_id,
        job_description_id=job.id,
        status="applied",
        notes=AUTO_APPLY_NOTE,
    )
    logger.info("Auto-applied user %s to job %s", user_id, job.id)
    return {"application": application, "message": "Successfully auto-applied to position"}


def update_application_status(db: Session, application_id: str, status: str) -> models.Application:
    application = crud.update_application_status(db, application_id, status)
    if application is None:
        raise NotFoundError("Application")
    logger.info("Application %s moved to %s", application_id, status)
    return application


def update_application(db: Session, application_id: str, payload: schemas.ApplicationUpdate) -> models.Application:
    application = crud.update_application(db, application_id, payload.model_dump(exclude_unset=True))
    if application is None:
        raise NotFoundError("Application")
    return application


async def bulk_auto_apply(
    db: Session,
    user_id: str,
    resume_id: str,
    match_threshold: int = DEFAULT_MATCH_THRESHOLD,
) -> Dict[str, Any]:
    """Apply a resume to every sufficiently matching job the user has saved.

    Jobs are processed one at a time. A job is skipped when the resume was
    already used for it, when its match analysis fails, or when the match is
    below ``match_threshold``. Existing applications are read once up front;
    applications created during the batch are added to that index so a job
    is never applied to twice within one call. Two batches running at the
    same time for the same user can still both apply to the same job.
    """
    _require_user(db, user_id)
    resume = _require_resume(db, resume_id)
    jobs = crud.get_job_descriptions_by_user(db, user_id)

    applied_pairs: Set[Tuple[str, str]] = {
        (a.resume_id, a.job_description_id) for a in crud.get_applications_by_user(db, user_id)
    }
    applications: List[Dict[str, Any]] = []
    skipped: List[Dict[str, Any]] = []

    for job in jobs:
        key = (resume.id, job.id)
        if key in applied_pairs:
            logger.info("Bulk apply: skipping job %s, already applied", job.id)
            skipped.append({"job_description": job, "reason": "Already applied"})
            continue

        try:
            result = await services.analyze_job_match(resume.content, job.content, job.title)
        except AnalysisUnavailableError as e:
            logger.warning("Bulk apply: match analysis failed for job %s: %s", job.id, e)
            skipped.append({"job_description": job, "reason": "Processing error"})
            continue

        percentage = result.match_percentage
        if percentage >= match_threshold:
            application = crud.create_application(
                db,
                user_id=user_id,
                resume_id=resume.id,
                job_description_id=job.id,
                status="applied",
                match_percentage=percentage,
                notes=f"Auto-applied via bulk process ({percentage}% match)",
            )
            applied_pairs.add(key)
            applications.append({"application": application, "match_percentage": percentage})
        else:
            logger.info("Bulk apply: skipping job %s, %s%% < %s%%", job.id, percentage, match_threshold)
            skipped.append({
                "job_description": job,
                "reason": f"Low match score ({percentage}% < {match_threshold}%)",
            })

    return {
        "applied": len(applications),
        "skipped": len(skipped),
        "applications": applications,
        "skipped_details": skipped,
        "message": f"Bulk auto-apply completed: {len(applications)} applications submitted",
    }


# --- Generated artifacts ---

async def generate_cover_letter(db: Session, user_id: str, resume_id: str, job_description_id: str) -> models.CoverLetter:
    """Generate a cover letter and file it under a new draft application.

    The draft application and the cover letter are committed together. A new
    draft is created on every call, even for a pair that already has one.
    """
    _require_user(db, user_id)
    resume = _require_resume(db, resume_id)
    job = _require_job_description(db, job_description_id)

    content = await services.generate_cover_letter(resume.content, job.content, job.title, job.company)

    try:
        application = crud.create_application(
            db,
            commit=False,
            user_id=user_id,
            resume_id=resume.id,
            job_description_id=job.id,
            status="draft",
            match_percentage=0,
        )
        cover_letter = crud.create_cover_letter(
            db,
            commit=False,
            user_id=user_id,
            application_id=application.id,
            content=content,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(cover_letter)
    logger.info("Generated cover letter %s with draft application %s", cover_letter.id, application.id)
    return cover_letter


async def generate_interview_questions(db: Session, user_id: str, job_description_id: str) -> models.InterviewQuestionSet:
    _require_user(db, user_id)
    job = _require_job_description(db, job_description_id)
    questions = await services.generate_interview_questions(job.content, job.title)
    return crud.create_interview_questions(
        db,
        user_id=user_id,
        job_description_id=job.id,
        general_questions=questions.general,
        technical_questions=questions.technical,
        behavioral_questions=questions.behavioral,
    )


async def analyze_skill_gap(db: Session, user_id: str, resume_id: str, job_description_id: str) -> models.SkillGap:
    _require_user(db, user_id)
    resume = _require_resume(db, resume_id)
    job = _require_job_description(db, job_description_id)
    analysis = await services.analyze_skill_gap(resume.content, job.content)
    return crud.create_skill_gap(db, user_id=user_id, **analysis.model_dump())

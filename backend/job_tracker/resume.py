# backend/job_tracker/resume.py
import logging
from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from . import crud, schemas, services, workflows
from .database import get_db

router = APIRouter()

logger = logging.getLogger(__name__)


@router.post("/upload", response_model=schemas.Resume)
async def upload_resume(
    resume: UploadFile = File(...),
    user_id: str = Form(..., alias="userId"),
    db: Session = Depends(get_db),
):
    content_type = (resume.content_type or "").split(";")[0].strip().lower()
    if content_type not in services.ACCEPTED_UPLOAD_TYPES:
        raise HTTPException(status_code=400, detail="Only PDF, Word or plain text resumes are accepted")

    raw = await resume.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Resume file is empty")

    text = services.extract_text_from_file(resume.filename, raw, content_type)
    if not text.strip():
        raise HTTPException(status_code=400, detail="Resume file is empty or unreadable")

    logger.info("Analyzing uploaded resume %s for user %s", resume.filename, user_id)
    return await workflows.upload_resume(db, user_id, resume.filename or "resume", text)


@router.get("/{user_id}", response_model=List[schemas.Resume])
def list_resumes(user_id: str, db: Session = Depends(get_db)):
    return crud.get_resumes_by_user(db, user_id)


@router.patch("/{resume_id}", response_model=schemas.Resume)
def update_resume(resume_id: str, payload: schemas.ResumeUpdate, db: Session = Depends(get_db)):
    return workflows.update_resume(db, resume_id, payload)

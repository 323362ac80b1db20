# backend/job_tracker/jd.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from . import crud, schemas, workflows
from .database import get_db

router = APIRouter()


@router.post("/job-descriptions", response_model=schemas.JobDescription)
def create_job_description(payload: schemas.JobDescriptionCreate, db: Session = Depends(get_db)):
    return workflows.create_job_description(db, payload)


@router.get("/job-descriptions/{user_id}", response_model=List[schemas.JobDescription])
def list_job_descriptions(user_id: str, db: Session = Depends(get_db)):
    return crud.get_job_descriptions_by_user(db, user_id)


@router.post("/job-match", response_model=schemas.JobMatchResult)
async def match_resume_to_job(payload: schemas.JobMatchRequest, db: Session = Depends(get_db)):
    """Transient match score; nothing is stored."""
    return await workflows.match(db, payload.resume_id, payload.job_description_id)

# backend/job_tracker/applications.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from . import crud, schemas, workflows
from .database import get_db

router = APIRouter()


@router.post("/applications", response_model=schemas.Application)
def create_application(payload: schemas.ApplicationCreate, db: Session = Depends(get_db)):
    return workflows.apply(db, payload)


@router.get("/applications/{user_id}", response_model=List[schemas.Application])
def list_applications(user_id: str, db: Session = Depends(get_db)):
    return crud.get_applications_by_user(db, user_id)


@router.patch("/applications/{application_id}/status", response_model=schemas.Application)
def update_application_status(application_id: str, payload: schemas.StatusUpdate, db: Session = Depends(get_db)):
    return workflows.update_application_status(db, application_id, payload.status)


@router.patch("/applications/{application_id}", response_model=schemas.Application)
def update_application(application_id: str, payload: schemas.ApplicationUpdate, db: Session = Depends(get_db)):
    """Partial update: status, interview date and notes."""
    return workflows.update_application(db, application_id, payload)


@router.post("/auto-apply", response_model=schemas.AutoApplyResponse)
def auto_apply(payload: schemas.AutoApplyRequest, db: Session = Depends(get_db)):
    return workflows.auto_apply(db, payload.user_id, payload.job_description_id, payload.resume_id)


@router.post("/bulk-auto-apply", response_model=schemas.BulkAutoApplyResult)
async def bulk_auto_apply(payload: schemas.BulkAutoApplyRequest, db: Session = Depends(get_db)):
    return await workflows.bulk_auto_apply(db, payload.user_id, payload.resume_id, payload.match_threshold)

# backend/job_tracker/artifacts.py
# Generated artifacts: cover letters, interview question sets, skill gaps.
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from . import crud, schemas, workflows
from .database import get_db
from .errors import NotFoundError

router = APIRouter()


@router.post("/cover-letters/generate", response_model=schemas.CoverLetter)
async def generate_cover_letter(payload: schemas.CoverLetterRequest, db: Session = Depends(get_db)):
    return await workflows.generate_cover_letter(db, payload.user_id, payload.resume_id, payload.job_description_id)


@router.get("/cover-letters/{user_id}", response_model=List[schemas.CoverLetter])
def list_cover_letters(user_id: str, db: Session = Depends(get_db)):
    return crud.get_cover_letters_by_user(db, user_id)


@router.get("/cover-letters/application/{application_id}", response_model=schemas.CoverLetter)
def get_cover_letter_for_application(application_id: str, db: Session = Depends(get_db)):
    cover_letter = crud.get_cover_letter_by_application(db, application_id)
    if cover_letter is None:
        raise NotFoundError("Cover letter")
    return cover_letter


@router.post("/interview-questions/generate", response_model=schemas.InterviewQuestionSet)
async def generate_interview_questions(payload: schemas.InterviewQuestionsRequest, db: Session = Depends(get_db)):
    return await workflows.generate_interview_questions(db, payload.user_id, payload.job_description_id)


@router.get("/interview-questions/job/{job_description_id}", response_model=schemas.InterviewQuestionSet)
def get_interview_questions(job_description_id: str, db: Session = Depends(get_db)):
    questions = crud.get_interview_questions_by_job(db, job_description_id)
    if questions is None:
        raise NotFoundError("Interview questions")
    return questions


@router.post("/skill-gap/analyze", response_model=schemas.SkillGap)
async def analyze_skill_gap(payload: schemas.SkillGapRequest, db: Session = Depends(get_db)):
    return await workflows.analyze_skill_gap(db, payload.user_id, payload.resume_id, payload.job_description_id)


@router.get("/skill-gaps/{user_id}", response_model=List[schemas.SkillGap])
def list_skill_gaps(user_id: str, db: Session = Depends(get_db)):
    return crud.get_skill_gaps_by_user(db, user_id)

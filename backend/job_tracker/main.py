# backend/job_tracker/main.py
import os
import logging

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .database import engine, get_db, Base
from . import crud, schemas
from .errors import AnalysisUnavailableError, NotFoundError
from .users import router as users_router
from .resume import router as resume_router
from .jd import router as jd_router
from .applications import router as applications_router
from .artifacts import router as artifacts_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="AI Job Tracker API")

origins = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if o.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Error responses: always {"message": ...} ---

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"message": str(exc)})


@app.exception_handler(AnalysisUnavailableError)
async def analysis_unavailable_handler(request: Request, exc: AnalysisUnavailableError):
    return JSONResponse(status_code=500, content={"message": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        problems.append(f"{field}: {err.get('msg')}" if field else err.get("msg", "invalid value"))
    return JSONResponse(status_code=400, content={"message": "Invalid request data: " + "; ".join(problems)})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})

# --- API Endpoints ---

@app.get("/api/dashboard/{user_id}", response_model=schemas.DashboardStats, tags=["dashboard"])
def dashboard_stats(user_id: str, db: Session = Depends(get_db)):
    return crud.get_dashboard_stats(db, user_id)

# --- Include Routers ---
app.include_router(users_router, prefix="/api/users", tags=["users"])
app.include_router(resume_router, prefix="/api/resumes", tags=["resumes"])
app.include_router(jd_router, prefix="/api", tags=["job-descriptions"])
app.include_router(applications_router, prefix="/api", tags=["applications"])
app.include_router(artifacts_router, prefix="/api", tags=["artifacts"])

from typing import Any, Dict

import structlog
from fastapi import Body, Depends, FastAPI, Path, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

import crud
import schemas
from auth import TokenPayload, ensure_admin
from database import create_db_and_tables, get_db
from errors import ApiError
from observability import init_observability
from request_id_middleware import RequestIdMiddleware
from settings import get_settings

# jobs.id is a 32-bit integer column
MAX_JOB_ID = 2**31 - 1


# Initialise observability before creating app
init_observability()
logger = structlog.get_logger(__name__)

# Create DB tables on startup
create_db_and_tables()

app = FastAPI(
    title="Jobly",
    description="Jobs API: listing, search and admin-managed job postings",
    version="0.1.0",
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestIdMiddleware)


# --- Error responders --- #
def _error_response(message: Any, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "status": status_code}},
    )


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message, exc_info=exc)
    return _error_response(exc.message, exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return _error_response(schemas.validation_messages(exc), status.HTTP_400_BAD_REQUEST)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.detail, exc.status_code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error", path=request.url.path, exc_info=exc)
    return _error_response("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.get("/")
async def read_root():
    return {"message": "Jobly API - Ready"}


# --- Job Endpoints ---
@app.post(
    "/jobs",
    response_model=schemas.JobResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Jobs"],
)
def create_job_endpoint(
    body: Dict[str, Any] = Body(...),
    admin: TokenPayload = Depends(ensure_admin),
    db: Session = Depends(get_db),
):
    """Create a job. Admin only.

    Body: { title, salary, equity, companyHandle }
    """
    job_in = schemas.validate_payload(schemas.JobNew, body)
    job = crud.create_job(db=db, job=job_in)
    logger.info("Job posted", job_id=job["id"], username=admin.username)
    return {"job": job}


@app.get("/jobs", response_model=schemas.JobListResponse, tags=["Jobs"])
def get_jobs_endpoint(request: Request, db: Session = Depends(get_db)):
    """List jobs, optionally filtered by ``title``, ``minSalary`` and ``hasEquity``.

    Any other query key is a 400.
    """
    filters = schemas.validate_payload(schemas.JobSearch, dict(request.query_params))
    jobs = crud.find_all_jobs(db=db, filters=filters)
    return {"jobs": jobs}


@app.get("/jobs/{job_id}", response_model=schemas.JobResponse, tags=["Jobs"])
def get_job_endpoint(job_id: int = Path(le=MAX_JOB_ID), db: Session = Depends(get_db)):
    job = crud.get_job(db=db, job_id=job_id)
    return {"job": job}


@app.patch("/jobs/{job_id}", response_model=schemas.JobResponse, tags=["Jobs"])
def update_job_endpoint(
    job_id: int = Path(le=MAX_JOB_ID),
    body: Dict[str, Any] = Body(...),
    admin: TokenPayload = Depends(ensure_admin),
    db: Session = Depends(get_db),
):
    """Partially update a job. Admin only.

    Body may hold any of { title, salary, equity }; ``id`` and
    ``companyHandle`` cannot be changed.
    """
    changes = schemas.validate_payload(schemas.JobUpdate, body)
    job = crud.update_job(db=db, job_id=job_id, data=changes.model_dump(exclude_unset=True))
    return {"job": job}


@app.delete("/jobs/{job_id}", response_model=schemas.DeletedResponse, tags=["Jobs"])
def delete_job_endpoint(
    job_id: int = Path(le=MAX_JOB_ID),
    admin: TokenPayload = Depends(ensure_admin),
    db: Session = Depends(get_db),
):
    logger.info("Attempting to delete job", job_id=job_id, username=admin.username)
    crud.remove_job(db=db, job_id=job_id)
    return {"deleted": str(job_id)}


# --- Main execution --- (for running with uvicorn)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

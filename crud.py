from decimal import Decimal
from typing import Any, Mapping, Optional

import structlog
from sqlalchemy.orm import Session

import schemas
from database import query
from errors import BadRequestError, NotFoundError
from sql import sql_for_partial_update

logger = structlog.get_logger(__name__)

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

UPDATABLE_JOB_FIELDS = frozenset({"title", "salary", "equity"})


def _format_equity(value: Any) -> Optional[str]:
    """Render a NUMERIC equity as a plain decimal string (never exponent notation).

    SQLite hands back REAL or INTEGER, PostgreSQL a Decimal.
    """
    if value is None:
        return None
    return format(Decimal(str(value)), "f")


def _to_job(row: dict) -> dict:
    return {**row, "equity": _format_equity(row["equity"])}


# --- Job CRUD ---
def create_job(db: Session, job: schemas.JobNew) -> dict:
    """Insert a job and return { id, title, salary, equity, companyHandle }.

    Constraint failures (unknown company, negative salary) surface as
    DataAccessError.
    """
    rows = query(
        db,
        f"""INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {JOB_COLUMNS}""",
        [job.title, job.salary, job.equity, job.company_handle],
        commit=True,
    )
    created = _to_job(rows[0])
    logger.info("Job created", job_id=created["id"], company_handle=job.company_handle)
    return created


def find_all_jobs(db: Session, filters: Optional[schemas.JobSearch] = None) -> list[dict]:
    """Find all jobs, ordered by title.

    Optional filters (each applied only when truthy, ANDed together):
    - title: case-insensitive substring match
    - min_salary: salary at least this much
    - has_equity: equity strictly greater than zero
    """
    sql = f"SELECT {JOB_COLUMNS} FROM jobs"
    query_values: list[Any] = []
    where_expressions: list[str] = []

    if filters is not None:
        if filters.title:
            query_values.append(f"%{filters.title}%")
            where_expressions.append(f"lower(title) LIKE lower(${len(query_values)})")

        if filters.min_salary:
            query_values.append(filters.min_salary)
            where_expressions.append(f"salary >= ${len(query_values)}")

        if filters.has_equity:
            where_expressions.append("equity > 0")

    if where_expressions:
        sql += " WHERE " + " AND ".join(where_expressions)

    sql += " ORDER BY title"
    return [_to_job(row) for row in query(db, sql, query_values)]


def get_job(db: Session, job_id: int) -> dict:
    rows = query(db, f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1", [job_id])
    if not rows:
        raise NotFoundError(f"No job: {job_id}")
    return _to_job(rows[0])


def update_job(db: Session, job_id: int, data: Mapping[str, Any]) -> dict:
    """Partially update a job; only the fields present in ``data`` change.

    ``data`` may contain title, salary and equity. Any other key is a
    BadRequestError, as is an empty ``data``. Raises NotFoundError when the
    job does not exist.
    """
    unknown = sorted(set(data) - UPDATABLE_JOB_FIELDS)
    if unknown:
        raise BadRequestError(f"Cannot update fields: {', '.join(unknown)}")

    set_cols, values = sql_for_partial_update(data, {"companyHandle": "company_handle"})
    id_var_idx = f"${len(values) + 1}"

    rows = query(
        db,
        f"""UPDATE jobs
            SET {set_cols}
            WHERE id = {id_var_idx}
            RETURNING {JOB_COLUMNS}""",
        [*values, job_id],
        commit=True,
    )
    if not rows:
        raise NotFoundError(f"No job: {job_id}")

    logger.info("Job updated", job_id=job_id, fields=list(data))
    return _to_job(rows[0])


def remove_job(db: Session, job_id: int) -> None:
    """Delete a job. Raises NotFoundError if there is no such job."""
    rows = query(db, "DELETE FROM jobs WHERE id = $1 RETURNING id", [job_id], commit=True)
    if not rows:
        raise NotFoundError(f"No job: {job_id}")
    logger.info("Job deleted", job_id=job_id)

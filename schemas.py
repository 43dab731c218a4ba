from typing import Any, List, Optional, Type, TypeVar, Union

from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from errors import BadRequestError

# A decimal string in [0, 1]: "0", "0.25", ".5", "1", "1.0"
EQUITY_PATTERN = r"^(0(\.[0-9]+)?|\.[0-9]+|1(\.0+)?)$"

ModelT = TypeVar("ModelT", bound=BaseModel)


# --- Job Schemas ---
class JobNew(BaseModel):
    """Body of POST /jobs. Types are checked strictly, as in a JSON schema."""

    model_config = ConfigDict(strict=True, extra="forbid")

    title: str = Field(min_length=1)
    salary: Optional[int] = Field(ge=0)
    equity: Optional[str] = Field(pattern=EQUITY_PATTERN)
    company_handle: str = Field(alias="companyHandle", min_length=1)


class JobUpdate(BaseModel):
    """Body of PATCH /jobs/{id}. ``id`` and ``companyHandle`` are rejected as extras."""

    model_config = ConfigDict(strict=True, extra="forbid")

    title: Optional[str] = Field(default=None, min_length=1)
    salary: Optional[int] = Field(default=None, ge=0)
    equity: Optional[str] = Field(default=None, pattern=EQUITY_PATTERN)

    @field_validator("title")
    @classmethod
    def title_not_null(cls, value: Optional[str]) -> str:
        # Validators skip defaults, so this only fires on an explicit null.
        if value is None:
            raise ValueError("title may not be null")
        return value


class JobSearch(BaseModel):
    """Query string of GET /jobs. Values arrive as strings and are coerced."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    min_salary: Optional[int] = Field(default=None, alias="minSalary", ge=0)
    has_equity: Optional[bool] = Field(default=None, alias="hasEquity")


class Job(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None
    company_handle: str = Field(alias="companyHandle")


class JobResponse(BaseModel):
    job: Job


class JobListResponse(BaseModel):
    jobs: List[Job]


class DeletedResponse(BaseModel):
    deleted: str


def validation_messages(exc: Union[ValidationError, RequestValidationError]) -> List[str]:
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"])
        messages.append(f"{location}: {err['msg']}" if location else err["msg"])
    return messages


def validate_payload(model: Type[ModelT], data: Any) -> ModelT:
    """Validate ``data`` against ``model``, raising BadRequestError with every message."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise BadRequestError(validation_messages(exc)) from exc

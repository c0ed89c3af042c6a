"""
Pydantic request/response models for the API.

Columns are snake_case in the database and camelCase on the wire; every
model uses the ``to_camel`` alias generator and accepts either spelling on
input.  Optional fields default to None so that rows with NULL columns
serialize cleanly.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Use case records ──────────────────────────────────────────────────────────

class UseCaseOut(_CamelModel):
    """A single use case row."""
    id: int = Field(..., description="Generated row ID", examples=[42])
    use_case: str = Field(..., description="Display name", examples=["Predictive Maintenance"])
    concept_description: str = Field(..., description="What the use case is about")
    concrete_implementation: str | None = Field(None, description="How it was implemented")
    benefit: str | None = Field(None, description="Value delivered")
    industry: str | None = Field(None, description="Industry tag", examples=["Manufacturing"])
    department: str | None = Field(None, description="Department tag", examples=["Operations"])
    value_chain_step: str | None = Field(None, description="Value chain step tag", examples=["Production"])
    url: str | None = Field(None, description="Reference link (stored as submitted)")
    created_at: str = Field(..., description="ISO-8601 UTC creation time")
    updated_at: str = Field(..., description="ISO-8601 UTC last update time")


# Field -> (label, min length, max length); min 0 means optional.
FIELD_LIMITS: dict[str, tuple[str, int, int]] = {
    "use_case": ("Use case", 3, 500),
    "concept_description": ("Concept description", 10, 10_000),
    "concrete_implementation": ("Concrete implementation", 0, 10_000),
    "benefit": ("Benefit", 0, 5_000),
    "industry": ("Industry", 0, 200),
    "department": ("Department", 0, 200),
    "value_chain_step": ("Value chain step", 0, 200),
    "url": ("URL", 0, 2_000),
}

# Wording of the "required" message where it differs from the length label
REQUIRED_LABELS: dict[str, str] = {"use_case": "Use case name"}


class UseCaseCreate(_CamelModel):
    """Request body for POST /api/use-cases.

    Strings are trimmed before length checks.  Optional fields that are
    blank after trimming are treated as absent.  The two required fields
    default to "" so a missing key gets the same message as a blank one.
    ``url`` is only length checked here; its shape is checked (non-fatally)
    by the route.
    """
    use_case: str = Field("", validate_default=True, description="Display name, 3-500 characters")
    concept_description: str = Field("", validate_default=True,
                                     description="Description, 10-10000 characters")
    concrete_implementation: str | None = Field(None, description="At most 10000 characters")
    benefit: str | None = Field(None, description="At most 5000 characters")
    industry: str | None = Field(None, description="At most 200 characters")
    department: str | None = Field(None, description="At most 200 characters")
    value_chain_step: str | None = Field(None, description="At most 200 characters")
    url: str | None = Field(None, description="Reference link")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [{
                "useCase": "Predictive Maintenance",
                "conceptDescription": "Use ML to predict failures",
                "industry": "Manufacturing",
            }]
        },
    )

    @field_validator("*", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("*")
    @classmethod
    def _check_length(cls, value: str | None, info) -> str | None:
        label, min_len, max_len = FIELD_LIMITS[info.field_name]
        if value is None or value == "":
            if min_len:
                required = REQUIRED_LABELS.get(info.field_name, label)
                raise PydanticCustomError("required", f"{required} is required")
            return None
        if min_len and not (min_len <= len(value) <= max_len):
            raise PydanticCustomError(
                "length",
                f"{label} must be between {min_len} and {max_len} characters",
            )
        if len(value) > max_len:
            raise PydanticCustomError(
                "length", f"{label} must not exceed {max_len} characters"
            )
        return value

    def to_record(self) -> dict[str, str | None]:
        """Column -> value mapping for utils.database.insert_use_case()."""
        return self.model_dump(by_alias=False)


# ── List / filter responses ───────────────────────────────────────────────────

class PaginationOut(_CamelModel):
    page: int = Field(..., examples=[1])
    limit: int = Field(..., examples=[20])
    total: int = Field(..., description="Total matching rows (before pagination)", examples=[137])
    total_pages: int = Field(..., examples=[7])
    has_next: bool
    has_prev: bool


class AppliedFilters(_CamelModel):
    """Echo of the filters applied to a list request (null when unused)."""
    industry: str | None = None
    value_chain_step: str | None = None
    department: str | None = None
    search: str | None = None


class UseCaseListResponse(_CamelModel):
    """Response body for GET /api/use-cases."""
    data: list[UseCaseOut]
    pagination: PaginationOut
    filters: AppliedFilters


class UseCaseDetailResponse(_CamelModel):
    """Response body for GET /api/use-cases/{id}."""
    data: UseCaseOut


class UseCaseCreatedResponse(_CamelModel):
    """Response body for POST /api/use-cases."""
    message: str = Field(..., examples=["Use case created successfully"])
    data: UseCaseOut


class FilterOptionsOut(_CamelModel):
    """Distinct values available for each filter dropdown."""
    industries: list[str]
    value_chain_steps: list[str]
    departments: list[str]


class HealthOut(BaseModel):
    status: str = Field(..., examples=["healthy"])
    timestamp: str = Field(..., description="Current server time (ISO-8601 UTC)")
    uptime: float = Field(..., description="Seconds since the application started")


# ── Error model ───────────────────────────────────────────────────────────────

class ErrorDetail(BaseModel):
    field: str = Field(..., examples=["useCase"])
    message: str = Field(..., examples=["Use case name is required"])


class ErrorResponse(BaseModel):
    """Standard error response body."""
    success: bool = Field(False)
    error: str = Field(..., description="Human-readable message", examples=["Validation failed"])
    code: str = Field(..., description="Stable error code", examples=["VALIDATION_ERROR"])
    details: list[ErrorDetail] | None = Field(None, description="Per-field messages")

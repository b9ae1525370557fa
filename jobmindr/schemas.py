# jobmindr/schemas.py
"""
Pydantic models shared by the JSON API and the dashboard forms.

Wire names are camelCase (jobTitle, companyName, ...); Python attributes
are snake_case and match the ORM columns one-to-one.
"""
from __future__ import annotations

import re
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ApplicationStatus(str, Enum):
    APPLIED = "Applied"
    IN_PROGRESS = "In progress"
    INTERVIEWING = "Interviewing"
    OFFER = "Offer"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"


class EmploymentType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    TEMPORARY = "temporary"


SORT_FIELDS = ("companyName", "dateApplied", "applicationStatus", "jobTitle")
DEFAULT_SORT_BY = "dateApplied"
DEFAULT_SORT_ORDER = "desc"


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value or ""))


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)


class _ApplicationFields(CamelModel):
    """Field-level rules common to create and update payloads."""

    @field_validator(
        "employment_type", "contact_email", "application_closing_date",
        mode="before", check_fields=False,
    )
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        # form posts send "" for untouched optional inputs
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("contact_email", check_fields=False)
    @classmethod
    def _check_email(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_email(v):
            raise PydanticCustomError("email", "Invalid email format")
        return v


class JobApplicationCreate(_ApplicationFields):
    """Payload for a new application. id/applicationNumber are server-assigned and ignored."""
    job_title: str = Field(min_length=1, max_length=40)
    company_name: str = Field(min_length=1, max_length=40)
    date_applied: date
    application_status: ApplicationStatus
    employment_type: Optional[EmploymentType] = None
    contact_email: Optional[str] = Field(default=None, max_length=40)
    application_closing_date: Optional[date] = None


class JobApplicationUpdate(_ApplicationFields):
    """
    Partial update. Only the fields present in the payload are applied;
    required columns may be omitted but not nulled.
    """
    id: int
    job_title: Optional[str] = Field(default=None, min_length=1, max_length=40)
    company_name: Optional[str] = Field(default=None, min_length=1, max_length=40)
    date_applied: Optional[date] = None
    application_status: Optional[ApplicationStatus] = None
    employment_type: Optional[EmploymentType] = None
    contact_email: Optional[str] = Field(default=None, max_length=40)
    application_closing_date: Optional[date] = None

    @field_validator("job_title", "company_name", "date_applied", "application_status")
    @classmethod
    def _required_not_null(cls, v: Any) -> Any:
        if v is None:
            raise PydanticCustomError("not_null", "Field cannot be null")
        return v

    def changes(self) -> Dict[str, Any]:
        """Column -> value for every field the caller actually sent."""
        return self.model_dump(exclude_unset=True, exclude={"id"})


class JobApplicationOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    application_number: str
    job_title: str
    company_name: str
    date_applied: date
    application_status: str
    employment_type: Optional[str] = None
    contact_email: Optional[str] = None
    application_closing_date: Optional[date] = None


class ApplicationFilters(CamelModel):
    """Listing query: optional filters (ANDed together) plus sort selection."""
    company_name: Optional[str] = None
    status: Optional[str] = None
    date_applied: Optional[date] = None
    sort_by: Optional[str] = None
    sort_order: Optional[Literal["asc", "desc"]] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def query_params(self) -> Dict[str, str]:
        """Non-empty values keyed by their wire names, ready for a query string."""
        return {k: str(v) for k, v in self.model_dump(by_alias=True, exclude_none=True).items()}


class BulkDeleteRequest(BaseModel):
    ids: List[StrictInt]


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


def format_errors(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten pydantic error dicts (ValidationError.errors()) into [{path, message}] pairs for the wire."""
    return [{"path": list(err.get("loc", ())), "message": err.get("msg", "")} for err in errors]


def field_messages(errors: List[Dict[str, Any]]) -> Dict[str, str]:
    """First message per top-level field name, for rendering next to form inputs."""
    out: Dict[str, str] = {}
    for err in errors:
        path = [p for p in err.get("path", []) if isinstance(p, str) and p != "body"]
        if path and path[0] not in out:
            out[path[0]] = err.get("message", "")
    return out

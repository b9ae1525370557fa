# jobmindr/services/storage.py
"""
Persistence gateway for job applications.

Every function takes the request's SQLAlchemy Session first, the same way
the routes hand their `db` around. Callers own the HTTP mapping; this
module only raises what SQLAlchemy raises.
"""
from __future__ import annotations

import logging
import secrets
import string
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import and_, asc, delete, desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt

from ..config import settings
from ..models import JobApplication
from ..schemas import (
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    ApplicationFilters,
    JobApplicationCreate,
)

logger = logging.getLogger(__name__)

APPLICATION_NUMBER_ALPHABET = string.ascii_uppercase + string.digits
APPLICATION_NUMBER_LENGTH = 10

# signed 64-bit INTEGER primary key
MAX_ROW_ID = 2**63 - 1

# wire sort key -> column
SORT_COLUMNS = {
    "companyName": JobApplication.company_name,
    "dateApplied": JobApplication.date_applied,
    "applicationStatus": JobApplication.application_status,
    "jobTitle": JobApplication.job_title,
}


def generate_application_number() -> str:
    """10 chars, each drawn uniformly from A-Z0-9."""
    return "".join(
        secrets.choice(APPLICATION_NUMBER_ALPHABET) for _ in range(APPLICATION_NUMBER_LENGTH)
    )


# ---------- CRUD ----------

def _insert_once(db: Session, values: Dict[str, Any]) -> JobApplication:
    """One INSERT with a fresh number; rolls back and re-raises on a unique hit."""
    row = JobApplication(application_number=generate_application_number(), **values)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(row)
    return row


def _log_collision(retry_state) -> None:
    logger.warning(
        "Application number rejected by the store (attempt %d), regenerating",
        retry_state.attempt_number,
    )


def create_job_application(
    db: Session, data: JobApplicationCreate, attempts: Optional[int] = None
) -> JobApplication:
    """
    Insert a new row with a freshly generated application number.
    A unique-constraint hit is retried with a new number; after `attempts`
    tries the IntegrityError propagates.
    """
    retryer = Retrying(
        retry=retry_if_exception_type(IntegrityError),
        stop=stop_after_attempt(attempts or settings.application_number_attempts),
        before_sleep=_log_collision,
        reraise=True,
    )
    row = retryer(_insert_once, db, data.model_dump())
    logger.info("Created job application %s (%s)", row.id, row.application_number)
    return row


def get_all_job_applications(db: Session) -> List[JobApplication]:
    stmt = select(JobApplication).order_by(desc(JobApplication.date_applied), JobApplication.id)
    return list(db.scalars(stmt))


def _storable_id(application_id: int) -> bool:
    return 0 < application_id <= MAX_ROW_ID


def get_job_application(db: Session, application_id: int) -> Optional[JobApplication]:
    if not _storable_id(application_id):
        return None
    return db.get(JobApplication, application_id)


def update_job_application(
    db: Session, application_id: int, updates: Dict[str, Any]
) -> Optional[JobApplication]:
    """Apply only the supplied columns; None when the id does not exist."""
    row = get_job_application(db, application_id)
    if row is None:
        return None
    for column, value in updates.items():
        if column in ("id", "application_number"):
            continue
        setattr(row, column, value)
    db.commit()
    db.refresh(row)
    logger.info("Updated job application %s: %s", application_id, sorted(updates))
    return row


def delete_job_applications(db: Session, ids: Iterable[int]) -> int:
    """Single DELETE ... WHERE id IN (...). Unknown ids are ignored; returns rows removed."""
    requested = list(ids)
    # ids the column cannot hold match nothing; the driver would reject them
    ids = [i for i in requested if _storable_id(i)]
    if not ids:
        return 0
    result = db.execute(delete(JobApplication).where(JobApplication.id.in_(ids)))
    db.commit()
    logger.info("Deleted %d of %d requested job application(s)", result.rowcount, len(requested))
    return result.rowcount


# ---------- listing ----------

def _filter_conditions(filters: ApplicationFilters) -> list:
    """Collect one predicate per supplied filter; the caller ANDs them."""
    conditions = []
    if filters.company_name:
        conditions.append(JobApplication.company_name.icontains(filters.company_name, autoescape=True))
    if filters.status:
        conditions.append(JobApplication.application_status == filters.status)
    if filters.date_applied:
        conditions.append(JobApplication.date_applied == filters.date_applied)
    return conditions


def _order_by(filters: ApplicationFilters):
    sort_by = filters.sort_by or DEFAULT_SORT_BY
    sort_order = filters.sort_order or DEFAULT_SORT_ORDER
    column = SORT_COLUMNS.get(sort_by)
    if column is None:
        # unknown field: default ordering regardless of requested direction
        return desc(SORT_COLUMNS[DEFAULT_SORT_BY])
    return asc(column) if sort_order == "asc" else desc(column)


def get_filtered_job_applications(db: Session, filters: ApplicationFilters) -> List[JobApplication]:
    stmt = select(JobApplication)
    conditions = _filter_conditions(filters)
    if conditions:
        stmt = stmt.where(and_(*conditions))
    stmt = stmt.order_by(_order_by(filters), JobApplication.id)
    return list(db.scalars(stmt))


def list_company_names(db: Session) -> List[str]:
    stmt = select(JobApplication.company_name).distinct().order_by(JobApplication.company_name)
    return list(db.scalars(stmt))

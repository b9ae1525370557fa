# jobmindr/routes/job_applications.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import (
    ApplicationFilters,
    BulkDeleteRequest,
    JobApplicationCreate,
    JobApplicationOut,
    JobApplicationUpdate,
)
from ..services import storage
from ..services.tracker import XLSX_MEDIA_TYPE, export_to_xlsx

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job-applications", tags=["job-applications"])


def listing_filters(
    company_name: Optional[str] = Query(None, alias="companyName"),
    status: Optional[str] = Query(None),
    date_applied: Optional[str] = Query(None, alias="dateApplied"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
) -> ApplicationFilters:
    """Query string -> ApplicationFilters; blanks count as absent."""
    try:
        return ApplicationFilters(
            company_name=company_name,
            status=status,
            date_applied=date_applied,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors())


def _validated(model, payload: Dict[str, Any]):
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


# --- list / export ---
@router.get("", response_model=List[JobApplicationOut])
def list_job_applications(
    filters: ApplicationFilters = Depends(listing_filters),
    db: Session = Depends(get_db),
):
    try:
        return storage.get_filtered_job_applications(db, filters)
    except Exception:
        logger.exception("Error fetching job applications")
        raise HTTPException(status_code=500, detail="Failed to fetch job applications")


@router.get("/companies", response_model=List[str])
def list_companies(db: Session = Depends(get_db)):
    """Distinct company names for the dashboard's company filter."""
    try:
        return storage.list_company_names(db)
    except Exception:
        logger.exception("Error fetching company names")
        raise HTTPException(status_code=500, detail="Failed to fetch company names")


@router.get("/export")
def export_job_applications(
    filters: ApplicationFilters = Depends(listing_filters),
    db: Session = Depends(get_db),
):
    """Same filters as the listing, delivered as an .xlsx download."""
    try:
        rows = storage.get_filtered_job_applications(db, filters)
        content = export_to_xlsx(rows)
    except Exception:
        logger.exception("Error exporting job applications")
        raise HTTPException(status_code=500, detail="Failed to export job applications")
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="job-applications.xlsx"'},
    )


# --- create ---
@router.post("", response_model=JobApplicationOut, status_code=201)
def create_job_application(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    data = _validated(JobApplicationCreate, payload)
    try:
        return storage.create_job_application(db, data)
    except Exception:
        logger.exception("Error creating job application")
        raise HTTPException(status_code=500, detail="Failed to create job application")


# --- update (any subset of fields) ---
@router.put("/{application_id}", response_model=JobApplicationOut)
def update_job_application(
    application_id: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: Session = Depends(get_db),
):
    try:
        app_id = int(application_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid ID")

    data = _validated(JobApplicationUpdate, {**(payload or {}), "id": app_id})
    try:
        row = storage.update_job_application(db, app_id, data.changes())
    except Exception:
        logger.exception("Error updating job application %s", app_id)
        raise HTTPException(status_code=500, detail="Failed to update job application")
    if row is None:
        raise HTTPException(status_code=404, detail="Job application not found")
    return row


# --- bulk delete ---
@router.delete("")
def delete_job_applications(payload: Any = Body(None), db: Session = Depends(get_db)):
    try:
        body = BulkDeleteRequest.model_validate(payload)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid IDs array")

    try:
        deleted = storage.delete_job_applications(db, body.ids)
    except Exception:
        logger.exception("Error deleting job applications")
        raise HTTPException(status_code=500, detail="Failed to delete job applications")
    return {
        "message": f"{len(body.ids)} job application(s) deleted successfully",
        "deleted": deleted,
    }

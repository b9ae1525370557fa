# jobmindr/routes/auth.py
"""
Login stub. Checks that an email and password were sent and that the email
looks like one; no credential store is consulted and no session is issued.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from ..schemas import LoginRequest, is_valid_email

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login")
def login(payload: Optional[Dict[str, Any]] = Body(None)):
    try:
        body = LoginRequest.model_validate(payload or {})
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Email and password are required")
    if not is_valid_email(body.email):
        raise HTTPException(status_code=400, detail="Invalid email format")

    logger.info("Login accepted for %s", body.email)
    return {"message": "Login successful", "user": {"email": body.email}}

# backend/app/schemas/__init__.py
from __future__ import annotations

"""
Pydantic schemas for request/response models.

This module is the API contract layer and depends on:
- app.services.diagnostics.FailureCategory
- app.services.deployment.OperationState

It is used by:
- API routes under app.api
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from app.services.deployment import OperationState
from app.services.diagnostics import FailureCategory


# ---------- Diagnostics Schemas ----------


class ClassificationRead(BaseModel):
    category: FailureCategory
    is_safe_to_retry: bool
    original_error: str

    class Config:
        from_attributes = True


class FormattedErrorRead(BaseModel):
    title: str
    description: str
    action_message: str
    technical_details: str

    class Config:
        from_attributes = True


class ErrorMessageRequest(BaseModel):
    """Raw error text supplied by a client."""

    error_message: str = Field(..., max_length=4096)


class ClassifyResponse(BaseModel):
    classification: ClassificationRead
    formatted_error: FormattedErrorRead


# ---------- Operation Schemas ----------


class OperationRead(BaseModel):
    """
    Observable state of a retryable operation.

    classification / formatted_error are set only when state is "failed";
    result is set only when state is "succeeded" and the operation returned
    something.
    """

    state: OperationState
    result: Optional[Any] = None
    error: Optional[str] = None
    classification: Optional[ClassificationRead] = None
    formatted_error: Optional[FormattedErrorRead] = None
    attempt: int = 0

    class Config:
        from_attributes = True

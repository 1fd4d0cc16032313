# backend/app/api/deployments.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app import schemas
from app.config import Settings, get_settings
from app.services.deployment import (
    DeploymentActor,
    OperationState,
    RetryableOperation,
    build_deploy_operation,
    get_deploy_panel,
    get_deployment_actor,
)
from app.services.diagnostics import classify_failure, format_deployment_error
from app.services.statsig_client import log_operation_outcome

router = APIRouter(prefix="/deployments", tags=["deployments"])


def _panel(
    settings: Settings = Depends(get_settings),
    panel: RetryableOperation[None] = Depends(get_deploy_panel),
) -> RetryableOperation[None]:
    """Resolve the demo panel, hidden unless the panel is switched on."""
    if not settings.deploy_panel_enabled:
        raise HTTPException(status_code=404, detail="Deployment panel is disabled")
    return panel


def _read(operation: RetryableOperation) -> schemas.OperationRead:
    return schemas.OperationRead.model_validate(operation.snapshot())


@router.get("/panel", response_model=schemas.OperationRead)
def get_panel(panel: RetryableOperation[None] = Depends(_panel)) -> schemas.OperationRead:
    return _read(panel)


@router.post("/panel/execute", response_model=schemas.OperationRead)
async def execute_panel(
    panel: RetryableOperation[None] = Depends(_panel),
) -> schemas.OperationRead:
    """Start (or restart) the demo deployment."""
    if not await panel.execute():
        raise HTTPException(status_code=409, detail="Deployment already in progress")
    snapshot = panel.snapshot()
    log_operation_outcome("panel", snapshot)
    return schemas.OperationRead.model_validate(snapshot)


@router.post("/panel/retry", response_model=schemas.OperationRead)
async def retry_panel(
    panel: RetryableOperation[None] = Depends(_panel),
) -> schemas.OperationRead:
    """
    Retry the identical deployment call.

    Only offered after a failure that is safe to retry, matching the
    panel's retry button.
    """
    classification = panel.classification
    if panel.state is not OperationState.FAILED or classification is None:
        raise HTTPException(status_code=409, detail="Nothing to retry")
    if not classification.is_safe_to_retry:
        raise HTTPException(
            status_code=409,
            detail=f"{classification.category.value} failures must be fixed before retrying",
        )

    if not await panel.retry():
        raise HTTPException(status_code=409, detail="Deployment already in progress")
    snapshot = panel.snapshot()
    log_operation_outcome("panel", snapshot)
    return schemas.OperationRead.model_validate(snapshot)


@router.post("/panel/reset", response_model=schemas.OperationRead)
def reset_panel(panel: RetryableOperation[None] = Depends(_panel)) -> schemas.OperationRead:
    if not panel.reset():
        raise HTTPException(status_code=409, detail="Cannot reset while a deployment is running")
    return _read(panel)


@router.post("/test-error", response_model=schemas.OperationRead)
async def test_deployment_error(
    payload: schemas.ErrorMessageRequest,
    actor: DeploymentActor = Depends(get_deployment_actor),
) -> schemas.OperationRead:
    """
    One-shot call of the backend actor with an arbitrary error message.

    Runs through a fresh RetryableOperation and is never retried, so the
    response shows exactly how that message is classified and explained.
    """
    operation = RetryableOperation(
        build_deploy_operation(actor, payload.error_message),
        name="test-error",
    )
    await operation.execute()
    snapshot = operation.snapshot()
    log_operation_outcome("test-error", snapshot)
    return schemas.OperationRead.model_validate(snapshot)


@router.post("/classify", response_model=schemas.ClassifyResponse)
def classify_error(payload: schemas.ErrorMessageRequest) -> schemas.ClassifyResponse:
    """Classify and explain a raw error message without calling the actor."""
    classification = classify_failure(payload.error_message)
    formatted = format_deployment_error(classification)
    return schemas.ClassifyResponse(
        classification=schemas.ClassificationRead.model_validate(classification),
        formatted_error=schemas.FormattedErrorRead.model_validate(formatted),
    )

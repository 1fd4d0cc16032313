from __future__ import annotations

"""
Deployment service package.

This package provides:
- The retryable operation state machine (operation.py)
- The backend actor adapter and the panel's deploy operation (actor.py)
- A cached get_deploy_panel() helper holding the demo panel's operation

Failure classification and formatting live in app.services.diagnostics.
"""

from functools import lru_cache

from .actor import (  # noqa: F401
    BackendActorError,
    DeploymentActor,
    LocalDeploymentActor,
    build_deploy_operation,
    get_deployment_actor,
)
from .operation import OperationSnapshot, OperationState, RetryableOperation  # noqa: F401


@lru_cache(maxsize=1)
def get_deploy_panel() -> RetryableOperation[None]:
    """
    Return the demo panel's operation instance.

    The operation calls the backend actor with the configured demo error
    message. One instance lives for the whole process, like the panel
    component it backs.
    """
    from app.config import get_settings

    settings = get_settings()
    operation = build_deploy_operation(
        get_deployment_actor(),
        settings.demo_deployment_error,
    )
    return RetryableOperation(operation, name="deploy-panel")

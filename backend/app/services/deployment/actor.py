from __future__ import annotations

"""backend/app/services/deployment/actor.py

Backend actor adapter used by the deployment panel.

The real backend exposes a ``handleError(message)`` method that traps with
the message it is given. The panel treats that call as an opaque async
operation; this module provides:

- DeploymentActor: minimal protocol the panel needs
- LocalDeploymentActor: in-process stand-in that behaves like the backend
- build_deploy_operation: the zero-argument operation wrapped by the panel
- get_deployment_actor: cached actor built from settings
"""

import asyncio
import logging
from functools import lru_cache
from typing import Awaitable, Callable, Optional, Protocol

from app.config import get_settings

logger = logging.getLogger(__name__)

ACTOR_NOT_INITIALIZED = "Backend actor not initialized"


class BackendActorError(RuntimeError):
    """Raised when a backend actor call rejects."""


class DeploymentActor(Protocol):
    """Minimal interface of the remote actor used by the panel."""

    async def handle_error(self, message: str) -> None:
        """Ask the backend to fail with ``message``.

        Implementations raise when the backend rejects the call and
        return normally otherwise.
        """
        ...


class LocalDeploymentActor:
    """In-process actor that rejects every non-empty message.

    An optional latency simulates the round trip to the backend.
    """

    def __init__(self, latency_seconds: float = 0.0):
        self.latency_seconds = latency_seconds

    async def handle_error(self, message: str) -> None:
        if self.latency_seconds > 0:
            await asyncio.sleep(self.latency_seconds)
        if message:
            logger.debug("Actor rejecting call: %s", message)
            raise BackendActorError(message)


def build_deploy_operation(
    actor: Optional[DeploymentActor],
    message: str,
) -> Callable[[], Awaitable[None]]:
    """Return the panel's deployment operation.

    The message is captured once, so every retry repeats the identical call.
    """

    async def deploy() -> None:
        if actor is None:
            raise BackendActorError(ACTOR_NOT_INITIALIZED)
        await actor.handle_error(message)

    return deploy


@lru_cache(maxsize=1)
def get_deployment_actor() -> DeploymentActor:
    """Return a cached actor configured from settings."""
    settings = get_settings()
    return LocalDeploymentActor(latency_seconds=settings.actor_latency_seconds)

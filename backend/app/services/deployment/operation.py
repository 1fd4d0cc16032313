from __future__ import annotations

"""backend/app/services/deployment/operation.py

Retryable operation state machine.

Responsibilities:
- Wrap a zero-argument async operation supplied by the caller
- Drive it through idle -> running -> succeeded | failed
- Classify and format any failure via app.services.diagnostics
- Expose execute / retry / reset controls plus a read-only snapshot

Errors raised by the wrapped operation never propagate out of execute()
or retry(); they are surfaced through the FAILED state instead.

Only one invocation may be in flight per instance. execute(), retry() and
reset() received while RUNNING are ignored and return False.
"""

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar, Union

from app.services.diagnostics import (
    FailureClassification,
    FormattedError,
    classify_failure,
    format_deployment_error,
)
from app.services.diagnostics.error_classifier import error_message

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class OperationSnapshot(Generic[T]):
    """Read-only view of a RetryableOperation for a presentation layer."""

    state: OperationState
    result: Optional[T]
    error: Optional[str]
    classification: Optional[FailureClassification]
    formatted_error: Optional[FormattedError]
    attempt: int


@dataclass(frozen=True)
class _Succeeded(Generic[T]):
    value: T


@dataclass(frozen=True)
class _Failed:
    error: Exception


_Outcome = Union[_Succeeded[T], _Failed]


class RetryableOperation(Generic[T]):
    """Wraps an async operation with retry support and error classification.

    The same operation (and therefore the same captured inputs) is used for
    every attempt; retry() means "try the identical call again".
    """

    def __init__(self, operation: Callable[[], Awaitable[T]], *, name: str = "operation"):
        self._operation = operation
        self.name = name
        self._state = OperationState.IDLE
        self._result: Optional[T] = None
        self._error: Optional[Exception] = None
        self._classification: Optional[FailureClassification] = None
        self._formatted_error: Optional[FormattedError] = None
        self._attempt = 0

    # ---- Observable state ----

    @property
    def state(self) -> OperationState:
        return self._state

    @property
    def result(self) -> Optional[T]:
        return self._result

    @property
    def error(self) -> Optional[Exception]:
        return self._error

    @property
    def classification(self) -> Optional[FailureClassification]:
        return self._classification

    @property
    def formatted_error(self) -> Optional[FormattedError]:
        return self._formatted_error

    @property
    def attempt(self) -> int:
        return self._attempt

    def snapshot(self) -> OperationSnapshot[T]:
        return OperationSnapshot(
            state=self._state,
            result=self._result,
            error=error_message(self._error) if self._error is not None else None,
            classification=self._classification,
            formatted_error=self._formatted_error,
            attempt=self._attempt,
        )

    # ---- Controls ----

    async def execute(self) -> bool:
        """Run the wrapped operation once.

        Returns False without invoking anything if an attempt is already
        in flight, True otherwise.
        """
        # No await between the check and the transition, so this is atomic
        # on a single event loop.
        if self._state is OperationState.RUNNING:
            logger.info("%s: execute ignored, attempt %d still running", self.name, self._attempt)
            return False

        self._state = OperationState.RUNNING
        self._result = None
        self._clear_failure()
        self._attempt += 1
        attempt = self._attempt
        logger.debug("%s: attempt %d started", self.name, attempt)

        try:
            outcome = await self._run()
        except asyncio.CancelledError:
            # Cancellation is not a failure; leave the panel usable again.
            self._state = OperationState.IDLE
            logger.info("%s: attempt %d cancelled", self.name, attempt)
            raise

        if isinstance(outcome, _Succeeded):
            self._result = outcome.value
            self._state = OperationState.SUCCEEDED
            logger.info("%s: attempt %d succeeded", self.name, attempt)
            return True

        classification = classify_failure(outcome.error)
        self._error = outcome.error
        self._classification = classification
        self._formatted_error = format_deployment_error(classification)
        self._state = OperationState.FAILED
        logger.warning(
            "%s: attempt %d failed (category=%s, safe_to_retry=%s): %s",
            self.name,
            attempt,
            classification.category.value,
            classification.is_safe_to_retry,
            classification.original_error,
        )
        return True

    async def retry(self) -> bool:
        """Retry with the same operation and the same inputs."""
        return await self.execute()

    def reset(self) -> bool:
        """Return to IDLE and clear everything. Ignored while RUNNING."""
        if self._state is OperationState.RUNNING:
            logger.info("%s: reset ignored while attempt %d is running", self.name, self._attempt)
            return False

        self._state = OperationState.IDLE
        self._result = None
        self._clear_failure()
        self._attempt = 0
        return True

    # ---- Internals ----

    def _clear_failure(self) -> None:
        self._error = None
        self._classification = None
        self._formatted_error = None

    async def _run(self) -> _Outcome[T]:
        try:
            value = await self._operation()
        except Exception as exc:  # noqa: BLE001
            return _Failed(exc)
        return _Succeeded(value)

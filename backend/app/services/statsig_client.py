"""Lightweight Statsig integration for deployment panel events."""
from __future__ import annotations

import logging
from typing import Any

from statsig import StatsigEvent, StatsigOptions, StatsigServer, StatsigUser

from app.config import get_settings
from app.services.deployment.operation import OperationSnapshot, OperationState

logger = logging.getLogger(__name__)


class _StatsigAdapter:
    def __init__(self, secret_key: str | None, environment: str):
        self._client: StatsigServer | None = None
        if not secret_key:
            return

        try:
            client = StatsigServer()
            client.initialize(secret_key, options=StatsigOptions(tier=environment))
            self._client = client
        except Exception as exc:  # noqa: BLE001
            logger.warning("Statsig initialization failed: %s", exc)
            self._client = None

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def log_event(
        self,
        *,
        user_id: str,
        event_name: str,
        value: float | int | str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        if not self._client:
            return

        try:
            self._client.log_event(
                StatsigEvent(
                    StatsigUser(user_id), event_name, value=value, metadata=metadata
                )
            )
        except Exception as exc:  # noqa: BLE001
            logger.debug("Statsig event failed: %s", exc)

    def shutdown(self) -> None:
        if not self._client:
            return

        try:
            self._client.shutdown()
        except Exception as exc:  # noqa: BLE001
            logger.debug("Statsig shutdown failed: %s", exc)


_statsig_client: _StatsigAdapter | None = None


def get_statsig_client() -> _StatsigAdapter:
    global _statsig_client
    if _statsig_client is None:
        settings = get_settings()
        _statsig_client = _StatsigAdapter(
            settings.statsig_server_secret, settings.environment
        )
    return _statsig_client


def log_backend_event(
    event_name: str,
    *,
    user_id: str = "backend",
    value: float | int | str | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    client = get_statsig_client()
    client.log_event(user_id=user_id, event_name=event_name, value=value, metadata=metadata)


def log_operation_outcome(source: str, snapshot: OperationSnapshot) -> None:
    """Record a finished attempt. Ignores snapshots that are not terminal."""
    if snapshot.state is OperationState.SUCCEEDED:
        log_backend_event(
            "deployment_operation_succeeded",
            value=snapshot.attempt,
            metadata={"source": source},
        )
    elif snapshot.state is OperationState.FAILED and snapshot.classification is not None:
        log_backend_event(
            "deployment_operation_failed",
            value=snapshot.classification.category.value,
            metadata={
                "source": source,
                "attempt": str(snapshot.attempt),
                "safe_to_retry": str(snapshot.classification.is_safe_to_retry).lower(),
            },
        )


def shutdown_statsig() -> None:
    client = get_statsig_client()
    client.shutdown()

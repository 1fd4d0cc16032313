from __future__ import annotations

"""
Diagnostics and error classification utilities.

This package provides:
- error_classifier: classify failures from deployment operations into a
  stable FailureCategory plus a retry-safety verdict.
- error_formatter: turn a classification into title / description /
  action / technical-details text for the deployment panel.

The goal is to keep error handling logic centralized and deterministic.
"""

from .error_classifier import (  # noqa: F401
    FailureCategory,
    FailureClassification,
    classify_failure,
)
from .error_formatter import FormattedError, format_deployment_error  # noqa: F401

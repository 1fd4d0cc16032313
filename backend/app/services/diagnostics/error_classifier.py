from __future__ import annotations

"""backend/app/services/diagnostics/error_classifier.py

Centralized failure classification for deployment operations.

This module looks at whatever an operation raised (an exception, a string,
or any other value) and assigns it a stable FailureCategory together with a
verdict on whether retrying the identical call is safe.

The classification is:
- deterministic (no randomness)
- text-based (substring matching against the lower-cased message)
- ordered (first matching rule wins, see _RULES)

Categories:
- parsing: unexpected message/response format, not safe to retry
- build: compilation or bundling failure, not safe to retry
- deploy: canister / wallet / deployment infrastructure, safe to retry
- network: connectivity, timeouts, subnet availability, safe to retry
- unknown: nothing matched, assumed transient and safe to retry
"""

import enum
from dataclasses import dataclass
from typing import Optional


class FailureCategory(str, enum.Enum):
    BUILD = "build"
    DEPLOY = "deploy"
    NETWORK = "network"
    PARSING = "parsing"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FailureClassification:
    """Result of classifying a single failure."""

    category: FailureCategory
    is_safe_to_retry: bool
    original_error: str


# Ordered decision list: (keywords, category, is_safe_to_retry).
# Parsing and build come first because a message may also mention a
# deploy or network keyword, and those failures cannot be fixed by retrying.
_RULES: tuple[tuple[tuple[str, ...], FailureCategory, bool], ...] = (
    (("parsing", "parse"), FailureCategory.PARSING, False),
    (("build", "compilation"), FailureCategory.BUILD, False),
    (("canister", "wallet", "legacy", "deploy"), FailureCategory.DEPLOY, True),
    (
        ("network", "timeout", "connection", "no response", "subnet", "fetch"),
        FailureCategory.NETWORK,
        True,
    ),
)


_BUILTIN_STR = (BaseException.__str__, KeyError.__str__)


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _contains_any(haystack: str, needles: tuple[str, ...]) -> bool:
    return any(n in haystack for n in needles)


def error_message(error: object) -> str:
    """Coerce any raised value into the message used for classification.

    Exceptions render through their own __str__. The single string argument
    is used directly only when __str__ is the builtin one, so KeyError("x")
    reads x rather than 'x'.
    """
    if isinstance(error, BaseException):
        builtin_str = type(error).__str__ in _BUILTIN_STR
        if builtin_str and len(error.args) == 1 and isinstance(error.args[0], str):
            return error.args[0]
        return str(error)
    return _text(error)


def match_rule(message: str) -> Optional[tuple[FailureCategory, bool]]:
    """Return (category, is_safe_to_retry) for the first matching rule."""
    lowered = message.lower()
    for keywords, category, safe in _RULES:
        if _contains_any(lowered, keywords):
            return category, safe
    return None


def classify_failure(error: object) -> FailureClassification:
    """Classify a failure into a category and a retry-safety verdict.

    Never raises; unrecognised failures fall back to FailureCategory.UNKNOWN,
    which is considered safe to retry so the user is never blocked.
    """
    message = error_message(error)
    matched = match_rule(message)
    if matched is None:
        return FailureClassification(
            category=FailureCategory.UNKNOWN,
            is_safe_to_retry=True,
            original_error=message,
        )

    category, safe = matched
    return FailureClassification(
        category=category,
        is_safe_to_retry=safe,
        original_error=message,
    )

from __future__ import annotations

"""backend/app/services/diagnostics/error_formatter.py

Turns a FailureClassification into user-facing text.

Every failure yields a title, a plain-language description, an action
recommendation and the raw technical details, so the panel never has to
show a bare error string on its own.
"""

from dataclasses import dataclass

from app.services.diagnostics.error_classifier import (
    FailureCategory,
    FailureClassification,
)


@dataclass(frozen=True)
class FormattedError:
    """Human-readable explanation of a failed deployment operation."""

    title: str
    description: str
    action_message: str
    technical_details: str


SAFE_RETRY_ACTION = (
    "You can safely retry this deployment. Retrying will not change your "
    "application functionality or data."
)


def format_deployment_error(classification: FailureClassification) -> FormattedError:
    """Convert a classified failure into a FormattedError.

    Depends only on ``category`` and ``is_safe_to_retry``; the original
    message is copied verbatim into ``technical_details``.
    """
    category = classification.category
    safe = classification.is_safe_to_retry
    details = classification.original_error

    if category == FailureCategory.NETWORK:
        return FormattedError(
            title="Network Connection Issue",
            description=(
                "The deployment failed due to a network connectivity problem. "
                "This is usually a temporary issue with the Internet Computer "
                "network or your internet connection."
            ),
            action_message=(
                SAFE_RETRY_ACTION
                if safe
                else "Please check your network connection and try again later."
            ),
            technical_details=details,
        )

    if category == FailureCategory.DEPLOY:
        return FormattedError(
            title="Deployment Step Failed",
            description=(
                "The deployment process encountered an issue while deploying to "
                "the Internet Computer. This could be related to canister "
                "management, wallet configuration, or deployment infrastructure."
            ),
            action_message=(
                SAFE_RETRY_ACTION
                if safe
                else "Please review the deployment configuration and try again."
            ),
            technical_details=details,
        )

    # Build and parsing failures always ask for a fix, whatever the flag says.
    if category == FailureCategory.BUILD:
        return FormattedError(
            title="Build Failed",
            description=(
                "The deployment failed during the build step. This typically "
                "indicates a code compilation or bundling issue that needs to be "
                "fixed before deployment can succeed."
            ),
            action_message=(
                "Please review the build diagnostics below and fix any code "
                "issues before retrying."
            ),
            technical_details=details,
        )

    if category == FailureCategory.PARSING:
        return FormattedError(
            title="Message Parsing Error",
            description=(
                "The system encountered an error while parsing the deployment "
                "response. This may indicate an unexpected format in the "
                "deployment process output."
            ),
            action_message=(
                "Please ensure the deployment message format is correct. If this "
                "persists, contact support."
            ),
            technical_details=details,
        )

    return FormattedError(
        title="Unexpected Error",
        description=(
            "An unexpected error occurred during deployment. The system could "
            "not automatically classify this error."
        ),
        action_message=(
            "You can try retrying this deployment. If the issue persists, please "
            "contact support with the technical details below."
            if safe
            else "Please contact support with the technical details below."
        ),
        technical_details=details,
    )

"""
Skill Review Pipeline Exceptions

Custom exceptions for the skill review pipeline stages. Every stage converts
these into a result dict at its public boundary; review_pipeline_main.py reads
`exit_code` off the error to decide how the process ends.
"""

from typing import Optional


# ============================================================================
# BASE EXCEPTION
# ============================================================================

class SkillReviewError(Exception):
    """Base exception for skill review pipeline errors."""
    exit_code = 1

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ============================================================================
# PRE-FLIGHT EXCEPTIONS
# ============================================================================

class ConfigurationError(SkillReviewError):
    """Raised when a required environment value or payload field is missing or malformed."""
    exit_code = 2


class DiffCommandError(SkillReviewError):
    """Raised when `git diff` exits non-zero."""
    def __init__(self, command: list, stderr: str):
        detail = stderr.strip() if stderr else "Unknown error"
        super().__init__(f"git diff failed ({' '.join(command)}): {detail}")
        self.command = command
        self.stderr = stderr


# ============================================================================
# HTTP EXCEPTIONS
# ============================================================================

class RequestTimeoutError(SkillReviewError):
    """Raised when an external call exceeds its configured timeout."""
    def __init__(self, target: str, timeout_seconds: float):
        super().__init__(f"Request to {target} timed out after {timeout_seconds} seconds")
        self.target = target
        self.timeout_seconds = timeout_seconds


class ExternalFetchDegraded(SkillReviewError):
    """
    Raised when a reference document cannot be fetched.

    Never reaches the driver: Stage 3 catches it and substitutes an inline
    placeholder so the review runs with degraded context.
    """
    def __init__(self, label: str, reason: str):
        super().__init__(f"Unable to fetch {label}: {reason}")
        self.label = label
        self.reason = reason


class ModelAPIError(SkillReviewError):
    """Raised when the chat-completion endpoint answers with a non-success status."""
    def __init__(self, status_code: Optional[int], body: str):
        super().__init__(f"Model API failed ({status_code}): {body}")
        self.status_code = status_code
        self.body = body


class EmptyResponseError(SkillReviewError):
    """Raised when the model returns no usable text."""
    def __init__(self, message: str = "Model response was empty."):
        super().__init__(message)


class CommentPostError(SkillReviewError):
    """Raised when GitHub rejects the PR comment."""
    def __init__(self, status_code: Optional[int], body: str):
        super().__init__(f"Failed to post PR comment ({status_code}): {body}")
        self.status_code = status_code
        self.body = body

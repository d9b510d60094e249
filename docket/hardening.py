"""Boundary hardening for the Docket service.

Guards the edges of the workbench: document loading is retried on
transient I/O failures, exceptions are turned into messages a user can
act on, and uploads and paragraph numbers sent by clients are validated.
The core paragraph operations never raise, so nothing here wraps them.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any

from docket.loaders.base import LoaderError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Retries
# ---------------------------------------------------------------------------

_TRANSIENT_ERRORS = (OSError, TimeoutError, ConnectionError)


@dataclass
class RetryConfig:
    """How often and how patiently to retry a load.

    Attributes:
        max_attempts: Attempts in total, the first one included.
        base_delay: Seconds to wait before the first retry.
        max_delay: Ceiling for any single wait.
        exponential_backoff: Double the wait after every failed retry.
        retryable_exceptions: Exception types treated as transient.
    """

    max_attempts: int = 3
    base_delay: float = 0.5
    max_delay: float = 5.0
    exponential_backoff: bool = True
    retryable_exceptions: tuple[type[BaseException], ...] = _TRANSIENT_ERRORS


class RetriesExhaustedError(Exception):
    """Every attempt failed with a transient error."""

    def __init__(self, last_error: Exception, attempts: int) -> None:
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(f"Gave up after {attempts} attempts: {last_error}")


def _compute_delay(attempt: int, config: RetryConfig) -> float:
    """Seconds to wait after the ``attempt``-th retry (0-based)."""
    delay = config.base_delay
    if config.exponential_backoff:
        delay *= 2**attempt
    return min(delay, config.max_delay)


def retry_with_backoff(
    func: Callable[..., Any],
    config: RetryConfig | None = None,
    *args: Any,
    sleep_func: Callable[[float], None] | None = None,
    **kwargs: Any,
) -> Any:
    """Call ``func(*args, **kwargs)``, repeating the whole call on transient errors.

    Args:
        func: The operation to run.
        config: Retry policy; ``RetryConfig()`` when omitted.
        sleep_func: Replacement for ``time.sleep`` (tests pass a recorder).

    Returns:
        The first successful result.

    Raises:
        RetriesExhaustedError: No attempt succeeded.
    """
    policy = config or RetryConfig()
    wait = sleep_func or time.sleep
    failure: Exception | None = None

    for attempt in range(policy.max_attempts):
        try:
            return func(*args, **kwargs)
        except policy.retryable_exceptions as exc:
            failure = exc
            if attempt + 1 == policy.max_attempts:
                break
            delay = _compute_delay(attempt, policy)
            logger.warning(
                "Load attempt %d of %d failed (%s); retrying in %.1fs",
                attempt + 1,
                policy.max_attempts,
                exc,
                delay,
            )
            wait(delay)

    raise RetriesExhaustedError(failure, policy.max_attempts)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# User-facing errors
# ---------------------------------------------------------------------------


@dataclass
class UserFriendlyError:
    """An error as shown to the person using the workbench.

    ``technical_detail`` is for logs and is left out of ``to_dict``.
    """

    message: str
    suggestion: str
    component: str
    error_code: str
    technical_detail: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "message": self.message,
            "suggestion": self.suggestion,
            "component": self.component,
            "error_code": self.error_code,
        }


class ErrorFormatter:
    """Builds ``UserFriendlyError``s without leaking paths or tracebacks."""

    def format_load_error(self, error: Exception) -> UserFriendlyError:
        return self._build(error, "loader", "LOAD")

    def format_export_error(self, error: Exception) -> UserFriendlyError:
        return self._build(error, "export", "EXPORT")

    def format_validation_error(self, error: Exception) -> UserFriendlyError:
        return self._build(error, "workspace", "INPUT")

    def _build(self, error: Exception, component: str, prefix: str) -> UserFriendlyError:
        message, suggestion, code = _classify_error(error)
        return UserFriendlyError(
            message=message,
            suggestion=suggestion,
            component=component,
            error_code=f"{prefix}_{code}",
            technical_detail=repr(error),
        )


def _classify_error(error: Exception) -> tuple[str, str, str]:
    """Return (message, suggestion, code) for an exception.

    Validation messages are written for users already and pass through;
    everything else gets a generic message per error family.
    """
    if isinstance(error, RetriesExhaustedError):
        return (
            "The document could not be read after several attempts.",
            "Try uploading the file again.",
            "003",
        )
    if isinstance(error, ValidationError):
        return str(error), "Correct the input and try again.", "002"
    if isinstance(error, LoaderError):
        return (
            "The document could not be read.",
            "Check that the file is a valid .docx or .html document.",
            "001",
        )
    if isinstance(error, ValueError):
        return (
            "A value in the request was not accepted.",
            "Check the request and try again.",
            "005",
        )
    return (
        "Something went wrong while processing the document.",
        "Try again; report the problem if it persists.",
        "999",
    )


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

# "../" or "/.." in either slash style
_PARENT_DIR_RE = re.compile(r"(\.\.[\\/]|[\\/]\.\.)")


class ValidationError(Exception):
    """A client-supplied value was rejected."""


class InputValidator:
    """Checks uploads and paragraph numbers before they reach the workspace."""

    def validate_upload_filename(
        self,
        filename: str | None,
        *,
        allowed_extensions: tuple[str, ...] | list[str],
    ) -> str:
        """Check an uploaded file's name.

        Args:
            filename: Name as sent by the client, possibly with a path.
            allowed_extensions: Accepted suffixes, e.g. ``(".docx",)``.

        Returns:
            The bare file name.

        Raises:
            ValidationError: Missing name, null byte, parent-directory
                reference, or a suffix outside ``allowed_extensions``.
        """
        if not filename:
            raise ValidationError("Uploaded file has no name.")
        if "\x00" in filename:
            raise ValidationError("File name contains null bytes.")
        if _PARENT_DIR_RE.search(filename):
            raise ValidationError("Path traversal is not allowed.")

        name = PurePath(filename.replace("\\", "/")).name
        if PurePath(name).suffix.lower() not in {e.lower() for e in allowed_extensions}:
            raise ValidationError(
                f"File type not allowed. Accepted types: {', '.join(allowed_extensions)}"
            )
        return name

    def validate_upload_size(self, size: int, *, max_mb: float) -> None:
        if size == 0:
            raise ValidationError("Uploaded file is empty.")
        if size > max_mb * 1024 * 1024:
            raise ValidationError(f"File exceeds the maximum size of {max_mb:g} MB.")

    def validate_paragraph_number(self, number: int, count: int) -> int:
        """Turn a 1-based paragraph number into a 0-based index.

        Raises:
            ValidationError: There are no paragraphs, or ``number`` is
                outside ``1..count``.
        """
        if count == 0:
            raise ValidationError("There are no paragraphs to edit.")
        if not 1 <= number <= count:
            raise ValidationError(
                f"Paragraph number must be between 1 and {count}, got {number}."
            )
        return number - 1

"""Exit-code mapping for the ``send`` command.

Exceptions are caught most specific first:

1. ``ConfigurationError`` -> CONFIG_ERROR (78)
2. ``MessageBuildError`` caused by ``AttachmentReadError`` -> ATTACHMENT_ERROR (2)
3. ``DeliveryError`` -> SMTP_FAILURE (69)
4. ``ValueError`` (``InvalidRecipientError``, pydantic ``ValidationError``)
   -> INVALID_ARGUMENT (22)
5. anything else -> GENERAL_ERROR (1), re-raised when ``DEVELOPMENT_MODE`` is set
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import NoReturn

import rich_click as click

from relaymail.domain.errors import AttachmentReadError, ConfigurationError, DeliveryError, MessageBuildError

from ..constants import DEVELOPMENT_MODE_ENV, SENT_MESSAGE
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)


def exit_code_for(exc: BaseException) -> ExitCode:
    """Return the exit code the ``send`` command reports for ``exc``.

    Example:
        >>> from relaymail.domain.errors import BadFromAddress
        >>> exit_code_for(BadFromAddress("a@example.com", "550 rejected")).name
        'SMTP_FAILURE'
        >>> exit_code_for(ValueError("bad port")).name
        'INVALID_ARGUMENT'
    """
    if isinstance(exc, ConfigurationError):
        return ExitCode.CONFIG_ERROR
    if isinstance(exc, MessageBuildError) and isinstance(exc.__cause__, AttachmentReadError):
        return ExitCode.ATTACHMENT_ERROR
    if isinstance(exc, AttachmentReadError):
        return ExitCode.ATTACHMENT_ERROR
    if isinstance(exc, DeliveryError):
        return ExitCode.SMTP_FAILURE
    if isinstance(exc, ValueError):
        return ExitCode.INVALID_ARGUMENT
    return ExitCode.GENERAL_ERROR


_LABELS: dict[ExitCode, str] = {
    ExitCode.CONFIG_ERROR: "Configuration error",
    ExitCode.ATTACHMENT_ERROR: "Attachment error",
    ExitCode.SMTP_FAILURE: "Failed to send email",
    ExitCode.INVALID_ARGUMENT: "Invalid email parameters",
    ExitCode.GENERAL_ERROR: "Unexpected error",
}


def fail(exc: Exception, code: ExitCode | None = None) -> NoReturn:
    """Log ``exc``, print it to stderr, and exit with its code.

    Raises:
        SystemExit: Always.
    """
    code = exit_code_for(exc) if code is None else code
    logger.error(
        _LABELS[code],
        extra={"error": str(exc), "error_type": type(exc).__name__, "exit_code": int(code)},
        exc_info=code is ExitCode.GENERAL_ERROR,
    )
    click.echo(f"\nError: {_LABELS[code]} - {exc}", err=True)
    raise SystemExit(code) from exc


def run_delivery(operation: Callable[[], None], *, recipients: list[str]) -> None:
    """Run ``operation`` and turn its failure into an exit code.

    Raises:
        SystemExit: On any failure (except unexpected ones in development mode).
    """
    try:
        operation()
    except (ConfigurationError, DeliveryError, AttachmentReadError, ValueError) as exc:
        fail(exc)
    except Exception as exc:
        if os.environ.get(DEVELOPMENT_MODE_ENV):
            raise
        fail(exc, ExitCode.GENERAL_ERROR)
    click.echo(f"\n{SENT_MESSAGE}")
    logger.info("Email sent via CLI", extra={"recipients": recipients})


__all__ = ["exit_code_for", "fail", "run_delivery"]

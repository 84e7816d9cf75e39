"""Shared CLI constants.

Contents:
    * :data:`CLICK_CONTEXT_SETTINGS` - Shared Click settings for help display.
    * :data:`TRACEBACK_SUMMARY_LIMIT` - Character limit for truncated tracebacks.
    * :data:`TRACEBACK_VERBOSE_LIMIT` - Character limit for verbose tracebacks.
    * :data:`AUTH_METHOD_CHOICES` - Values accepted by ``send --auth-method``.
    * :data:`OUTPUT_FORMAT_CHOICES` - Values accepted by ``config --format``.
    * :data:`DEVELOPMENT_MODE_ENV` - Variable that lets unexpected errors propagate.
    * :data:`SENT_MESSAGE` - Printed after a successful ``send``.
"""

from __future__ import annotations

from typing import Final

from relaymail.domain.enums import AuthMethod, OutputFormat

#: ``-h`` works wherever ``--help`` does.
CLICK_CONTEXT_SETTINGS: Final[dict[str, list[str]]] = {"help_option_names": ["-h", "--help"]}

#: Character limit used when printing truncated tracebacks.
TRACEBACK_SUMMARY_LIMIT: Final[int] = 500

#: Character limit used when verbose tracebacks are enabled.
TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

#: Mechanism names, matched case-insensitively on the command line.
AUTH_METHOD_CHOICES: Final[tuple[str, ...]] = tuple(m.value for m in AuthMethod)

OUTPUT_FORMAT_CHOICES: Final[tuple[str, ...]] = tuple(f.value for f in OutputFormat)

#: When set to any non-empty value, ``send`` re-raises unexpected exceptions.
DEVELOPMENT_MODE_ENV: Final[str] = "DEVELOPMENT_MODE"

SENT_MESSAGE: Final[str] = "Email sent successfully!"

__all__ = [
    "AUTH_METHOD_CHOICES",
    "CLICK_CONTEXT_SETTINGS",
    "DEVELOPMENT_MODE_ENV",
    "OUTPUT_FORMAT_CHOICES",
    "SENT_MESSAGE",
    "TRACEBACK_SUMMARY_LIMIT",
    "TRACEBACK_VERBOSE_LIMIT",
]

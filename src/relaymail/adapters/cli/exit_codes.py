"""Exit codes of the relaymail CLI.

Values follow sysexits.h and errno conventions so scripts can tell a bad
invocation from an unreachable relay.

Contents:
    * :class:`ExitCode` - IntEnum of every code a command exits with.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes.

    * ``ATTACHMENT_ERROR`` (2, ENOENT): an attachment could not be read.
    * ``INVALID_ARGUMENT`` (22, EINVAL): malformed address or option value.
    * ``SMTP_FAILURE`` (69, EX_UNAVAILABLE): the relay refused or was unreachable.
    * ``CONFIG_ERROR`` (78, EX_CONFIG): configuration missing or inconsistent.

    Example:
        >>> int(ExitCode.SMTP_FAILURE)
        69
        >>> ExitCode(2).name
        'ATTACHMENT_ERROR'
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    ATTACHMENT_ERROR = 2
    INVALID_ARGUMENT = 22
    SMTP_FAILURE = 69
    CONFIG_ERROR = 78


__all__ = ["ExitCode"]

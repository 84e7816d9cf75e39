"""Type-safe domain enums for authentication and output formats."""

from __future__ import annotations

from enum import Enum


class AuthMethod(str, Enum):
    """SASL mechanisms the sender can authenticate with.

    Inherits from str so config files and Click choices can use the plain
    mechanism name.

    Attributes:
        PLAIN: Single-step ``AUTH PLAIN`` with identity, username, password.
        LOGIN: Two-step ``AUTH LOGIN`` still required by some relays
            (Office 365, Outlook.com).

    Example:
        >>> AuthMethod("LOGIN") is AuthMethod.LOGIN
        True
        >>> AuthMethod.PLAIN == "PLAIN"
        True
    """

    PLAIN = "PLAIN"
    LOGIN = "LOGIN"


class OutputFormat(str, Enum):
    """Output format options for configuration display.

    Attributes:
        HUMAN: Human-readable TOML-like output format.
        JSON: Machine-readable JSON output format.

    Example:
        >>> OutputFormat.HUMAN.value
        'human'
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


__all__ = [
    "AuthMethod",
    "OutputFormat",
]

"""Domain layer - pure logic with no I/O or framework dependencies.

Contains the value objects, SASL mechanisms, and exception types shared by
the orchestrator and its adapters.

Contents:
    * :mod:`.auth` - LOGIN and PLAIN authentication mechanisms
    * :mod:`.enums` - Domain enumerations (AuthMethod, OutputFormat)
    * :mod:`.errors` - Domain exception types
    * :mod:`.models` - Value objects (SendParams, ServerInfo)
"""

from __future__ import annotations

from .auth import LoginAuth, LoginState, PlainAuth, build_auth
from .enums import AuthMethod, OutputFormat
from .errors import (
    AttachmentReadError,
    AuthError,
    AuthMechanismError,
    AuthProtocolError,
    BadFromAddress,
    BadToAddress,
    BodyWriteError,
    ConfigurationError,
    ContentSniffError,
    DataOpenError,
    DeliveryError,
    DialError,
    InvalidRecipientError,
    MechanismNotOfferedError,
    MessageBuildError,
    UnencryptedConnectionError,
    WrongHostError,
)
from .models import SendParams, ServerInfo

__all__ = [
    # Auth
    "LoginAuth",
    "LoginState",
    "PlainAuth",
    "build_auth",
    # Enums
    "AuthMethod",
    "OutputFormat",
    # Errors
    "AttachmentReadError",
    "AuthError",
    "AuthMechanismError",
    "AuthProtocolError",
    "BadFromAddress",
    "BadToAddress",
    "BodyWriteError",
    "ConfigurationError",
    "ContentSniffError",
    "DataOpenError",
    "DeliveryError",
    "DialError",
    "InvalidRecipientError",
    "MechanismNotOfferedError",
    "MessageBuildError",
    "UnencryptedConnectionError",
    "WrongHostError",
    # Models
    "SendParams",
    "ServerInfo",
]

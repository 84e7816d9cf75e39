"""Send email through an SMTP relay.

Public surface:

- :class:`Sender` and :func:`send_email` deliver one message per call.
- :func:`build_message` assembles the message bytes on its own.
- :class:`SenderConfig` and :class:`SendParams` describe the relay and the
  envelope; :class:`LoginAuth` and :class:`PlainAuth` are the SASL mechanisms.
- Every terminal failure derives from :class:`DeliveryError`.

The package logs through the standard :mod:`logging` module and is silent
until the application configures a handler.
"""

from __future__ import annotations

import logging

# Metadata
from .__init__conf__ import print_info

# Adapters
from .adapters.email import Sender, SenderConfig, build_message, send_email

# Composition exports (wired adapters)
from .composition import get_config

# Domain exports
from .domain import (
    AttachmentReadError,
    AuthError,
    AuthMethod,
    BadFromAddress,
    BadToAddress,
    BodyWriteError,
    ContentSniffError,
    DataOpenError,
    DeliveryError,
    DialError,
    LoginAuth,
    MessageBuildError,
    PlainAuth,
    SendParams,
    ServerInfo,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AttachmentReadError",
    "AuthError",
    "AuthMethod",
    "BadFromAddress",
    "BadToAddress",
    "BodyWriteError",
    "ContentSniffError",
    "DataOpenError",
    "DeliveryError",
    "DialError",
    "LoginAuth",
    "MessageBuildError",
    "PlainAuth",
    "SendParams",
    "Sender",
    "SenderConfig",
    "ServerInfo",
    "build_message",
    "get_config",
    "print_info",
    "send_email",
]

"""Application layer - port definitions.

Contains the port protocols that define the interfaces for adapter
implementations and the collaborators of the session orchestrator.

Contents:
    * :mod:`.ports` - Capability and callable Protocol definitions
"""

from __future__ import annotations

from .ports import (
    AuthMechanism,
    Clock,
    DataSink,
    DialWireClient,
    DisplayConfig,
    GetConfig,
    InitLogging,
    LoadSenderConfigFromDict,
    SendEmail,
    WireClient,
)

__all__ = [
    "AuthMechanism",
    "Clock",
    "DataSink",
    "DialWireClient",
    "DisplayConfig",
    "GetConfig",
    "InitLogging",
    "LoadSenderConfigFromDict",
    "SendEmail",
    "WireClient",
]

"""In-memory adapter implementations for testing.

Provides lightweight implementations of all application ports that operate
entirely in memory -- no filesystem, no SMTP, no logging framework.

Contents:
    * :mod:`.config` - In-memory configuration adapters
    * :mod:`.email` - In-memory send adapter (SenderSpy class)
    * :mod:`.logging` - In-memory logging adapter (LoggingSpy class)
    * :mod:`.wire` - Wire client, data sink, and clock doubles for the orchestrator
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import (
    IN_MEMORY_LAYERS,
    display_config_in_memory,
    get_config_in_memory,
)
from .email import (
    SenderSpy,
    load_sender_config_from_dict_in_memory,
)
from .logging import LoggingSpy
from .wire import FROZEN_NOW, DataSinkSpy, FrozenClock, WireClientSpy

# Static conformance assertions
if TYPE_CHECKING:
    from relaymail.application.ports import (
        Clock,
        DataSink,
        DisplayConfig,
        GetConfig,
        InitLogging,
        LoadSenderConfigFromDict,
        SendEmail,
        WireClient,
    )

    _assert_get_config: GetConfig = get_config_in_memory
    _assert_display_config: DisplayConfig = display_config_in_memory
    _assert_load_sender_config: LoadSenderConfigFromDict = load_sender_config_from_dict_in_memory
    _assert_init_logging: InitLogging = LoggingSpy().init_logging
    _assert_send_email: SendEmail = SenderSpy().send_email
    _assert_wire_client: WireClient = WireClientSpy()
    _assert_data_sink: DataSink = DataSinkSpy()
    _assert_clock: Clock = FrozenClock()

__all__ = [
    "FROZEN_NOW",
    "IN_MEMORY_LAYERS",
    "DataSinkSpy",
    "FrozenClock",
    "LoggingSpy",
    "SenderSpy",
    "WireClientSpy",
    "display_config_in_memory",
    "get_config_in_memory",
    "load_sender_config_from_dict_in_memory",
]

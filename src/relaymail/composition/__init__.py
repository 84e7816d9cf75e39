"""Composition root wiring adapters to application ports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

# Configuration services
from ..adapters.config.display import display_config
from ..adapters.config.loader import get_config

# Email services
from ..adapters.email.config import load_sender_config_from_dict
from ..adapters.email.sender import send_email

# Logging services
from ..adapters.logging.setup import init_logging
from ..application.ports import (
    DisplayConfig,
    GetConfig,
    InitLogging,
    LoadSenderConfigFromDict,
    SendEmail,
)

# Static conformance assertions: each adapter function must structurally
# satisfy its Protocol at type-check time.
if TYPE_CHECKING:
    from ..adapters.memory.email import SenderSpy
    from ..adapters.memory.logging import LoggingSpy

    _assert_get_config: GetConfig = get_config
    _assert_display_config: DisplayConfig = display_config
    _assert_send_email: SendEmail = send_email
    _assert_load_sender_config_from_dict: LoadSenderConfigFromDict = load_sender_config_from_dict
    _assert_init_logging: InitLogging = init_logging


@dataclass(frozen=True, slots=True)
class AppServices:
    """Frozen container holding all application port implementations."""

    get_config: GetConfig
    display_config: DisplayConfig
    send_email: SendEmail
    load_sender_config_from_dict: LoadSenderConfigFromDict
    init_logging: InitLogging


def build_production() -> AppServices:
    """Wire production adapters into an AppServices container."""
    return AppServices(
        get_config=get_config,
        display_config=display_config,
        send_email=send_email,
        load_sender_config_from_dict=load_sender_config_from_dict,
        init_logging=init_logging,
    )


def build_testing(*, spy: SenderSpy | None = None, logging_spy: LoggingSpy | None = None) -> AppServices:
    """Wire in-memory adapters into an AppServices container.

    Args:
        spy: SenderSpy that records sends; a fresh one when None. Pass your
            own to assert on what the CLI sent.
        logging_spy: LoggingSpy that records logging start-up; a fresh one
            when None.
    """
    from ..adapters.memory import (
        LoggingSpy,
        SenderSpy,
        display_config_in_memory,
        get_config_in_memory,
        load_sender_config_from_dict_in_memory,
    )

    sender_spy = spy if spy is not None else SenderSpy()
    log_spy = logging_spy if logging_spy is not None else LoggingSpy()

    return AppServices(
        get_config=get_config_in_memory,
        display_config=display_config_in_memory,
        send_email=sender_spy.send_email,
        load_sender_config_from_dict=load_sender_config_from_dict_in_memory,
        init_logging=log_spy.init_logging,
    )


__all__ = [
    # Configuration
    "get_config",
    "display_config",
    # Email
    "send_email",
    "load_sender_config_from_dict",
    # Logging
    "init_logging",
    # Composition
    "AppServices",
    "build_production",
    "build_testing",
]

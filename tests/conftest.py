"""Shared pytest fixtures for relaymail tests.

Centralizes test infrastructure:
- All shared fixtures live here
- Tests import fixtures implicitly via pytest's conftest discovery
- Fixtures use descriptive names that read as plain English
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import fields, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner
from lib_layered_config import Config

from relaymail.adapters.email.config import SenderConfig
from relaymail.adapters.memory import FrozenClock, SenderSpy, WireClientSpy
from relaymail.domain.models import SendParams

if TYPE_CHECKING:
    from relaymail.composition import AppServices


def _load_dotenv() -> None:
    """Load .env file when it exists for integration test configuration."""
    from dotenv import load_dotenv

    env_file = Path(__file__).parent.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)


_load_dotenv()


ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(type(lib_cli_exit_tools.config)))


def _remove_ansi_codes(text: str) -> str:
    """Return *text* stripped of ANSI escape sequences."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


def _snapshot_cli_config() -> dict[str, object]:
    """Capture every attribute from ``lib_cli_exit_tools.config``."""
    return {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}


def _restore_cli_config(snapshot: dict[str, object]) -> None:
    """Reapply a configuration snapshot captured by ``_snapshot_cli_config``."""
    for name, value in snapshot.items():
        setattr(lib_cli_exit_tools.config, name, value)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test."""
    return CliRunner()


@pytest.fixture
def production_factory() -> Callable[[], AppServices]:
    """Provide the production services factory for tests."""
    from relaymail.composition import build_production

    return build_production


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string."""

    def _strip(value: str) -> str:
        return _remove_ansi_codes(value)

    return _strip


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset traceback flags to a known baseline and restore after the test."""
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = _snapshot_cli_config()
    try:
        yield
    finally:
        _restore_cli_config(snapshot)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Clear the get_config lru_cache before each test."""
    from relaymail.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Create real Config instances from test data dicts without filesystem I/O."""

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


@pytest.fixture
def relay_config(config_factory: Callable[[dict[str, Any]], Config]) -> Config:
    """Config with a reachable-looking relay in the ``[email]`` section."""
    return config_factory(
        {
            "email": {
                "host": "smtp.test.com",
                "port": 587,
                "use_starttls": True,
                "auth": {"username": "", "password": "", "method": "PLAIN"},
            }
        }
    )


@pytest.fixture
def sender_spy() -> SenderSpy:
    """A fresh SenderSpy recording what the CLI asked to send."""
    return SenderSpy()


@pytest.fixture
def inject_config(
    clear_config_cache: None,
    sender_spy: SenderSpy,
) -> Callable[[Config], Callable[[], AppServices]]:
    """Return a factory that provides in-memory services around a given Config.

    Display and relay-config loading stay real; ``get_config`` returns the
    injected Config and ``send_email`` is the ``sender_spy``.
    """
    from relaymail.composition import build_production, build_testing

    def _inject(config: Config) -> Callable[[], AppServices]:
        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        prod = build_production()
        services = replace(
            build_testing(spy=sender_spy),
            get_config=_fake_get_config,
            display_config=prod.display_config,
            load_sender_config_from_dict=prod.load_sender_config_from_dict,
        )
        return lambda: services

    return _inject


@pytest.fixture
def wire_spy() -> WireClientSpy:
    """A wire client that accepts every command."""
    return WireClientSpy()


@pytest.fixture
def frozen_clock() -> FrozenClock:
    """Clock fixed at Thu, 10 Feb 2022 23:33:58 +0000."""
    return FrozenClock()


@pytest.fixture
def local_config() -> SenderConfig:
    """Relay on localhost without credentials."""
    return SenderConfig(host="localhost", port=25)


@pytest.fixture
def basic_params() -> SendParams:
    """One sender, one recipient, a subject, no attachments."""
    return SendParams(from_address="from@example.com", to=["to@example.com"], subject="subject")

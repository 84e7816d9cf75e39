"""Configuration display through lib_layered_config's Rich renderer."""

from __future__ import annotations

from typing import Any, cast

import lib_log_rich.runtime
from lib_layered_config import Config
from lib_layered_config import OutputFormat as LibOutputFormat
from lib_layered_config import display_config as _lib_display
from rich.console import Console

from relaymail.domain.enums import OutputFormat

_SECRET_KEYS = frozenset({"password"})
_REDACTED = "[REDACTED]"


def _redact(value: object) -> object:
    """Replace secret values in nested tables.

    Example:
        >>> _redact({"email": {"auth": {"username": "u", "password": "p"}}})
        {'email': {'auth': {'username': 'u', 'password': '[REDACTED]'}}}
        >>> _redact({"auth": {"password": ""}})
        {'auth': {'password': ''}}
    """
    if not isinstance(value, dict):
        return value
    table = cast("dict[str, object]", value)
    return {key: (_REDACTED if key in _SECRET_KEYS and item else _redact(item)) for key, item in table.items()}


def display_config(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    console: Console | None = None,
    profile: str | None = None,
) -> None:
    """Print ``config`` (or one ``section``) with the SMTP password redacted.

    Pending log output is flushed first so it does not interleave with the
    configuration dump.

    Raises:
        ValueError: ``section`` does not exist.
    """
    if lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.flush()

    redacted = config.with_overrides(cast("dict[str, Any]", _redact(config.as_dict())))
    _lib_display(
        redacted,
        output_format=LibOutputFormat(output_format.value),
        section=section,
        profile=profile,
        console=console,
    )


__all__ = ["display_config"]

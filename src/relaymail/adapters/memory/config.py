"""In-memory configuration adapters for testing.

The loader returns a loopback relay with no credentials, which is what the
bundled ``defaultconfig.toml`` describes, without touching the filesystem or
lib_layered_config's file discovery.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from lib_layered_config import Config

from ...domain.enums import OutputFormat

#: Values every in-memory load starts from, whatever the profile.
IN_MEMORY_LAYERS: dict[str, Any] = {
    "email": {
        "host": "localhost",
        "port": 25,
        "auth": {"username": "", "password": "", "method": "PLAIN"},
    },
    "lib_log_rich": {"service": "relaymail", "environment": "test"},
}


def get_config_in_memory(
    *,
    profile: str | None = None,
    start_dir: str | None = None,
) -> Config:
    """Return a private copy of :data:`IN_MEMORY_LAYERS`.

    Example:
        >>> get_config_in_memory().get("email", default={})["port"]
        25
    """
    return Config(deepcopy(IN_MEMORY_LAYERS), {})


def display_config_in_memory(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    profile: str | None = None,
) -> None:
    """Print nothing; satisfies the DisplayConfig protocol."""


__all__ = [
    "IN_MEMORY_LAYERS",
    "display_config_in_memory",
    "get_config_in_memory",
]

"""Configuration adapter - loading, display, and overrides.

Provides adapters for configuration management using lib_layered_config.

Contents:
    * :mod:`.loader` - Configuration loading with caching
    * :mod:`.display` - Configuration display in human/JSON formats
    * :mod:`.overrides` - ``--set`` and ``send`` option overrides
"""

from __future__ import annotations

from .display import display_config
from .loader import get_config, get_default_config_path
from .overrides import apply_overrides, apply_sender_overrides

__all__ = [
    "apply_overrides",
    "apply_sender_overrides",
    "display_config",
    "get_config",
    "get_default_config_path",
]

"""Logging adapter - lib_log_rich setup.

Contents:
    * :func:`.setup.init_logging` - Idempotent logging initialization
    * :func:`.setup.command_scope` - Per-command logging context
"""

from __future__ import annotations

from .setup import command_scope, init_logging

__all__ = ["command_scope", "init_logging"]

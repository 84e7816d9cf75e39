"""Adapters layer - infrastructure and framework integrations.

Contents:
    * :mod:`.email` - Message assembly and SMTP delivery
    * :mod:`.config` - Configuration loading, overrides, and display
    * :mod:`.logging` - Logging setup with lib_log_rich
    * :mod:`.cli` - rich-click command line
    * :mod:`.memory` - In-memory doubles for tests
"""

from __future__ import annotations

__all__: list[str] = []

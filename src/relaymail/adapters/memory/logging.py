"""In-memory logging adapter for testing.

Contents:
    * :class:`LoggingSpy` - Records the configurations logging was started with.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lib_layered_config import Config


@dataclass(slots=True)
class LoggingSpy:
    """Stand-in for :func:`relaymail.adapters.logging.init_logging`.

    Starts no lib_log_rich runtime; each call is appended to ``configs`` so
    tests can check which merged configuration the CLI handed over.
    """

    configs: list[Config] = field(default_factory=lambda: [])

    def init_logging(self, config: Config) -> None:
        self.configs.append(config)

    @property
    def services(self) -> list[str | None]:
        """Service name each recorded configuration would log under."""
        return [cfg.get("lib_log_rich", default={}).get("service") for cfg in self.configs]


__all__ = ["LoggingSpy"]

"""Application ports: Protocol definitions for adapters and collaborators.

Two kinds of port live here:

* Capability ports (:class:`WireClient`, :class:`DataSink`,
  :class:`AuthMechanism`, :class:`Clock`) describe the narrow interfaces the
  session orchestrator drives. The production implementation wraps
  ``smtplib``; the in-memory spies in ``adapters.memory`` are the test doubles.
* Callable ports (:class:`SendEmail`, :class:`GetConfig`, ...) define a
  ``__call__`` whose signature matches the adapter function wired by the
  composition root. Module-level functions satisfy them via structural
  subtyping (PEP 544).

System Role:
    Sits between domain and adapters. Infrastructure types (``Config``,
    ``SenderConfig``) are imported under ``TYPE_CHECKING`` only so that
    import-linter layer contracts remain satisfied at runtime.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from ..domain.enums import OutputFormat
from ..domain.models import SendParams, ServerInfo

if TYPE_CHECKING:
    from lib_layered_config import Config

    from ..adapters.email.config import SenderConfig


# ======================== Capability ports ========================


class DataSink(Protocol):
    """Writable message body opened by ``DATA``; ``close`` ends the transaction."""

    def write(self, data: bytes) -> int: ...

    def close(self) -> None: ...


class AuthMechanism(Protocol):
    """Two-step SASL handshake driven by :meth:`WireClient.auth`."""

    def start(self, server: ServerInfo) -> tuple[str, bytes]: ...

    def next(self, challenge: bytes, more: bool) -> bytes | None: ...


class WireClient(Protocol):
    """SMTP command surface the orchestrator depends on.

    Every method raises on failure; the exception type is the client's own
    and is wrapped by the orchestrator into a :class:`DeliveryError`.
    """

    def mail(self, from_address: str) -> None: ...

    def rcpt(self, to: str) -> None: ...

    def auth(self, mechanism: AuthMechanism) -> None: ...

    def data(self) -> DataSink: ...

    def quit(self) -> None: ...

    def close(self) -> None: ...


class Clock(Protocol):
    """Return the current time; replaced by a frozen clock in tests."""

    def __call__(self) -> datetime: ...


class DialWireClient(Protocol):
    """Open a session to the relay described by ``config``."""

    def __call__(self, config: SenderConfig) -> WireClient: ...


# ======================== Service ports ========================


class SendEmail(Protocol):
    """Send one message through the relay described by ``config``."""

    def __call__(self, *, config: SenderConfig, body: str, params: SendParams) -> None: ...


class GetConfig(Protocol):
    """Load layered configuration with application defaults."""

    def __call__(self, *, profile: str | None = ..., start_dir: str | None = ...) -> Config: ...


class DisplayConfig(Protocol):
    """Display the provided configuration in the requested format."""

    def __call__(
        self, config: Config, *, output_format: OutputFormat = ..., section: str | None = ..., profile: str | None = ...
    ) -> None: ...


class LoadSenderConfigFromDict(Protocol):
    """Load SenderConfig from a configuration dictionary."""

    def __call__(self, config_dict: Mapping[str, Any]) -> SenderConfig: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


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

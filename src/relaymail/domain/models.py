"""Value objects passed between the orchestrator and its collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

LOOPBACK_NAMES: frozenset[str] = frozenset({"localhost", "127.0.0.1", "::1"})


@dataclass(frozen=True, slots=True)
class SendParams:
    """Delivery parameters for a single send call.

    Sequences are normalised to tuples so a caller cannot mutate the
    envelope while a session is running.

    Attributes:
        from_address: Envelope sender and ``From`` header.
        to: Recipients in RCPT order; an empty tuple makes the send a no-op.
        subject: ``Subject`` header text (non-ASCII is RFC 2047 encoded).
        attachments: Files attached in order, each read at build time.

    Example:
        >>> params = SendParams(from_address="a@x.com", to=["b@x.com"], subject="hi")
        >>> params.to
        ('b@x.com',)
        >>> params.attachments
        ()
    """

    from_address: str
    to: tuple[str, ...] = ()
    subject: str = ""
    attachments: tuple[str | Path, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "to", tuple(self.to))
        object.__setattr__(self, "attachments", tuple(self.attachments))


@dataclass(frozen=True, slots=True)
class ServerInfo:
    """What an auth mechanism knows about the relay it is talking to.

    Attributes:
        name: Server name the session was opened for.
        tls: True when the transport is encrypted (implicit TLS or STARTTLS).
        auth: Mechanisms advertised in the EHLO response.
    """

    name: str
    tls: bool = False
    auth: tuple[str, ...] = ()

    @property
    def is_loopback(self) -> bool:
        """Return True for the names plaintext credentials may be sent to."""
        return self.name in LOOPBACK_NAMES


__all__ = [
    "LOOPBACK_NAMES",
    "SendParams",
    "ServerInfo",
]

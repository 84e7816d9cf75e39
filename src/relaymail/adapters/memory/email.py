"""In-memory email adapters for testing.

Provides a send function that satisfies the same Protocol as the production
adapter but opens no SMTP session.

Contents:
    * :class:`SenderSpy` - Captures send calls for test assertions.
    * :func:`load_sender_config_from_dict_in_memory` - In-memory config loader.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ...domain.models import SendParams
from ..email.config import SenderConfig, load_sender_config_from_dict


def _empty_send_list() -> list[dict[str, Any]]:
    """Create an empty typed list for send records."""
    return []


@dataclass
class SenderSpy:
    """Captures send operations for test assertions.

    Each test should create its own SenderSpy instance to avoid cross-test pollution.

    Attributes:
        sent: List of captured send_email calls.
        raise_exception: When set, send_email raises this exception after recording.

    Example:
        >>> spy = SenderSpy()
        >>> spy.send_email(
        ...     config=SenderConfig(host="smtp.test.com"),
        ...     body="Hello",
        ...     params=SendParams(from_address="a@example.com", to=["b@example.com"]),
        ... )
        >>> spy.sent[0]["params"].to
        ('b@example.com',)
    """

    sent: list[dict[str, Any]] = field(default_factory=_empty_send_list)
    raise_exception: Exception | None = None

    def clear(self) -> None:
        """Reset captured data for next test."""
        self.sent.clear()
        self.raise_exception = None

    def send_email(self, *, config: SenderConfig, body: str, params: SendParams) -> None:
        """Record the call, then raise :attr:`raise_exception` if set."""
        self.sent.append({"config": config, "body": body, "params": params})
        if self.raise_exception is not None:
            raise self.raise_exception


def load_sender_config_from_dict_in_memory(config_dict: Mapping[str, Any]) -> SenderConfig:
    """Parse relay config from dict using the real Pydantic model."""
    return load_sender_config_from_dict(config_dict)


__all__ = [
    "SenderSpy",
    "load_sender_config_from_dict_in_memory",
]

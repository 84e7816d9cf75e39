"""In-memory wire client, data sink, and clock for orchestrator tests.

Contents:
    * :class:`DataSinkSpy` - Captures the bytes written after DATA.
    * :class:`WireClientSpy` - Records SMTP commands and fails on request.
    * :class:`FrozenClock` - Returns a fixed instant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ...application.ports import AuthMechanism
from ...domain.models import ServerInfo

FROZEN_NOW = datetime(2022, 2, 10, 23, 33, 58, tzinfo=timezone.utc)


@dataclass
class DataSinkSpy:
    """Collects the message bytes and fails on request.

    Attributes:
        buffer: Everything written so far.
        fail_write: Raised by :meth:`write` when set.
        fail_close: Raised by :meth:`close` when set.
        closed: True once :meth:`close` was called (even if it failed).
    """

    buffer: bytearray = field(default_factory=bytearray)
    fail_write: Exception | None = None
    fail_close: Exception | None = None
    closed: bool = False

    @property
    def message(self) -> bytes:
        return bytes(self.buffer)

    def write(self, data: bytes) -> int:
        if self.fail_write is not None:
            raise self.fail_write
        self.buffer.extend(data)
        return len(data)

    def close(self) -> None:
        self.closed = True
        if self.fail_close is not None:
            raise self.fail_close


def _empty_calls() -> list[tuple[str, tuple[Any, ...]]]:
    return []


@dataclass
class WireClientSpy:
    """Records every command the orchestrator issues.

    A command is recorded before its configured failure is raised, so a
    rejected RCPT still counts as one RCPT.

    ``auth`` drives the mechanism like a relay would: ``start`` with
    :attr:`server`, one ``next(challenge, True)`` per entry of
    :attr:`challenges`, then ``next(b"", False)``. The responses are kept in
    :attr:`auth_responses`.

    Attributes:
        failures: Command name to the exception that command raises.
        sink: Writer returned by :meth:`data`.
        server: What the relay tells the auth mechanism about itself.
        challenges: Server challenges sent during ``auth``.

    Example:
        >>> spy = WireClientSpy(failures={"rcpt": RuntimeError("RCPT error")})
        >>> spy.mail("a@example.com")
        >>> spy.rcpt("b@example.com")
        Traceback (most recent call last):
        ...
        RuntimeError: RCPT error
        >>> spy.commands
        ['mail', 'rcpt']
    """

    failures: dict[str, Exception] = field(default_factory=dict)
    sink: DataSinkSpy = field(default_factory=DataSinkSpy)
    server: ServerInfo = field(default_factory=lambda: ServerInfo(name="localhost"))
    challenges: list[bytes] = field(default_factory=list)
    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=_empty_calls)
    auth_responses: list[bytes] = field(default_factory=list)

    @property
    def commands(self) -> list[str]:
        """Names of the recorded commands in call order."""
        return [name for name, _ in self.calls]

    def count(self, command: str) -> int:
        return self.commands.count(command)

    def _record(self, command: str, *args: Any) -> None:
        self.calls.append((command, args))
        failure = self.failures.get(command)
        if failure is not None:
            raise failure

    def mail(self, from_address: str) -> None:
        self._record("mail", from_address)

    def rcpt(self, to: str) -> None:
        self._record("rcpt", to)

    def auth(self, mechanism: AuthMechanism) -> None:
        self._record("auth", mechanism)
        _, initial = mechanism.start(self.server)
        self.auth_responses.append(initial)
        for challenge in self.challenges:
            self.auth_responses.append(mechanism.next(challenge, True) or b"")
        mechanism.next(b"", False)

    def data(self) -> DataSinkSpy:
        self._record("data")
        return self.sink

    def quit(self) -> None:
        self._record("quit")

    def close(self) -> None:
        self._record("close")


@dataclass(frozen=True)
class FrozenClock:
    """Clock that always returns :attr:`now`.

    Example:
        >>> FrozenClock()().isoformat()
        '2022-02-10T23:33:58+00:00'
    """

    now: datetime = FROZEN_NOW

    def __call__(self) -> datetime:
        return self.now


__all__ = [
    "FROZEN_NOW",
    "DataSinkSpy",
    "FrozenClock",
    "WireClientSpy",
]

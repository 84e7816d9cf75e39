"""SASL authentication mechanisms for the SMTP ``AUTH`` command.

A mechanism is driven by the wire client in two steps:

* ``start(server)`` returns the mechanism name and the initial response.
* ``next(challenge, more)`` answers each server challenge while ``more`` is
  true, and is called once with ``more=False`` after the server accepted.

Both mechanisms refuse to hand out credentials over a plaintext transport
unless the server is a loopback address, and refuse a server whose name
differs from the host they were built for. When the relay lists its
mechanisms after ``EHLO``, a mechanism missing from that list is refused too.

Contents:
    * :class:`LoginAuth` - LOGIN (draft-murchison-sasl-login), 3-message exchange.
    * :class:`PlainAuth` - PLAIN (RFC 4616), single message.
    * :func:`build_auth` - Mechanism factory keyed by :class:`AuthMethod`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .enums import AuthMethod
from .errors import AuthProtocolError, MechanismNotOfferedError, UnencryptedConnectionError, WrongHostError
from .models import ServerInfo


def _check_server(server: ServerInfo, host: str, mechanism: AuthMethod) -> None:
    """Refuse servers credentials must not be sent to.

    An empty ``server.auth`` means the relay did not list its mechanisms;
    the relay then answers ``AUTH`` itself.
    """
    if not server.tls and not server.is_loopback:
        raise UnencryptedConnectionError()
    if server.name != host:
        raise WrongHostError(expected=host, actual=server.name)
    if server.auth and mechanism.value not in server.auth:
        raise MechanismNotOfferedError(mechanism.value, server.auth)


class LoginState(Enum):
    """Progress of a LOGIN handshake."""

    READY = "ready"
    AWAITING_USERNAME_ACK = "awaiting_username_ack"
    AWAITING_PASSWORD_ACK = "awaiting_password_ack"
    DONE = "done"


def login_transition(state: LoginState, *, more: bool) -> LoginState:
    """Return the state reached by answering a server reply in ``state``.

    ``more`` is true when the server sent a challenge (334) and false once it
    accepted the credentials.

    Raises:
        AuthProtocolError: When the reply is not valid in ``state``.

    Example:
        >>> login_transition(LoginState.AWAITING_USERNAME_ACK, more=True)
        <LoginState.AWAITING_PASSWORD_ACK: 'awaiting_password_ack'>
        >>> login_transition(LoginState.AWAITING_PASSWORD_ACK, more=False)
        <LoginState.DONE: 'done'>
    """
    if state is LoginState.AWAITING_USERNAME_ACK and more:
        return LoginState.AWAITING_PASSWORD_ACK
    if state is LoginState.AWAITING_PASSWORD_ACK and not more:
        return LoginState.DONE
    reply = "challenge" if more else "completion"
    raise AuthProtocolError(f"unexpected server {reply} in LOGIN state {state.value}")


@dataclass(slots=True)
class LoginAuth:
    """LOGIN mechanism: username, then password on the server's request.

    LOGIN is obsolete per the SASL mechanisms registry but still required by
    Office 365 and Outlook.com.

    Example:
        >>> auth = LoginAuth("user", "secret", "smtp.example.com")
        >>> auth.start(ServerInfo(name="smtp.example.com", tls=True))
        ('LOGIN', b'user')
        >>> auth.next(b"Password:", True)
        b'secret'
        >>> auth.next(b"", False) is None
        True
        >>> auth.state
        <LoginState.DONE: 'done'>
    """

    username: str
    password: str = field(repr=False)
    host: str
    state: LoginState = LoginState.READY

    def start(self, server: ServerInfo) -> tuple[str, bytes]:
        """Begin the exchange, returning the username as initial response.

        Raises:
            UnencryptedConnectionError: Plaintext transport to a non-loopback server.
            WrongHostError: ``server.name`` is not the configured host.
            MechanismNotOfferedError: The relay advertises mechanisms but not LOGIN.
            AuthProtocolError: The handshake was already started.
        """
        if self.state is not LoginState.READY:
            raise AuthProtocolError(f"LOGIN already started (state {self.state.value})")
        _check_server(server, self.host, AuthMethod.LOGIN)
        self.state = LoginState.AWAITING_USERNAME_ACK
        return AuthMethod.LOGIN.value, self.username.encode("utf-8")

    def next(self, challenge: bytes, more: bool) -> bytes | None:
        """Answer the server: the password while ``more``, nothing once accepted."""
        self.state = login_transition(self.state, more=more)
        if more:
            return self.password.encode("utf-8")
        return None


@dataclass(slots=True)
class PlainAuth:
    """PLAIN mechanism: identity, username and password in one response.

    Example:
        >>> auth = PlainAuth("user", "secret", "localhost")
        >>> auth.start(ServerInfo(name="localhost"))
        ('PLAIN', b'\\x00user\\x00secret')
    """

    username: str
    password: str = field(repr=False)
    host: str
    identity: str = ""

    def start(self, server: ServerInfo) -> tuple[str, bytes]:
        """Return the single PLAIN response after checking the server."""
        _check_server(server, self.host, AuthMethod.PLAIN)
        response = f"{self.identity}\x00{self.username}\x00{self.password}"
        return AuthMethod.PLAIN.value, response.encode("utf-8")

    def next(self, challenge: bytes, more: bool) -> bytes | None:
        """Accept completion; PLAIN never answers a challenge."""
        if more:
            raise AuthProtocolError("unexpected server challenge")
        return None


def build_auth(method: AuthMethod, *, username: str, password: str, host: str) -> LoginAuth | PlainAuth:
    """Return a fresh mechanism for ``method`` bound to ``host``.

    Example:
        >>> build_auth(AuthMethod.LOGIN, username="u", password="p", host="h")
        LoginAuth(username='u', host='h', state=<LoginState.READY: 'ready'>)
    """
    if method is AuthMethod.LOGIN:
        return LoginAuth(username, password, host)
    return PlainAuth(username, password, host)


__all__ = [
    "LoginAuth",
    "LoginState",
    "PlainAuth",
    "build_auth",
    "login_transition",
]

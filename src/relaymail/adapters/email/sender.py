"""Session orchestrator: one SMTP transaction per :meth:`Sender.send`.

The order of commands is fixed: AUTH (when credentials are configured),
MAIL, RCPT per recipient, DATA, the message bytes, end of data, QUIT. Every
failure up to and including the body write is terminal and raised as a
:class:`DeliveryError`; failures after it only degrade the session and are
logged. The connection is closed on every path unless QUIT succeeded.

Contents:
    * :class:`Sender` - The orchestrator.
    * :func:`send_email` - One-shot function wired by the composition root.
"""

from __future__ import annotations

import logging
import threading
from contextlib import AbstractContextManager, nullcontext
from datetime import datetime

from relaymail.application.ports import Clock, DialWireClient, WireClient
from relaymail.domain.auth import build_auth
from relaymail.domain.errors import (
    AttachmentReadError,
    AuthError,
    BadFromAddress,
    BadToAddress,
    BodyWriteError,
    DataOpenError,
    MessageBuildError,
)
from relaymail.domain.models import SendParams

from .config import SenderConfig
from .message import build_message
from .transport import dial_wire_client

_module_logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


class Sender:
    """Send messages through the relay described by ``config``.

    Args:
        config: Relay address, TLS mode, credentials and message defaults.
        wire_client: Session to reuse for every send. When omitted, each send
            dials its own session through ``dialer``.
        dialer: Opens a session for ``config``; defaults to
            :func:`~relaymail.adapters.email.transport.dial_wire_client`.
        clock: Source of the ``Date`` header; defaults to local time.
        logger: Logger for degraded failures; defaults to the module logger.

    Example:
        >>> from relaymail.adapters.memory import FrozenClock, WireClientSpy
        >>> spy = WireClientSpy()
        >>> sender = Sender(SenderConfig(host="localhost"), wire_client=spy, clock=FrozenClock())
        >>> sender.send("hi", SendParams(from_address="a@example.com", to=["b@example.com"]))
        >>> spy.commands
        ['mail', 'rcpt', 'data', 'quit']
    """

    def __init__(
        self,
        config: SenderConfig,
        *,
        wire_client: WireClient | None = None,
        dialer: DialWireClient | None = None,
        clock: Clock | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.wire_client = wire_client
        self.dialer: DialWireClient = dialer or dial_wire_client
        self.clock: Clock = clock or _local_now
        self.logger = logger or _module_logger
        # A shared session carries one transaction at a time.
        self._lock: AbstractContextManager[object] = threading.Lock() if wire_client is not None else nullcontext()

    def send(self, body: str, params: SendParams) -> None:
        """Deliver ``body`` to every recipient in ``params``.

        An empty recipient list returns without touching the relay.

        Raises:
            DialError: No session could be opened.
            AuthError: The mechanism refused the server or the relay refused
                the credentials.
            BadFromAddress: MAIL was rejected.
            BadToAddress: RCPT was rejected for one recipient; later
                recipients are not tried.
            DataOpenError: DATA was refused.
            MessageBuildError: The message could not be assembled (the
                :class:`AttachmentReadError` is its ``__cause__``).
            BodyWriteError: Writing the message bytes failed.
        """
        if not params.to:
            self.logger.debug("No recipients, nothing to send", extra={"sender": params.from_address})
            return

        with self._lock:
            client = self.wire_client if self.wire_client is not None else self.dialer(self.config)
            quit_ok = False
            try:
                self._transact(client, body, params)
                quit_ok = self._quit(client)
            finally:
                if not quit_ok:
                    self._close(client)

        self.logger.info(
            "Email sent",
            extra={"sender": params.from_address, "recipients": list(params.to), "address": self.config.address},
        )

    def _transact(self, client: WireClient, body: str, params: SendParams) -> None:
        config = self.config
        recipients = list(params.to)

        username, password = config.username, config.password
        if username and password:
            mechanism = build_auth(config.auth_method, username=username, password=password, host=config.host)
            try:
                client.auth(mechanism)
            except Exception as exc:
                raise AuthError(config.address, exc) from exc

        try:
            client.mail(params.from_address)
        except Exception as exc:
            raise BadFromAddress(params.from_address, exc) from exc

        for recipient in recipients:
            try:
                client.rcpt(recipient)
            except Exception as exc:
                raise BadToAddress(recipients, recipient, exc) from exc

        try:
            sink = client.data()
        except Exception as exc:
            raise DataOpenError(exc) from exc

        try:
            message = build_message(
                body,
                params,
                content_type=config.content_type,
                charset=config.charset,
                now=self.clock(),
            )
        except (AttachmentReadError, LookupError, ValueError) as exc:
            raise MessageBuildError(exc) from exc

        try:
            sink.write(message)
        except Exception as exc:
            raise BodyWriteError(recipients, exc) from exc

        try:
            sink.close()
        except Exception as exc:
            self.logger.warning(
                "Failed to close email writer",
                extra={"recipients": recipients, "error": str(exc)},
            )

    def _quit(self, client: WireClient) -> bool:
        try:
            client.quit()
        except Exception as exc:
            self.logger.warning("Failed to quit SMTP session", extra={"address": self.config.address, "error": str(exc)})
            return False
        return True

    def _close(self, client: WireClient) -> None:
        try:
            client.close()
        except Exception as exc:
            self.logger.warning("Failed to close SMTP session", extra={"address": self.config.address, "error": str(exc)})


def send_email(*, config: SenderConfig, body: str, params: SendParams) -> None:
    """Send one message through a freshly dialed session.

    Example:
        >>> send_email(
        ...     config=SenderConfig(host="localhost"),
        ...     body="hi",
        ...     params=SendParams(from_address="a@example.com"),
        ... )  # no recipients: returns without dialing
    """
    _module_logger.info(
        "Sending email",
        extra={
            "sender": params.from_address,
            "recipients": list(params.to),
            "subject": params.subject,
            "attachment_count": len(params.attachments),
        },
    )
    Sender(config).send(body, params)


__all__ = [
    "Sender",
    "send_email",
]

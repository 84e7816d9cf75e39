"""Production wire client over :mod:`smtplib`.

``smtplib.SMTP`` returns reply codes from ``mail``/``rcpt`` instead of
raising; :class:`SmtpWireClient` checks them and raises the matching
``smtplib`` exception so the orchestrator sees one failure mode per step.
``DATA`` is streamed through :class:`SmtpDataWriter` rather than handed to
``SMTP.data`` as a single string.

Contents:
    * :class:`SmtpDataWriter` - Streaming DATA sink with dot-stuffing.
    * :class:`SmtpWireClient` - Reply-checking command surface.
    * :func:`dial_wire_client` - Opens a session per ``SenderConfig``.
"""

from __future__ import annotations

import logging
import smtplib
import ssl

from relaymail.application.ports import AuthMechanism
from relaymail.domain.errors import DialError
from relaymail.domain.models import ServerInfo

from .config import SenderConfig

logger = logging.getLogger(__name__)

CRLF = b"\r\n"


def _tls_context() -> ssl.SSLContext:
    """Return a certificate-verifying context that refuses TLS below 1.2."""
    context = ssl.create_default_context()
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    return context


class SmtpDataWriter:
    """Body writer opened by a ``354`` reply to ``DATA``.

    Complete lines are sent as soon as they are written; a trailing partial
    line is held back until the next write or :meth:`close`. Every line
    ending (``\\n``, ``\\r\\n`` or a bare ``\\r``) goes out as CRLF and a
    leading ``.`` is doubled.

    Example:
        >>> class Recorder:
        ...     sent = b""
        ...     def send(self, data): self.sent += data
        ...     def getreply(self): return 250, b"OK"
        >>> smtp = Recorder()
        >>> writer = SmtpDataWriter(smtp)
        >>> writer.write(b"a\\n.b\\nc")
        7
        >>> writer.close()
        >>> smtp.sent
        b'a\\r\\n..b\\r\\nc\\r\\n.\\r\\n'
    """

    def __init__(self, smtp: smtplib.SMTP) -> None:
        self._smtp = smtp
        self._pending = b""
        self._closed = False

    def _encode(self, lines: list[bytes]) -> bytes:
        out: list[bytes] = []
        for line in lines:
            content = line.rstrip(b"\r\n")
            if content.startswith(b"."):
                content = b"." + content
            out.append(content + CRLF)
        return b"".join(out)

    def write(self, data: bytes) -> int:
        """Send every complete line of ``data``; return ``len(data)``."""
        if self._closed:
            raise ValueError("write to closed DATA writer")
        lines = (self._pending + bytes(data)).splitlines(keepends=True)
        # A trailing CR may be the first half of a CRLF split across writes.
        if lines and not lines[-1].endswith(b"\n"):
            self._pending = lines.pop()
        else:
            self._pending = b""
        if lines:
            self._smtp.send(self._encode(lines))
        return len(data)

    def close(self) -> None:
        """Flush the held-back line and end the message with ``.``.

        Raises:
            smtplib.SMTPDataError: The relay did not accept the message (not 250).
        """
        if self._closed:
            return
        self._closed = True
        tail = self._encode([self._pending]) if self._pending else b""
        self._pending = b""
        self._smtp.send(tail + b"." + CRLF)
        code, resp = self._smtp.getreply()
        if code != 250:
            raise smtplib.SMTPDataError(code, resp)


class SmtpWireClient:
    """Command surface of one ``smtplib`` session.

    Args:
        smtp: Connected session (plain, upgraded, or implicit TLS).
        host: Host name the session was dialed for; auth mechanisms verify it.
        tls: True when the transport is encrypted.
    """

    def __init__(self, smtp: smtplib.SMTP, *, host: str, tls: bool) -> None:
        self._smtp = smtp
        self._host = host
        self._tls = tls

    @property
    def server(self) -> ServerInfo:
        """Return what the session knows about the relay after ``EHLO``."""
        advertised = self._smtp.esmtp_features.get("auth", "")
        return ServerInfo(name=self._host, tls=self._tls, auth=tuple(advertised.upper().split()))

    def mail(self, from_address: str) -> None:
        self._smtp.ehlo_or_helo_if_needed()
        code, resp = self._smtp.mail(from_address)
        if code != 250:
            raise smtplib.SMTPSenderRefused(code, resp, from_address)

    def rcpt(self, to: str) -> None:
        code, resp = self._smtp.rcpt(to)
        if code not in (250, 251):
            raise smtplib.SMTPRecipientsRefused({to: (code, resp)})

    def auth(self, mechanism: AuthMechanism) -> None:
        """Run the SASL exchange of ``mechanism`` with ``AUTH``.

        The mechanism's initial response is sent with the command; each
        ``334`` challenge is answered by ``mechanism.next(challenge, True)``
        and ``mechanism.next(b"", False)`` confirms acceptance.

        Raises:
            AuthMechanismError: The mechanism refused this server.
            smtplib.SMTPAuthenticationError: The relay rejected the credentials.
        """
        self._smtp.ehlo_or_helo_if_needed()
        name, initial = mechanism.start(self.server)

        def respond(challenge: bytes | None = None) -> str:
            if challenge is None:
                return initial.decode("utf-8")
            return (mechanism.next(challenge, True) or b"").decode("utf-8")

        self._smtp.auth(name, respond, initial_response_ok=True)
        mechanism.next(b"", False)

    def data(self) -> SmtpDataWriter:
        self._smtp.putcmd("data")
        code, resp = self._smtp.getreply()
        if code != 354:
            raise smtplib.SMTPDataError(code, resp)
        return SmtpDataWriter(self._smtp)

    def quit(self) -> None:
        self._smtp.quit()

    def close(self) -> None:
        self._smtp.close()


def dial_wire_client(config: SenderConfig) -> SmtpWireClient:
    """Connect to the relay in ``config`` and return its wire client.

    Implicit TLS (``use_tls``) wraps the socket before the greeting;
    ``use_starttls`` upgrades a plain session and fails if the relay does not
    offer it. Both verify the server certificate.

    Raises:
        DialError: The connection, greeting, or TLS negotiation failed.
    """
    logger.debug(
        "Dialing SMTP relay",
        extra={"address": config.address, "use_tls": config.use_tls, "use_starttls": config.use_starttls},
    )
    try:
        if config.use_tls:
            smtp: smtplib.SMTP = smtplib.SMTP_SSL(
                config.host, config.port, timeout=config.timeout, context=_tls_context()
            )
        else:
            smtp = smtplib.SMTP(config.host, config.port, timeout=config.timeout)
            if config.use_starttls:
                try:
                    smtp.starttls(context=_tls_context())
                except OSError:
                    smtp.close()
                    raise
    except OSError as exc:
        raise DialError(config.address, exc) from exc
    return SmtpWireClient(smtp, host=config.host, tls=config.use_tls or config.use_starttls)


__all__ = [
    "SmtpDataWriter",
    "SmtpWireClient",
    "dial_wire_client",
]

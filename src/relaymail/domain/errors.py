"""Domain-specific exceptions for typed error handling at boundaries.

Terminal send failures derive from :class:`DeliveryError` and carry the
context needed to diagnose them (relay address, recipients, attachment
path) both as attributes and in their message. Attachment and SASL
mechanism failures have their own families because they are raised by
collaborators the orchestrator wraps.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class ConfigurationError(Exception):
    """Missing, invalid, or incomplete configuration.

    Raised when required configuration values are absent, malformed, or
    logically inconsistent. Typically caught at CLI boundaries to provide
    user-friendly error messages.

    Example:
        >>> from relaymail.domain.errors import ConfigurationError
        >>> err = ConfigurationError("No SMTP host configured")
        >>> str(err)
        'No SMTP host configured'
    """


class InvalidRecipientError(ValueError):
    """Email address validation failure.

    Raised when a runtime address fails RFC 5321/5322 validation before a
    session is opened. Inherits from ValueError so ``except ValueError``
    handlers at the CLI boundary catch it.

    Example:
        >>> err = InvalidRecipientError("Invalid recipient: not-an-email")
        >>> isinstance(err, ValueError)
        True
    """


class DeliveryError(Exception):
    """A send call failed at a terminal step.

    Base class of every error :meth:`relaymail.adapters.email.sender.Sender.send`
    raises. None of them are retried internally.
    """


class DialError(DeliveryError):
    """The connection to the relay could not be established.

    Example:
        >>> err = DialError("smtp.example.com:587")
        >>> str(err)
        'failed to make smtp client for smtp.example.com:587'
        >>> err.address
        'smtp.example.com:587'
    """

    def __init__(self, address: str, reason: object = None) -> None:
        self.address = address
        message = f"failed to make smtp client for {address}"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)


class AuthError(DeliveryError):
    """The relay rejected authentication, or the mechanism refused to start.

    Example:
        >>> str(AuthError("localhost:25", "auth error"))
        'failed to auth to smtp localhost:25, auth error'
    """

    def __init__(self, address: str, reason: object) -> None:
        self.address = address
        super().__init__(f"failed to auth to smtp {address}, {reason}")


class BadFromAddress(DeliveryError):
    """MAIL FROM was rejected.

    Example:
        >>> str(BadFromAddress("from@example.com", "mail error"))
        "bad from address 'from@example.com': mail error"
    """

    def __init__(self, from_address: str, reason: object) -> None:
        self.from_address = from_address
        super().__init__(f"bad from address {from_address!r}: {reason}")


class BadToAddress(DeliveryError):
    """RCPT TO was rejected for one of the recipients.

    The message names the whole recipient list because the send aborts on
    the first rejection; ``rejected`` names the one that failed.

    Example:
        >>> err = BadToAddress(["to@example.com"], "to@example.com", "RCPT error")
        >>> str(err)
        "bad to address ['to@example.com']: RCPT error"
    """

    def __init__(self, recipients: Sequence[str], rejected: str, reason: object) -> None:
        self.recipients = tuple(recipients)
        self.rejected = rejected
        super().__init__(f"bad to address {list(self.recipients)}: {reason}")


class DataOpenError(DeliveryError):
    """The DATA command was refused, so no body writer exists."""

    def __init__(self, reason: object) -> None:
        super().__init__(f"can't make email writer: {reason}")


class MessageBuildError(DeliveryError):
    """The message could not be assembled; nothing was written to the relay."""

    def __init__(self, reason: object) -> None:
        super().__init__(f"can't make email message: {reason}")


class BodyWriteError(DeliveryError):
    """Streaming the message bytes into the DATA writer failed partway.

    Example:
        >>> str(BodyWriteError(["to@example.com"], "write error"))
        "failed to send email body to ['to@example.com']: write error"
    """

    def __init__(self, recipients: Sequence[str], reason: object) -> None:
        self.recipients = tuple(recipients)
        super().__init__(f"failed to send email body to {list(self.recipients)}: {reason}")


class AttachmentReadError(Exception):
    """An attachment file could not be opened or fully read.

    Example:
        >>> err = AttachmentReadError("does/not/exist/1.txt", "no such file or directory")
        >>> str(err)
        "failed to read attachment 'does/not/exist/1.txt': no such file or directory"
    """

    _template = "failed to read attachment {path!r}: {reason}"

    def __init__(self, path: str | Path, reason: object) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(self._template.format(path=self.path, reason=reason))


class ContentSniffError(AttachmentReadError):
    """An attachment held no bytes to detect its content type from.

    Example:
        >>> str(ContentSniffError("testdata/nullfile"))
        "failed to read file type 'testdata/nullfile': empty file"
    """

    _template = "failed to read file type {path!r}: {reason}"

    def __init__(self, path: str | Path, reason: object = "empty file") -> None:
        super().__init__(path, reason)


class AuthMechanismError(Exception):
    """A SASL mechanism refused to continue the handshake."""


class UnencryptedConnectionError(AuthMechanismError):
    """Credentials would travel over plaintext to a non-loopback server."""

    def __init__(self) -> None:
        super().__init__("unencrypted connection")


class WrongHostError(AuthMechanismError):
    """The server identity differs from the host the mechanism was built for."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__("wrong host name")


class AuthProtocolError(AuthMechanismError):
    """The server drove the handshake out of order."""


class MechanismNotOfferedError(AuthMechanismError):
    """The relay advertised AUTH mechanisms and this one is not among them."""

    def __init__(self, mechanism: str, offered: tuple[str, ...]) -> None:
        self.mechanism = mechanism
        self.offered = offered
        super().__init__(f"{mechanism} not offered by server (offers {' '.join(offered)})")


__all__ = [
    "AttachmentReadError",
    "AuthError",
    "AuthMechanismError",
    "AuthProtocolError",
    "BadFromAddress",
    "BadToAddress",
    "BodyWriteError",
    "ConfigurationError",
    "ContentSniffError",
    "DataOpenError",
    "DeliveryError",
    "DialError",
    "InvalidRecipientError",
    "MechanismNotOfferedError",
    "MessageBuildError",
    "UnencryptedConnectionError",
    "WrongHostError",
]

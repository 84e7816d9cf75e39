"""Address validation for envelopes built from runtime input.

The orchestrator leaves address acceptance to the relay (a rejected MAIL or
RCPT is a terminal :class:`DeliveryError`). Input typed on the command line is
checked up front instead, so an obvious typo fails before a session is opened.
"""

from __future__ import annotations

from btx_lib_mail import validate_email_address

from relaymail.domain.errors import InvalidRecipientError
from relaymail.domain.models import SendParams


def validate_address(address: str, *, role: str = "recipient") -> None:
    """Validate a single email address.

    Args:
        address: Email address to validate.
        role: Word used in the error message ("recipient", "sender").

    Raises:
        InvalidRecipientError: When the email address is invalid.

    Example:
        >>> validate_address("valid@example.com")  # no exception
        >>> validate_address("invalid", role="sender")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        InvalidRecipientError: Invalid sender: invalid
    """
    try:
        validate_email_address(address)
    except ValueError as e:
        raise InvalidRecipientError(f"Invalid {role}: {address}") from e


def validate_send_params(params: SendParams) -> None:
    """Validate the envelope addresses of ``params``.

    An empty recipient list is valid: sending to nobody is a no-op.

    Raises:
        InvalidRecipientError: When the sender or a recipient is malformed.

    Example:
        >>> validate_send_params(SendParams(from_address="a@example.com", to=["b@example.com"]))
    """
    validate_address(params.from_address, role="sender")
    for recipient in params.to:
        validate_address(recipient)


__all__ = ["validate_address", "validate_send_params"]

"""Email adapter - message assembly and SMTP delivery.

Structure:
    * :mod:`.config` - Relay configuration model and loader
    * :mod:`.message` - Message Builder (headers, quoted-printable, multipart)
    * :mod:`.sniff` - Attachment content-type detection
    * :mod:`.transport` - smtplib wire client and dialer
    * :mod:`.sender` - Session orchestrator
    * :mod:`.validation` - Address validation for runtime input

Contents:
    * :class:`.config.SenderConfig` - Relay configuration container
    * :func:`.config.load_sender_config_from_dict` - Config dict loader
    * :func:`.message.build_message` - Message bytes for one send
    * :class:`.sender.Sender` - Session orchestrator
    * :func:`.sender.send_email` - One-shot send through a dialed session
"""

from __future__ import annotations

from .config import SenderConfig, load_sender_config_from_dict
from .message import build_message
from .sender import Sender, send_email
from .transport import SmtpDataWriter, SmtpWireClient, dial_wire_client
from .validation import validate_address, validate_send_params

__all__ = [
    "Sender",
    "SenderConfig",
    "SmtpDataWriter",
    "SmtpWireClient",
    "build_message",
    "dial_wire_client",
    "load_sender_config_from_dict",
    "send_email",
    "validate_address",
    "validate_send_params",
]

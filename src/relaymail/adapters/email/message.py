"""RFC 5322 message assembly.

Builds the exact bytes streamed into the ``DATA`` writer: the header block,
a quoted-printable text body and, when files are attached, a
``multipart/mixed`` container with one base64 part per file.

Lines end in CRLF throughout. Dot-stuffing is the DATA writer's job, not
the builder's.
"""

from __future__ import annotations

import base64
import logging
import quopri
import secrets
from collections.abc import Iterable, Sequence
from datetime import datetime
from email.header import Header
from email.utils import encode_rfc2231, format_datetime
from pathlib import Path

from relaymail.domain.errors import AttachmentReadError, ContentSniffError
from relaymail.domain.models import SendParams

from .config import DEFAULT_CHARSET
from .sniff import SNIFF_LEN, sniff_attachment

logger = logging.getLogger(__name__)

CRLF = b"\r\n"
DEFAULT_TEXT_TYPE = "text/plain"


def _single_line(value: str) -> str:
    """Fold CR and LF out of a header value so it cannot start a new header."""
    return " ".join(value.splitlines())


def _header(name: str, value: str) -> bytes:
    return f"{name}: {value}".encode("utf-8") + CRLF


def encode_subject(subject: str, charset: str = DEFAULT_CHARSET) -> str:
    """Return ``subject`` as a header value, RFC 2047 encoded when not ASCII.

    Long encoded subjects are folded across continuation lines joined by CRLF.

    Example:
        >>> encode_subject("Weekly report")
        'Weekly report'
        >>> encode_subject("Grüße").startswith("=?utf-8?")
        True
    """
    subject = _single_line(subject)
    if subject.isascii():
        return subject
    return Header(subject, charset).encode(linesep="\r\n")


def encode_quoted_printable(text: str, charset: str = DEFAULT_CHARSET) -> bytes:
    """Encode ``text`` in ``charset`` as quoted-printable with CRLF line breaks.

    Any mix of ``\\n``, ``\\r\\n`` and ``\\r`` in the input is normalised
    first, so soft breaks and hard breaks come out alike.

    Raises:
        LookupError: ``charset`` is unknown.
        UnicodeEncodeError: ``text`` cannot be represented in ``charset``.

    Example:
        >>> encode_quoted_printable("some text\\n")
        b'some text\\r\\n'
        >>> encode_quoted_printable("caf\\u00e9")
        b'caf=C3=A9'
    """
    normalised = text.replace("\r\n", "\n").replace("\r", "\n")
    encoded = quopri.encodestring(normalised.encode(charset))
    return encoded.replace(b"\n", CRLF)


def encode_base64_lines(data: bytes) -> bytes:
    """Return ``data`` base64 encoded in 76-column lines, each ending in CRLF."""
    return base64.encodebytes(data).replace(b"\n", CRLF)


def _content_disposition(filename: str) -> str:
    """Return the attachment disposition, RFC 2231 encoding non-ASCII names.

    Example:
        >>> _content_disposition("image.jpg")
        'attachment; filename="image.jpg"'
        >>> _content_disposition("bild ä.png")
        "attachment; filename*=utf-8''bild%20%C3%A4.png"
    """
    if filename.isascii():
        quoted = filename.replace("\\", "\\\\").replace('"', '\\"')
        return f'attachment; filename="{quoted}"'
    return f"attachment; filename*={encode_rfc2231(filename, 'utf-8')}"


def read_attachment(path: str | Path) -> tuple[str, bytes]:
    """Read the file at ``path`` and detect its content type.

    Returns:
        ``(content_type, data)``.

    Raises:
        AttachmentReadError: The file cannot be opened or read.
        ContentSniffError: The file is empty.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise AttachmentReadError(path, exc.strerror or exc) from exc
    if not data:
        raise ContentSniffError(path)
    content_type = sniff_attachment(path, data[:SNIFF_LEN])
    logger.debug(
        "Read attachment",
        extra={"path": str(path), "content_type": content_type, "size": len(data)},
    )
    return content_type, data


def new_boundary(parts: Iterable[bytes] = ()) -> str:
    """Return a random multipart boundary that occurs in none of ``parts``."""
    materialised = list(parts)
    while True:
        boundary = secrets.token_hex(16)
        marker = boundary.encode("ascii")
        if not any(marker in part for part in materialised):
            return boundary


def _text_part(body: bytes, content_type: str, charset: str) -> bytes:
    return b"".join(
        [
            _header("Content-Type", f'{content_type or DEFAULT_TEXT_TYPE}; charset="{charset}"'),
            _header("Content-Transfer-Encoding", "quoted-printable"),
            CRLF,
            body,
        ]
    )


def _attachment_part(path: str | Path, content_type: str, data: bytes) -> bytes:
    return b"".join(
        [
            _header("Content-Type", content_type),
            _header("Content-Transfer-Encoding", "base64"),
            _header("Content-Disposition", _content_disposition(Path(path).name)),
            CRLF,
            encode_base64_lines(data),
        ]
    )


def _multipart(parts: Sequence[bytes], boundary: str) -> bytes:
    delimiter = f"--{boundary}".encode("ascii")
    chunks: list[bytes] = []
    for part in parts:
        chunks.extend([delimiter, CRLF, part, CRLF])
    chunks.extend([delimiter, b"--", CRLF])
    return b"".join(chunks)


def build_message(
    body: str,
    params: SendParams,
    *,
    content_type: str = DEFAULT_TEXT_TYPE,
    charset: str = DEFAULT_CHARSET,
    now: datetime,
) -> bytes:
    """Assemble the message for ``params`` with ``body`` as its text.

    Without attachments the headers are, in order: ``From``, ``To``,
    ``Subject``, ``Content-Transfer-Encoding: quoted-printable``, then
    ``MIME-version`` and ``Content-Type`` when ``content_type`` is set, then
    ``Date``. With attachments the top-level type is ``multipart/mixed`` and
    the transfer encoding moves into the text part.

    Args:
        body: Message text; encoded in ``charset``.
        params: Envelope and attachment list.
        content_type: Media type of the text; empty omits the MIME headers
            of a single-part message.
        charset: Charset of the body and the non-ASCII subject.
        now: Value of the ``Date`` header; naive values are taken as local time.

    Raises:
        AttachmentReadError: An attachment cannot be read (or is empty).
        LookupError: ``charset`` is unknown.
        UnicodeEncodeError: ``body`` cannot be represented in ``charset``.

    Example:
        >>> from datetime import timezone
        >>> raw = build_message(
        ...     "hello\\n",
        ...     SendParams(from_address="a@example.com", to=["b@example.com"], subject="hi"),
        ...     now=datetime(2022, 2, 10, 23, 33, 58, tzinfo=timezone.utc),
        ... )
        >>> print(raw.decode().replace("\\r\\n", "\\n"), end="")
        From: a@example.com
        To: b@example.com
        Subject: hi
        Content-Transfer-Encoding: quoted-printable
        MIME-version: 1.0
        Content-Type: text/plain; charset="UTF-8"
        Date: Thu, 10 Feb 2022 23:33:58 +0000
        <BLANKLINE>
        hello
    """
    charset = charset or DEFAULT_CHARSET
    text = encode_quoted_printable(body, charset)
    attachments = [(path, *read_attachment(path)) for path in params.attachments]

    headers = [
        _header("From", _single_line(params.from_address)),
        _header("To", ",".join(_single_line(addr) for addr in params.to)),
        _header("Subject", encode_subject(params.subject, charset)),
    ]

    if not attachments:
        headers.append(_header("Content-Transfer-Encoding", "quoted-printable"))
        if content_type:
            headers.append(_header("MIME-version", "1.0"))
            headers.append(_header("Content-Type", f'{content_type}; charset="{charset}"'))
        payload = text
    else:
        parts = [_text_part(text, content_type, charset)]
        parts.extend(_attachment_part(path, sniffed, data) for path, sniffed, data in attachments)
        boundary = new_boundary(parts)
        headers.append(_header("MIME-version", "1.0"))
        headers.append(_header("Content-Type", f'multipart/mixed; boundary="{boundary}"'))
        payload = _multipart(parts, boundary)

    stamp = now.astimezone() if now.tzinfo is None else now
    headers.append(_header("Date", format_datetime(stamp)))
    return b"".join([*headers, CRLF, payload])


__all__ = [
    "build_message",
    "encode_base64_lines",
    "encode_quoted_printable",
    "encode_subject",
    "new_boundary",
    "read_attachment",
]

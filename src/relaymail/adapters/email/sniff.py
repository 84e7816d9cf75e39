"""Attachment content-type detection from file contents.

Looks at the leading bytes only: a table of magic numbers first, then the
HTML/XML markers, then a text-or-binary verdict. The file extension is
consulted only to refine a text verdict (``.csv`` becomes ``text/csv``), never
to override what the bytes say.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Final

SNIFF_LEN: Final[int] = 512

OCTET_STREAM: Final[str] = "application/octet-stream"
TEXT_UTF8: Final[str] = "text/plain; charset=utf-8"

_SIGNATURES: Final[tuple[tuple[bytes, str], ...]] = (
    (b"%PDF-", "application/pdf"),
    (b"%!PS-Adobe-", "application/postscript"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
    (b"PK\x03\x04", "application/zip"),
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"Rar!\x1a\x07", "application/x-rar-compressed"),
    (b"7z\xbc\xaf\x27\x1c", "application/x-7z-compressed"),
    (b"OggS\x00", "application/ogg"),
    (b"ID3", "audio/mpeg"),
    (b"fLaC", "audio/flac"),
    (b"\x00asm", "application/wasm"),
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", TEXT_UTF8),
)

_MARKUP: Final[tuple[tuple[bytes, str], ...]] = (
    (b"<!doctype html", "text/html; charset=utf-8"),
    (b"<html", "text/html; charset=utf-8"),
    (b"<head", "text/html; charset=utf-8"),
    (b"<body", "text/html; charset=utf-8"),
    (b"<?xml", "text/xml; charset=utf-8"),
    (b"<svg", "image/svg+xml"),
)

# Control bytes that never occur in text (WHATWG mime sniffing "binary data byte").
_BINARY_BYTES: Final[frozenset[int]] = frozenset(
    [*range(0x00, 0x09), 0x0B, *range(0x0E, 0x1B), *range(0x1C, 0x20)]
)


def _riff_type(head: bytes) -> str | None:
    if head[:4] != b"RIFF" or len(head) < 12:
        return None
    form = head[8:12]
    if form == b"WEBP":
        return "image/webp"
    if form == b"WAVE":
        return "audio/wave"
    if form == b"AVI ":
        return "video/avi"
    return None


def detect_content_type(head: bytes) -> str:
    """Return the MIME type the leading bytes ``head`` indicate.

    Example:
        >>> detect_content_type(b"%PDF-1.7 ...")
        'application/pdf'
        >>> detect_content_type(b"  <html><body>hi</body></html>")
        'text/html; charset=utf-8'
        >>> detect_content_type(b"hello world")
        'text/plain; charset=utf-8'
        >>> detect_content_type(b"\\x00\\x01\\x02")
        'application/octet-stream'
    """
    head = head[:SNIFF_LEN]
    for magic, content_type in _SIGNATURES:
        if head.startswith(magic):
            return content_type
    riff = _riff_type(head)
    if riff is not None:
        return riff
    if head[4:8] == b"ftyp":
        return "video/mp4"

    stripped = head.lstrip(b" \t\r\n\x0c").lower()
    for marker, content_type in _MARKUP:
        if stripped.startswith(marker):
            return content_type

    if any(byte in _BINARY_BYTES for byte in head):
        return OCTET_STREAM
    return TEXT_UTF8


def sniff_attachment(path: str | Path, head: bytes) -> str:
    """Detect the content type of the file at ``path`` from its bytes ``head``.

    A plain-text verdict is refined by the extension when it names a more
    specific ``text/*`` type; any other verdict stands as sniffed.

    Example:
        >>> sniff_attachment("report.csv", b"a,b\\n1,2\\n")
        'text/csv; charset=utf-8'
        >>> sniff_attachment("photo.txt", b"\\xff\\xd8\\xff\\xe0")
        'image/jpeg'
    """
    detected = detect_content_type(head)
    if detected != TEXT_UTF8:
        return detected
    guessed, _ = mimetypes.guess_type(Path(path).name)
    if guessed and guessed.startswith("text/") and guessed != "text/plain":
        return f"{guessed}; charset=utf-8"
    return detected


__all__ = [
    "OCTET_STREAM",
    "SNIFF_LEN",
    "TEXT_UTF8",
    "detect_content_type",
    "sniff_attachment",
]

"""Static package metadata surfaced to CLI commands and documentation.

Keep these values in sync with ``pyproject.toml``; the metadata tests
compare them.
"""

from __future__ import annotations

#: Distribution name declared in ``pyproject.toml``.
name = "relaymail"
#: Human-readable summary shown in CLI help output.
title = "Send email through an SMTP relay with LOGIN/PLAIN auth and attachments"
#: Release version drawn from ``pyproject.toml``.
version = "1.0.0"
#: Console-script name published by the package.
shell_command = "relaymail"

#: Vendor, application and slug for lib_layered_config's platform paths
#: (``~/.config/relaymail`` on Linux).
LAYEREDCONF_VENDOR: str = "relaymail"
LAYEREDCONF_APP: str = "relaymail"
LAYEREDCONF_SLUG: str = "relaymail"


def print_info() -> None:
    """Print the summarised metadata block used by the ``info`` command.

    Example:
        >>> print_info()  # doctest: +ELLIPSIS
        Info for relaymail:
        ...
    """
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))

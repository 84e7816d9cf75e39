"""Configuration overrides from the command line.

Two sources feed :meth:`lib_layered_config.Config.with_overrides`:

* ``--set SECTION.KEY[.SUBKEY...]=VALUE`` strings on the root command, with
  values coerced through JSON (``true``, ``587``, ``["a"]``) and falling
  back to the raw string.
* The typed SMTP options of ``send`` (``--host``, ``--port``, ...), mapped
  onto the ``[email]`` section so they pass the same pydantic validation as
  values from files.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, cast

import orjson
from lib_layered_config import Config

CoercedValue = str | int | float | bool | None | list[object] | dict[str, object]
"""Union of types that :func:`coerce_value` can produce."""

# send option name -> key path below [email]
_SENDER_OPTION_PATHS: dict[str, tuple[str, ...]] = {
    "host": ("host",),
    "port": ("port",),
    "use_tls": ("use_tls",),
    "use_starttls": ("use_starttls",),
    "username": ("auth", "username"),
    "password": ("auth", "password"),
    "auth_method": ("auth", "method"),
    "content_type": ("content_type",),
    "charset": ("charset",),
    "timeout": ("timeout",),
}


@dataclass(frozen=True, slots=True)
class ConfigOverride:
    """One ``--set`` assignment: ``section`` then the keys below it."""

    section: str
    key_path: tuple[str, ...]
    value: CoercedValue

    @property
    def path(self) -> tuple[str, ...]:
        return (self.section, *self.key_path)


def coerce_value(raw: str) -> CoercedValue:
    """Parse ``raw`` as JSON, or keep it as a string when it is not JSON.

    Examples:
        >>> coerce_value("587")
        587
        >>> coerce_value("false")
        False
        >>> coerce_value("smtp.example.com")
        'smtp.example.com'
        >>> coerce_value("")
        ''
    """
    if not raw:
        return ""
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError:
        return raw


def parse_override(raw: str) -> ConfigOverride:
    """Parse one ``SECTION.KEY=VALUE`` string.

    The first ``=`` ends the dotted path; the value may contain further
    ``=`` and dots.

    Raises:
        ValueError: No ``=``, no dot in the path, or an empty path component.

    Examples:
        >>> parse_override("email.port=587")
        ConfigOverride(section='email', key_path=('port',), value=587)
        >>> parse_override("email.auth.method=LOGIN").path
        ('email', 'auth', 'method')
    """
    path_part, sep, value_str = raw.partition("=")
    if not sep:
        raise ValueError(f"Invalid override {raw!r}: must contain '='")
    section, dot, rest = path_part.partition(".")
    if not dot:
        raise ValueError(f"Invalid override {raw!r}: key must contain at least one dot (SECTION.KEY)")
    if not section:
        raise ValueError(f"Invalid override {raw!r}: section name is empty")
    key_path = tuple(rest.split("."))
    if not all(key_path):
        raise ValueError(f"Invalid override {raw!r}: key path contains empty component")
    return ConfigOverride(section=section, key_path=key_path, value=coerce_value(value_str))


def _assign(tree: dict[str, Any], path: tuple[str, ...], value: object) -> None:
    """Set ``value`` at ``path`` in ``tree``, creating tables on the way.

    Raises:
        TypeError: An intermediate key already holds a non-table value.
    """
    node = tree
    for part in path[:-1]:
        child = node.setdefault(part, {})
        if not isinstance(child, dict):
            raise TypeError(f"Expected dict at key {part!r}, got {type(child).__name__}")
        node = cast("dict[str, Any]", child)
    node[path[-1]] = value


def apply_overrides(config: Config, raw_overrides: Iterable[str]) -> Config:
    """Return ``config`` with every ``--set`` assignment merged in.

    Raises:
        ValueError: An override string is malformed.

    Examples:
        >>> cfg = Config({"email": {"port": 25}}, {})
        >>> apply_overrides(cfg, ["email.port=2525"])["email"]["port"]
        2525
        >>> apply_overrides(cfg, ()) is cfg
        True
    """
    tree: dict[str, Any] = {}
    for raw in raw_overrides:
        override = parse_override(raw)
        _assign(tree, override.path, override.value)
    return config.with_overrides(tree) if tree else config


def sender_overrides(**options: Any) -> dict[str, Any]:
    """Map set ``send`` options onto an ``{"email": ...}`` override tree.

    Options left unset (``None``) are skipped.

    Example:
        >>> sender_overrides(host="smtp.example.com", port=None, username="u")
        {'email': {'host': 'smtp.example.com', 'auth': {'username': 'u'}}}
        >>> sender_overrides(port=None)
        {}
    """
    tree: dict[str, Any] = {}
    for name, value in options.items():
        if value is None:
            continue
        path = _SENDER_OPTION_PATHS.get(name)
        if path is None:
            raise KeyError(f"unknown sender option {name!r}")
        _assign(tree, ("email", *path), value)
    return tree


def apply_sender_overrides(config: Config, options: Mapping[str, Any]) -> Config:
    """Return ``config`` with the set ``send`` options merged into ``[email]``."""
    tree = sender_overrides(**options)
    return config.with_overrides(tree) if tree else config


__all__ = [
    "CoercedValue",
    "ConfigOverride",
    "apply_overrides",
    "apply_sender_overrides",
    "coerce_value",
    "parse_override",
    "sender_overrides",
]

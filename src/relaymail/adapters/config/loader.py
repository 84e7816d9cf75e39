"""Layered configuration loading for relaymail.

Reads the bundled ``defaultconfig.toml`` and every layer lib_layered_config
discovers on top of it (app, host, user, ``.env``, ``RELAYMAIL___*``
environment variables), once per profile.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Protocol, cast

from lib_layered_config import (
    DEFAULT_MAX_PROFILE_LENGTH,
    Config,
    read_config,
    validate_profile_name,
)

from relaymail import __init__conf__


class ConfigLoaderProtocol(Protocol):
    """Config loader exposing ``cache_clear`` for tests."""

    def __call__(self, *, profile: str | None = None, start_dir: str | None = None) -> Config: ...
    def cache_clear(self) -> None: ...


def validate_profile(profile: str, max_length: int | None = None) -> None:
    """Reject profile names that are unsafe as directory names.

    Raises:
        ValueError: Empty, too long, path traversal, reserved name, or
            characters outside ``[A-Za-z0-9_-]``.

    Examples:
        >>> validate_profile("staging-v2")

        >>> validate_profile("../etc/passwd")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ValueError: profile contains invalid characters: ../etc/passwd
    """
    validate_profile_name(profile, max_length=max_length if max_length is not None else DEFAULT_MAX_PROFILE_LENGTH)


@lru_cache(maxsize=1)
def get_default_config_path() -> Path:
    """Return the ``defaultconfig.toml`` shipped beside this module.

    Example:
        >>> get_default_config_path().name
        'defaultconfig.toml'
    """
    return Path(__file__).parent / "defaultconfig.toml"


# One read per (profile, start_dir); the CLI process is short-lived.
@lru_cache(maxsize=4)
def _read_layers(*, profile: str | None = None, start_dir: str | None = None) -> Config:
    return read_config(
        vendor=__init__conf__.LAYEREDCONF_VENDOR,
        app=__init__conf__.LAYEREDCONF_APP,
        slug=__init__conf__.LAYEREDCONF_SLUG,
        profile=profile,
        default_file=get_default_config_path(),
        start_dir=start_dir,
    )


def _get_config(*, profile: str | None = None, start_dir: str | None = None) -> Config:
    """Load the merged relaymail configuration.

    Precedence, lowest first: defaults, app, host, user, dotenv, env. With a
    ``profile`` every file layer is read from its ``profile/<name>/``
    subdirectory instead.

    Args:
        profile: Optional profile name such as ``production``.
        start_dir: Directory that seeds ``.env`` discovery; the working
            directory when None.

    Raises:
        ValueError: ``profile`` is not a valid profile name.

    Example:
        >>> config = get_config()
        >>> config.get("email", default={}).get("port")
        25
    """
    if profile is not None:
        validate_profile(profile)
    return _read_layers(profile=profile, start_dir=start_dir)


def _cache_clear() -> None:
    """Forget every loaded configuration so the next call re-reads the layers."""
    _read_layers.cache_clear()


_get_config.cache_clear = _cache_clear  # type: ignore[attr-defined]
get_config: ConfigLoaderProtocol = cast(ConfigLoaderProtocol, _get_config)


__all__ = [
    "get_config",
    "get_default_config_path",
    "validate_profile",
]

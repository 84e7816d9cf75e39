"""Sender configuration model and loader.

Provides the SenderConfig Pydantic model for validated, immutable relay
settings and the loader function to create it from configuration dictionaries.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from btx_lib_mail import validate_smtp_host
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from relaymail.domain.enums import AuthMethod

DEFAULT_CHARSET = "UTF-8"


class SenderConfig(BaseModel):
    """Validated, immutable relay configuration.

    Example:
        >>> config = SenderConfig(host="smtp.example.com", port=587, use_starttls=True)
        >>> config.address
        'smtp.example.com:587'
        >>> config.has_credentials
        False
    """

    model_config = ConfigDict(frozen=True)

    host: str = "localhost"
    port: int = Field(default=25, ge=1, le=65535)
    use_tls: bool = False
    use_starttls: bool = False
    username: str | None = None
    password: str | None = None
    auth_method: AuthMethod = AuthMethod.PLAIN
    content_type: str = "text/plain"
    charset: str = DEFAULT_CHARSET
    timeout: float = 30.0

    @field_validator("username", "password", mode="before")
    @classmethod
    def _coerce_empty_string_to_none(cls, v: str | None) -> str | None:
        """Coerce empty or whitespace-only strings to None.

        Treats empty strings from config files as "not configured" so that a
        half-filled credential pair never triggers an AUTH attempt.
        """
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("charset", mode="before")
    @classmethod
    def _default_empty_charset(cls, v: Any) -> Any:
        """Fall back to UTF-8 when the charset is left empty.

        Examples:
            >>> SenderConfig._default_empty_charset("")
            'UTF-8'
            >>> SenderConfig._default_empty_charset("iso-8859-1")
            'iso-8859-1'
        """
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_CHARSET
        return v

    @field_validator("auth_method", mode="before")
    @classmethod
    def _normalise_auth_method(cls, v: Any) -> Any:
        """Accept mechanism names in any case (``login`` from TOML files)."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @model_validator(mode="after")
    def _validate_config(self) -> SenderConfig:
        """Validate configuration values.

        Catch common configuration mistakes early with clear error messages
        rather than allowing invalid values to cause obscure failures later.

        Raises:
            ValueError: When configuration values are invalid.

        Example:
            >>> SenderConfig(timeout=-5.0)  # doctest: +IGNORE_EXCEPTION_DETAIL
            Traceback (most recent call last):
            ...
            ValidationError: ...

            >>> SenderConfig(use_tls=True, use_starttls=True)  # doctest: +IGNORE_EXCEPTION_DETAIL
            Traceback (most recent call last):
            ...
            ValidationError: ...
        """
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

        if not self.host.strip():
            raise ValueError("host must not be empty")

        if self.use_tls and self.use_starttls:
            raise ValueError("use_tls and use_starttls are mutually exclusive")

        validate_smtp_host(self.address)

        return self

    @property
    def address(self) -> str:
        """Return ``host:port``, bracketing IPv6 literals.

        Example:
            >>> SenderConfig(host="::1", port=2525).address
            '[::1]:2525'
        """
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}"

    @property
    def has_credentials(self) -> bool:
        """Return True when both username and password are set."""
        return bool(self.username) and bool(self.password)

    def __repr__(self) -> str:
        """Return string representation with password redacted.

        Prevents accidental credential exposure in logs, error messages,
        and debugging output. The password is shown as '[REDACTED]' when set.

        Example:
            >>> config = SenderConfig(host="smtp.example.com", username="u", password="secret123")
            >>> "secret123" in repr(config)
            False
            >>> "[REDACTED]" in repr(config)
            True
        """
        fields: list[str] = []
        for name, value in self:
            if name == "password" and value is not None:
                fields.append(f"{name}='[REDACTED]'")
            else:
                fields.append(f"{name}={value!r}")
        return f"SenderConfig({', '.join(fields)})"


def load_sender_config_from_dict(config_dict: Mapping[str, Any]) -> SenderConfig:
    """Load SenderConfig from a configuration dictionary.

    Bridges lib_layered_config's dictionary output with the typed
    SenderConfig Pydantic model. Single-parse validation at the boundary
    with no intermediate conversions.

    Handles the nested ``[email.auth]`` TOML section by flattening its
    ``username``, ``password`` and ``method`` keys onto the model fields.

    Args:
        config_dict: Configuration dictionary typically from lib_layered_config.
            Expected to have an 'email' section with relay settings.

    Returns:
        Configured relay settings with defaults for missing values.

    Example:
        >>> config = load_sender_config_from_dict({"email": {"host": "smtp.example.com", "port": 587}})
        >>> config.address
        'smtp.example.com:587'

        >>> config = load_sender_config_from_dict(
        ...     {"email": {"host": "smtp.example.com", "auth": {"username": "u", "password": "p", "method": "login"}}}
        ... )
        >>> config.auth_method
        <AuthMethod.LOGIN: 'LOGIN'>
    """
    email_section: Any = config_dict.get("email", {})

    # Handle non-dict email section (e.g. "email": "invalid")
    if not isinstance(email_section, Mapping):
        return SenderConfig.model_validate(email_section)

    email_raw: dict[str, Any] = dict(cast(Mapping[str, Any], email_section))

    auth_raw: Any = email_raw.pop("auth", {})
    if isinstance(auth_raw, Mapping):
        for key, value in cast(Mapping[str, Any], auth_raw).items():
            email_raw["auth_method" if key == "method" else key] = value

    return SenderConfig.model_validate(email_raw)


__all__ = [
    "DEFAULT_CHARSET",
    "SenderConfig",
    "load_sender_config_from_dict",
]

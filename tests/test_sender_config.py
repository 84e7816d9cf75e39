"""Behaviour tests for SenderConfig: defaults, validators, repr, and dict loading."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from relaymail.adapters.email.config import SenderConfig, load_sender_config_from_dict
from relaymail.domain.enums import AuthMethod

# ======================== Defaults ========================


@pytest.mark.os_agnostic
def test_defaults_describe_a_local_plaintext_relay() -> None:
    """The default relay is localhost:25 without TLS or credentials."""
    config = SenderConfig()

    assert config.address == "localhost:25"
    assert config.use_tls is False
    assert config.use_starttls is False
    assert config.has_credentials is False
    assert config.auth_method is AuthMethod.PLAIN
    assert config.content_type == "text/plain"
    assert config.charset == "UTF-8"
    assert config.timeout == 30.0


@pytest.mark.os_agnostic
def test_config_is_frozen() -> None:
    """A built config cannot be mutated."""
    config = SenderConfig()

    with pytest.raises(ValidationError):
        config.host = "other"  # type: ignore[misc]


# ======================== Validators ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize("blank", ["", "   "])
def test_blank_credentials_mean_not_configured(blank: str) -> None:
    """Empty username or password from a config file is treated as absent."""
    config = SenderConfig(username=blank, password=blank)

    assert config.username is None
    assert config.password is None


@pytest.mark.os_agnostic
def test_credentials_need_both_halves() -> None:
    """has_credentials requires username and password."""
    assert SenderConfig(username="u").has_credentials is False
    assert SenderConfig(username="u", password="p").has_credentials is True


@pytest.mark.os_agnostic
def test_empty_charset_falls_back_to_utf8() -> None:
    """An empty charset is the default charset."""
    assert SenderConfig(charset="").charset == "UTF-8"


@pytest.mark.os_agnostic
@pytest.mark.parametrize("method", ["login", "LOGIN", " Login "])
def test_auth_method_accepts_any_case(method: str) -> None:
    """Mechanism names are case-insensitive."""
    assert SenderConfig(auth_method=method).auth_method is AuthMethod.LOGIN  # type: ignore[arg-type]


@pytest.mark.os_agnostic
def test_unknown_auth_method_is_rejected() -> None:
    """Only PLAIN and LOGIN are supported."""
    with pytest.raises(ValidationError):
        SenderConfig(auth_method="CRAM-MD5")  # type: ignore[arg-type]


@pytest.mark.os_agnostic
@pytest.mark.parametrize("timeout", [0.0, -1.0])
def test_timeout_must_be_positive(timeout: float) -> None:
    """Zero or negative timeouts are configuration mistakes."""
    with pytest.raises(ValidationError, match="timeout must be positive"):
        SenderConfig(timeout=timeout)


@pytest.mark.os_agnostic
def test_tls_modes_are_mutually_exclusive() -> None:
    """Implicit TLS and STARTTLS cannot both be on."""
    with pytest.raises(ValidationError, match="mutually exclusive"):
        SenderConfig(use_tls=True, use_starttls=True)


@pytest.mark.os_agnostic
def test_empty_host_is_rejected() -> None:
    """A relay needs a host name."""
    with pytest.raises(ValidationError, match="host must not be empty"):
        SenderConfig(host="  ")


@pytest.mark.os_agnostic
@pytest.mark.parametrize("port", [0, 65536, -25])
def test_port_out_of_range_is_rejected(port: int) -> None:
    """Ports outside 1-65535 fail validation."""
    with pytest.raises(ValidationError):
        SenderConfig(port=port)


@pytest.mark.os_agnostic
def test_ipv6_host_is_bracketed_in_address() -> None:
    """IPv6 literals are bracketed so the port stays unambiguous."""
    assert SenderConfig(host="::1", port=2525).address == "[::1]:2525"


# ======================== Repr ========================


@pytest.mark.os_agnostic
def test_repr_redacts_password() -> None:
    """The password never appears in repr output."""
    text = repr(SenderConfig(username="user", password="hunter2"))

    assert "hunter2" not in text
    assert "password='[REDACTED]'" in text
    assert "username='user'" in text


@pytest.mark.os_agnostic
def test_repr_shows_missing_password_as_none() -> None:
    """An unset password is shown as None, not redacted."""
    assert "password=None" in repr(SenderConfig())


# ======================== Loader ========================


@pytest.mark.os_agnostic
def test_loader_reads_email_section() -> None:
    """Relay settings come from the [email] section."""
    config = load_sender_config_from_dict(
        {"email": {"host": "smtp.example.com", "port": 587, "use_starttls": True, "timeout": 10}}
    )

    assert config.address == "smtp.example.com:587"
    assert config.use_starttls is True
    assert config.timeout == 10.0


@pytest.mark.os_agnostic
def test_loader_flattens_auth_subsection() -> None:
    """[email.auth] username, password and method land on the model."""
    config = load_sender_config_from_dict(
        {"email": {"host": "localhost", "auth": {"username": "u", "password": "p", "method": "login"}}}
    )

    assert config.username == "u"
    assert config.password == "p"
    assert config.auth_method is AuthMethod.LOGIN


@pytest.mark.os_agnostic
def test_loader_without_email_section_uses_defaults() -> None:
    """Missing configuration yields the default relay."""
    assert load_sender_config_from_dict({}) == SenderConfig()


@pytest.mark.os_agnostic
def test_loader_rejects_non_mapping_section() -> None:
    """A scalar [email] value is a validation error."""
    with pytest.raises(ValidationError):
        load_sender_config_from_dict({"email": "invalid"})


@pytest.mark.os_agnostic
def test_loader_rejects_invalid_values() -> None:
    """Type errors in the file surface as validation errors."""
    with pytest.raises(ValidationError):
        load_sender_config_from_dict({"email": {"port": "not-a-port"}})


# ======================== Properties ========================

_hostname = st.from_regex(r"[a-z][a-z0-9]{0,15}\.[a-z]{2,6}", fullmatch=True)
_port = st.integers(min_value=1, max_value=65535)


@pytest.mark.os_agnostic
@given(host=_hostname, port=_port)
@settings(max_examples=100)
def test_any_hostname_and_valid_port_builds_an_address(host: str, port: int) -> None:
    """Valid host and port always combine to host:port."""
    assert SenderConfig(host=host, port=port).address == f"{host}:{port}"


@pytest.mark.os_agnostic
@given(timeout=st.floats(max_value=0.0, allow_nan=False))
@settings(max_examples=50)
def test_non_positive_timeouts_are_always_rejected(timeout: float) -> None:
    """Every timeout at or below zero is rejected."""
    with pytest.raises(ValidationError):
        SenderConfig(timeout=timeout)

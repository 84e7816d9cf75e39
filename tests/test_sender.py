"""Session orchestrator stories: which SMTP commands run on each path.

Every scenario drives :class:`Sender` against the in-memory wire client and
checks three things: the error surfaced to the caller, the commands the
relay saw, and whether the session was quit or closed.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

import pytest

from relaymail.adapters.email.config import SenderConfig
from relaymail.adapters.email.sender import Sender, send_email
from relaymail.adapters.memory import DataSinkSpy, FrozenClock, WireClientSpy
from relaymail.domain.errors import (
    AttachmentReadError,
    AuthError,
    BadFromAddress,
    BadToAddress,
    BodyWriteError,
    DataOpenError,
    DeliveryError,
    DialError,
    MessageBuildError,
)
from relaymail.domain.models import SendParams, ServerInfo


def _sender(config: SenderConfig, spy: WireClientSpy) -> Sender:
    return Sender(config, wire_client=spy, clock=FrozenClock())


# ======================== Successful sends ========================


@pytest.mark.os_agnostic
def test_no_recipients_touches_nothing(local_config: SenderConfig, wire_spy: WireClientSpy) -> None:
    """An empty recipient list returns before any command."""
    _sender(local_config, wire_spy).send("body", SendParams(from_address="from@example.com"))

    assert wire_spy.calls == []


@pytest.mark.os_agnostic
def test_no_recipients_never_dials(local_config: SenderConfig) -> None:
    """Without recipients the dialer is not called either."""
    dialed: list[SenderConfig] = []

    def dialer(config: SenderConfig) -> WireClientSpy:
        dialed.append(config)
        return WireClientSpy()

    Sender(local_config, dialer=dialer).send("body", SendParams(from_address="from@example.com"))

    assert dialed == []


@pytest.mark.os_agnostic
def test_success_runs_mail_rcpt_data_quit(
    local_config: SenderConfig, wire_spy: WireClientSpy, basic_params: SendParams
) -> None:
    """A clean send quits and never closes."""
    _sender(local_config, wire_spy).send("some text\n", basic_params)

    assert wire_spy.commands == ["mail", "rcpt", "data", "quit"]
    assert wire_spy.count("close") == 0
    assert wire_spy.calls[0] == ("mail", ("from@example.com",))
    assert wire_spy.calls[1] == ("rcpt", ("to@example.com",))
    assert wire_spy.sink.closed


@pytest.mark.os_agnostic
def test_success_writes_the_built_message(
    local_config: SenderConfig, wire_spy: WireClientSpy, basic_params: SendParams
) -> None:
    """The sink receives the full message dated by the clock."""
    _sender(local_config, wire_spy).send("some text\n", basic_params)

    assert wire_spy.sink.message == (
        b"From: from@example.com\r\n"
        b"To: to@example.com\r\n"
        b"Subject: subject\r\n"
        b"Content-Transfer-Encoding: quoted-printable\r\n"
        b"MIME-version: 1.0\r\n"
        b'Content-Type: text/plain; charset="UTF-8"\r\n'
        b"Date: Thu, 10 Feb 2022 23:33:58 +0000\r\n"
        b"\r\n"
        b"some text\r\n"
    )


@pytest.mark.os_agnostic
def test_one_rcpt_per_recipient_in_order(local_config: SenderConfig, wire_spy: WireClientSpy) -> None:
    """Each recipient gets its own RCPT, in list order."""
    params = SendParams(from_address="from@example.com", to=["a@example.com", "b@example.com", "c@example.com"])

    _sender(local_config, wire_spy).send("x", params)

    assert [args[0] for name, args in wire_spy.calls if name == "rcpt"] == [
        "a@example.com",
        "b@example.com",
        "c@example.com",
    ]


@pytest.mark.os_agnostic
def test_message_uses_configured_content_type(wire_spy: WireClientSpy, basic_params: SendParams) -> None:
    """Content type and charset come from the config."""
    config = SenderConfig(host="localhost", content_type="text/html", charset="ISO-8859-1")

    _sender(config, wire_spy).send("<p>x</p>", basic_params)

    assert b'Content-Type: text/html; charset="ISO-8859-1"\r\n' in wire_spy.sink.message


@pytest.mark.os_agnostic
def test_clock_supplies_the_date_header(
    local_config: SenderConfig, wire_spy: WireClientSpy, basic_params: SendParams
) -> None:
    """The injected clock decides the Date header."""
    clock = FrozenClock(datetime(2030, 1, 2, 3, 4, 5, tzinfo=timezone.utc))

    Sender(local_config, wire_client=wire_spy, clock=clock).send("x", basic_params)

    assert b"Date: Wed, 02 Jan 2030 03:04:05 +0000\r\n" in wire_spy.sink.message


@pytest.mark.os_agnostic
def test_dialer_opens_a_session_per_send(local_config: SenderConfig, basic_params: SendParams) -> None:
    """Without a shared client, each send dials its own session."""
    sessions: list[WireClientSpy] = []

    def dialer(config: SenderConfig) -> WireClientSpy:
        session = WireClientSpy()
        sessions.append(session)
        return session

    sender = Sender(local_config, dialer=dialer, clock=FrozenClock())
    sender.send("one", basic_params)
    sender.send("two", basic_params)

    assert len(sessions) == 2
    assert all(session.commands == ["mail", "rcpt", "data", "quit"] for session in sessions)


@pytest.mark.os_agnostic
def test_dial_failure_propagates(local_config: SenderConfig, basic_params: SendParams) -> None:
    """A DialError from the dialer reaches the caller untouched."""

    def dialer(config: SenderConfig) -> WireClientSpy:
        raise DialError(config.address, "connection refused")

    with pytest.raises(DialError, match="failed to make smtp client for localhost:25"):
        Sender(local_config, dialer=dialer).send("x", basic_params)


# ======================== Authentication ========================


@pytest.mark.os_agnostic
def test_credentials_trigger_auth_before_mail(wire_spy: WireClientSpy, basic_params: SendParams) -> None:
    """With username and password, AUTH is the first command."""
    config = SenderConfig(host="localhost", username="user", password="password")

    _sender(config, wire_spy).send("x", basic_params)

    assert wire_spy.commands == ["auth", "mail", "rcpt", "data", "quit"]
    assert wire_spy.auth_responses == [b"\x00user\x00password"]


@pytest.mark.os_agnostic
def test_login_auth_method_answers_password_challenge(basic_params: SendParams) -> None:
    """LOGIN sends the username, then the password on the challenge."""
    spy = WireClientSpy(challenges=[b"Password:"])
    config = SenderConfig(host="localhost", username="user", password="password", auth_method="LOGIN")

    _sender(config, spy).send("x", basic_params)

    assert spy.auth_responses == [b"user", b"password"]


@pytest.mark.os_agnostic
def test_username_without_password_skips_auth(wire_spy: WireClientSpy, basic_params: SendParams) -> None:
    """Half a credential pair is not enough to authenticate."""
    config = SenderConfig(host="localhost", username="user")

    _sender(config, wire_spy).send("x", basic_params)

    assert "auth" not in wire_spy.commands


@pytest.mark.os_agnostic
def test_auth_failure_closes_without_quit(basic_params: SendParams) -> None:
    """A rejected AUTH aborts the send and closes the session."""
    spy = WireClientSpy(failures={"auth": RuntimeError("auth error")})
    config = SenderConfig(host="localhost", username="user", password="password")

    with pytest.raises(AuthError) as excinfo:
        _sender(config, spy).send("x", basic_params)

    assert str(excinfo.value) == "failed to auth to smtp localhost:25, auth error"
    assert spy.commands == ["auth", "close"]


@pytest.mark.os_agnostic
def test_mechanism_refusal_becomes_auth_error(basic_params: SendParams) -> None:
    """A remote plaintext relay makes the mechanism refuse; that is an AuthError."""
    spy = WireClientSpy(server=ServerInfo(name="mail.example.com"))
    config = SenderConfig(host="mail.example.com", username="user", password="password")

    with pytest.raises(AuthError, match="unencrypted connection"):
        _sender(config, spy).send("x", basic_params)

    assert spy.count("mail") == 0
    assert spy.count("close") == 1


# ======================== Envelope failures ========================


@pytest.mark.os_agnostic
def test_mail_failure_is_bad_from_address(
    local_config: SenderConfig, basic_params: SendParams
) -> None:
    """A rejected MAIL names the sender."""
    spy = WireClientSpy(failures={"mail": RuntimeError("mail error")})

    with pytest.raises(BadFromAddress) as excinfo:
        _sender(local_config, spy).send("x", basic_params)

    assert str(excinfo.value) == "bad from address 'from@example.com': mail error"
    assert spy.commands == ["mail", "close"]


@pytest.mark.os_agnostic
def test_rcpt_failure_stops_at_first_rejection(local_config: SenderConfig) -> None:
    """The first rejected recipient aborts; later recipients are not tried."""
    spy = WireClientSpy(failures={"rcpt": RuntimeError("RCPT error")})
    params = SendParams(from_address="from@example.com", to=["to@example.com", "other@example.com"])

    with pytest.raises(BadToAddress) as excinfo:
        _sender(local_config, spy).send("x", params)

    assert str(excinfo.value) == "bad to address ['to@example.com', 'other@example.com']: RCPT error"
    assert excinfo.value.rejected == "to@example.com"
    assert spy.count("mail") == 1
    assert spy.count("rcpt") == 1
    assert spy.count("close") == 1
    assert spy.count("quit") == 0


@pytest.mark.os_agnostic
def test_data_failure_is_data_open_error(local_config: SenderConfig, basic_params: SendParams) -> None:
    """A refused DATA means there is no writer."""
    spy = WireClientSpy(failures={"data": RuntimeError("data error")})

    with pytest.raises(DataOpenError, match="can't make email writer: data error"):
        _sender(local_config, spy).send("x", basic_params)

    assert spy.commands == ["mail", "rcpt", "data", "close"]


# ======================== Body failures ========================


@pytest.mark.os_agnostic
def test_missing_attachment_fails_before_writing(local_config: SenderConfig, wire_spy: WireClientSpy) -> None:
    """An unreadable attachment aborts with nothing written to the relay."""
    params = SendParams(from_address="from@example.com", to=["to@example.com"], attachments=["does/not/exist/1.txt"])

    with pytest.raises(MessageBuildError) as excinfo:
        _sender(local_config, wire_spy).send("x", params)

    assert isinstance(excinfo.value.__cause__, AttachmentReadError)
    assert "does/not/exist/1.txt" in str(excinfo.value)
    assert wire_spy.sink.message == b""
    assert wire_spy.count("close") == 1
    assert wire_spy.count("quit") == 0


@pytest.mark.os_agnostic
def test_attachment_is_sent(local_config: SenderConfig, wire_spy: WireClientSpy, tmp_path: Path) -> None:
    """A readable attachment makes the message multipart."""
    doc = tmp_path / "notes.txt"
    doc.write_text("hello\n", encoding="utf-8")
    params = SendParams(from_address="from@example.com", to=["to@example.com"], attachments=[doc])

    _sender(local_config, wire_spy).send("x", params)

    assert b"Content-Type: multipart/mixed; boundary=" in wire_spy.sink.message
    assert b'filename="notes.txt"' in wire_spy.sink.message


@pytest.mark.os_agnostic
def test_write_failure_is_body_write_error(local_config: SenderConfig, basic_params: SendParams) -> None:
    """A failing write names the recipients."""
    spy = WireClientSpy(sink=DataSinkSpy(fail_write=RuntimeError("write error")))

    with pytest.raises(BodyWriteError) as excinfo:
        _sender(local_config, spy).send("x", basic_params)

    assert str(excinfo.value) == "failed to send email body to ['to@example.com']: write error"
    assert spy.count("close") == 1


@pytest.mark.os_agnostic
def test_unknown_charset_is_message_build_error(wire_spy: WireClientSpy, basic_params: SendParams) -> None:
    """A charset Python does not know cannot build a message."""
    config = SenderConfig(host="localhost", charset="no-such-charset")

    with pytest.raises(MessageBuildError):
        _sender(config, wire_spy).send("x", basic_params)


# ======================== Degraded cleanup ========================


@pytest.mark.os_agnostic
def test_sink_close_failure_is_only_logged(
    local_config: SenderConfig, basic_params: SendParams, caplog: pytest.LogCaptureFixture
) -> None:
    """A failing end-of-data is a warning; the session still quits."""
    spy = WireClientSpy(sink=DataSinkSpy(fail_close=RuntimeError("close error")))

    with caplog.at_level(logging.WARNING):
        _sender(local_config, spy).send("x", basic_params)

    assert spy.commands == ["mail", "rcpt", "data", "quit"]
    assert "Failed to close email writer" in caplog.text


@pytest.mark.os_agnostic
def test_quit_failure_falls_back_to_close(
    local_config: SenderConfig, basic_params: SendParams, caplog: pytest.LogCaptureFixture
) -> None:
    """When QUIT fails the connection is closed once and the send still succeeds."""
    spy = WireClientSpy(failures={"quit": RuntimeError("quit error")})

    with caplog.at_level(logging.WARNING):
        _sender(local_config, spy).send("x", basic_params)

    assert spy.commands == ["mail", "rcpt", "data", "quit", "close"]
    assert "Failed to quit SMTP session" in caplog.text


@pytest.mark.os_agnostic
def test_close_failure_after_quit_failure_is_only_logged(
    local_config: SenderConfig, basic_params: SendParams, caplog: pytest.LogCaptureFixture
) -> None:
    """Neither cleanup failure reaches the caller."""
    spy = WireClientSpy(failures={"quit": RuntimeError("quit error"), "close": RuntimeError("close error")})

    with caplog.at_level(logging.WARNING):
        _sender(local_config, spy).send("x", basic_params)

    assert "Failed to close SMTP session" in caplog.text


@pytest.mark.os_agnostic
def test_close_failure_does_not_mask_the_terminal_error(local_config: SenderConfig, basic_params: SendParams) -> None:
    """The original failure is what the caller sees."""
    spy = WireClientSpy(failures={"mail": RuntimeError("mail error"), "close": RuntimeError("close error")})

    with pytest.raises(BadFromAddress):
        _sender(local_config, spy).send("x", basic_params)


@pytest.mark.os_agnostic
@pytest.mark.parametrize("failing", ["mail", "rcpt", "data"])
def test_every_terminal_failure_is_a_delivery_error(
    local_config: SenderConfig, basic_params: SendParams, failing: str
) -> None:
    """Callers can catch one base class."""
    spy = WireClientSpy(failures={failing: RuntimeError("boom")})

    with pytest.raises(DeliveryError):
        _sender(local_config, spy).send("x", basic_params)


# ======================== Shared wire client ========================


@dataclass
class GatedWireSpy(WireClientSpy):
    """Wire spy whose MAIL waits for a gate and which counts open transactions."""

    gate: threading.Event = field(default_factory=threading.Event)
    first_mail: threading.Event = field(default_factory=threading.Event)
    in_flight: int = 0
    max_in_flight: int = 0

    def mail(self, from_address: str) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.first_mail.set()
        self.gate.wait(timeout=5)
        super().mail(from_address)

    def quit(self) -> None:
        super().quit()
        self.in_flight -= 1


@pytest.mark.os_agnostic
def test_sends_over_a_shared_client_never_interleave(local_config: SenderConfig) -> None:
    """A second send waits until the first transaction on the same session has quit."""
    spy = GatedWireSpy()
    sender = _sender(local_config, spy)
    errors: list[BaseException] = []

    def send_from(address: str) -> None:
        try:
            sender.send("x", SendParams(from_address=address, to=["to@example.com"]))
        except BaseException as exc:  # noqa: BLE001
            errors.append(exc)

    first = threading.Thread(target=send_from, args=("first@example.com",))
    second = threading.Thread(target=send_from, args=("second@example.com",))
    first.start()
    assert spy.first_mail.wait(timeout=5)
    second.start()
    time.sleep(0.05)
    spy.gate.set()
    first.join(timeout=5)
    second.join(timeout=5)

    assert errors == []
    assert spy.max_in_flight == 1
    assert spy.commands == ["mail", "rcpt", "data", "quit"] * 2
    assert [args[0] for name, args in spy.calls if name == "mail"] == ["first@example.com", "second@example.com"]


# ======================== Module function ========================


@pytest.mark.os_agnostic
def test_send_email_without_recipients_is_a_no_op() -> None:
    """The one-shot function returns early for an empty recipient list."""
    send_email(config=SenderConfig(host="localhost"), body="x", params=SendParams(from_address="a@example.com"))


@pytest.mark.os_agnostic
def test_send_email_dials_through_default_dialer(
    monkeypatch: pytest.MonkeyPatch, basic_params: SendParams
) -> None:
    """The one-shot function uses the production dialer."""
    spy = WireClientSpy()
    monkeypatch.setattr("relaymail.adapters.email.sender.dial_wire_client", lambda config: spy)

    send_email(config=SenderConfig(host="localhost"), body="x", params=basic_params)

    assert spy.commands == ["mail", "rcpt", "data", "quit"]

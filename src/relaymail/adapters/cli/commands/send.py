"""``send`` command: deliver one message through the configured relay.

Contents:
    * :func:`cli_send` - Send a message with optional attachments.
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path

import rich_click as click
from pydantic import ValidationError

from relaymail.adapters.config.overrides import apply_sender_overrides
from relaymail.adapters.email.config import SenderConfig
from relaymail.adapters.email.validation import validate_send_params
from relaymail.adapters.logging import command_scope
from relaymail.domain.errors import ConfigurationError, InvalidRecipientError
from relaymail.domain.models import SendParams

from ..constants import AUTH_METHOD_CHOICES, CLICK_CONTEXT_SETTINGS
from ..context import CLIContext, get_cli_context
from ..exit_codes import ExitCode
from ._delivery import fail, run_delivery

logger = logging.getLogger(__name__)


def _read_body(body: str | None, body_file: Path | None) -> str:
    """Return the message text from ``--body`` or ``--body-file``.

    Raises:
        click.UsageError: Both were given.
    """
    if body is not None and body_file is not None:
        raise click.UsageError("--body and --body-file are mutually exclusive")
    if body_file is not None:
        return body_file.read_text(encoding="utf-8")
    return body or ""


def _load_sender_config(cli_ctx: CLIContext, **options: object) -> SenderConfig:
    """Build the relay configuration from the layers plus the SMTP options.

    Raises:
        SystemExit: CONFIG_ERROR when the layered values are invalid on their
            own, INVALID_ARGUMENT when the options make them invalid.
    """
    config = apply_sender_overrides(cli_ctx.config, options)
    try:
        return cli_ctx.services.load_sender_config_from_dict(config.as_dict())
    except ValidationError as exc:
        try:
            cli_ctx.sender_config()
        except ConfigurationError as config_exc:
            fail(config_exc)
        fail(exc, ExitCode.INVALID_ARGUMENT)


@click.command("send", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--to", "recipients", multiple=True, required=True, help="Recipient address (repeatable)")
@click.option("--from", "from_address", required=True, help="Sender address (MAIL FROM and From header)")
@click.option("--subject", default="", help="Subject line (non-ASCII is encoded)")
@click.option("--body", default=None, help="Message text")
@click.option(
    "--body-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read the message text from a UTF-8 file",
)
@click.option(
    "--attachment",
    "attachments",
    multiple=True,
    type=click.Path(path_type=Path),
    help="File to attach (repeatable); its type is detected from its contents",
)
@click.option("--host", default=None, help="Override SMTP relay host")
@click.option("--port", type=click.IntRange(1, 65535), default=None, help="Override SMTP relay port")
@click.option("--tls/--no-tls", "use_tls", default=None, help="Override implicit TLS (SMTPS)")
@click.option("--starttls/--no-starttls", "use_starttls", default=None, help="Override STARTTLS upgrade")
@click.option("--username", default=None, help="Override SMTP username")
@click.option("--password", default=None, help="Override SMTP password")
@click.option(
    "--auth-method",
    type=click.Choice(AUTH_METHOD_CHOICES, case_sensitive=False),
    default=None,
    help="Override SASL mechanism",
)
@click.option("--content-type", default=None, help="Override media type of the text (e.g. text/html)")
@click.option("--charset", default=None, help="Override charset of the text")
@click.option("--timeout", type=float, default=None, help="Override socket timeout in seconds")
@click.pass_context
def cli_send(
    ctx: click.Context,
    recipients: tuple[str, ...],
    from_address: str,
    subject: str,
    body: str | None,
    body_file: Path | None,
    attachments: tuple[Path, ...],
    host: str | None,
    port: int | None,
    use_tls: bool | None,
    use_starttls: bool | None,
    username: str | None,
    password: str | None,
    auth_method: str | None,
    content_type: str | None,
    charset: str | None,
    timeout: float | None,
) -> None:
    """Send an email through the configured SMTP relay.

    Exit codes: 0 sent, 2 attachment unreadable, 22 invalid address or
    option, 69 relay failure, 78 configuration error.
    """
    cli_ctx = get_cli_context(ctx)
    to = list(recipients)

    with command_scope("send", {"recipients": to, "subject": subject}):
        text = _read_body(body, body_file)
        sender_config = _load_sender_config(
            cli_ctx,
            host=host,
            port=port,
            use_tls=use_tls,
            use_starttls=use_starttls,
            username=username,
            password=password,
            auth_method=auth_method.upper() if auth_method else None,
            content_type=content_type,
            charset=charset,
            timeout=timeout,
        )
        params = SendParams(from_address=from_address, to=to, subject=subject, attachments=attachments)
        try:
            validate_send_params(params)
        except InvalidRecipientError as exc:
            fail(exc)

        logger.info(
            "Sending email",
            extra={"recipients": to, "address": sender_config.address, "attachment_count": len(attachments)},
        )
        run_delivery(
            functools.partial(cli_ctx.services.send_email, config=sender_config, body=text, params=params),
            recipients=to,
        )


__all__ = ["cli_send"]

"""Metadata and failure-path commands.

Contents:
    * :func:`cli_info` - Display package metadata and the configured relay.
    * :func:`cli_fail` - Raise on purpose to exercise error reporting.
"""

from __future__ import annotations

import logging

import rich_click as click

from relaymail import __init__conf__
from relaymail.adapters.email.config import SenderConfig
from relaymail.adapters.logging import command_scope
from relaymail.domain.errors import ConfigurationError

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context

logger = logging.getLogger(__name__)


def describe_relay(config: SenderConfig) -> str:
    """One-line summary of where and how ``send`` would connect.

    Example:
        >>> describe_relay(SenderConfig(host="smtp.example.com", port=465, use_tls=True))
        'smtp.example.com:465 (tls, no auth)'
        >>> describe_relay(SenderConfig(port=587, use_starttls=True, username="u", password="p", auth_method="LOGIN"))
        'localhost:587 (starttls, LOGIN as u)'
    """
    if config.use_tls:
        mode = "tls"
    elif config.use_starttls:
        mode = "starttls"
    else:
        mode = "plain"
    auth = f"{config.auth_method.value} as {config.username}" if config.has_credentials else "no auth"
    return f"{config.address} ({mode}, {auth})"


@click.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_info(ctx: click.Context) -> None:
    """Print package metadata and the relay the layered configuration selects."""
    cli_ctx = get_cli_context(ctx)
    with command_scope("info"):
        logger.info("Displaying package information")
        __init__conf__.print_info()
        try:
            sender_config = cli_ctx.sender_config()
        except ConfigurationError as exc:
            logger.warning("Relay configuration is invalid", extra={"error": str(exc)})
            click.echo(f"\n    relay = {exc}")
            return
        click.echo(f"\n    relay = {describe_relay(sender_config)}")


@click.command("fail", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_fail() -> None:
    """Raise a RuntimeError to check traceback and exit-code handling."""
    with command_scope("fail"):
        logger.warning("Executing intentional failure command")
        raise RuntimeError("I should fail")


__all__ = ["cli_fail", "cli_info", "describe_relay"]

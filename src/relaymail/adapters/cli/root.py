"""Root ``relaymail`` command group.

Loads configuration once (profile plus ``--set`` overrides), starts logging,
and stores the result for the subcommands.

Contents:
    * :func:`cli` - Root command group with global options.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import rich_click as click
from lib_layered_config import Config

from relaymail import __init__conf__
from relaymail.adapters.config.overrides import apply_overrides

from .constants import CLICK_CONTEXT_SETTINGS
from .context import CLIContext, apply_traceback_preferences, store_cli_context

if TYPE_CHECKING:
    from relaymail.composition import AppServices


def apply_cli_overrides(config: Config, set_overrides: tuple[str, ...]) -> Config:
    """Merge ``--set`` assignments into ``config``.

    Raises:
        click.UsageError: An assignment is malformed or descends into a
            non-table value.
    """
    try:
        return apply_overrides(config, set_overrides)
    except (ValueError, TypeError) as exc:
        raise click.UsageError(str(exc)) from exc


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.option(
    "--profile",
    type=str,
    default=None,
    help="Load configuration from a named profile (e.g., 'production', 'test')",
)
@click.option(
    "--set",
    "set_overrides",
    multiple=True,
    default=(),
    metavar="SECTION.KEY=VALUE",
    help="Override a configuration setting, e.g. email.host=smtp.example.com (repeatable).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, profile: str | None, set_overrides: tuple[str, ...]) -> None:
    """Send email through an SMTP relay."""
    if not callable(ctx.obj):
        raise RuntimeError("Services factory not provided. This is a bug.")
    services: AppServices = ctx.obj()  # type: ignore[assignment]  # Click's obj is typed as Any
    try:
        config = services.get_config(profile=profile)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--profile") from exc
    config = apply_cli_overrides(config, set_overrides)
    services.init_logging(config)
    store_cli_context(
        ctx,
        CLIContext(
            traceback=traceback,
            config=config,
            services=services,
            profile=profile,
            set_overrides=set_overrides,
        ),
    )
    apply_traceback_preferences(traceback)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Deferred: command modules import from this package.
def _register_commands() -> None:
    from .commands import cli_config, cli_fail, cli_info, cli_send

    for cmd in (cli_info, cli_fail, cli_config, cli_send):
        cli.add_command(cmd)


_register_commands()


__all__ = ["apply_cli_overrides", "cli"]

"""Per-invocation CLI state and the shared traceback switch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import lib_cli_exit_tools
import rich_click as click
from lib_layered_config import Config
from pydantic import ValidationError

from relaymail.domain.errors import ConfigurationError

if TYPE_CHECKING:
    from relaymail.adapters.email.config import SenderConfig
    from relaymail.composition import AppServices

TracebackState = tuple[bool, bool]
"""Captured traceback configuration: (traceback_enabled, force_color)."""


@dataclass(slots=True)
class CLIContext:
    """What the root command hands to every subcommand.

    Attributes:
        traceback: ``--traceback`` was given.
        config: Layered configuration with ``--set`` overrides applied.
        services: Adapters wired by the composition root.
        profile: Root ``--profile``, if any.
        set_overrides: Raw ``--set`` strings, reapplied when a subcommand
            reloads configuration for another profile.
    """

    traceback: bool
    config: Config
    services: AppServices
    profile: str | None = None
    set_overrides: tuple[str, ...] = ()

    def sender_config(self) -> SenderConfig:
        """Validate the relay settings of :attr:`config` (``--set`` included).

        Raises:
            ConfigurationError: The ``[email]`` section does not describe a
                usable relay.
        """
        try:
            return self.services.load_sender_config_from_dict(self.config.as_dict())
        except ValidationError as exc:
            problems = "; ".join(str(error["msg"]) for error in exc.errors())
            raise ConfigurationError(f"invalid configuration ({exc.error_count()} error(s)): {problems}") from exc


def store_cli_context(ctx: click.Context, cli_ctx: CLIContext) -> None:
    """Replace the services factory in ``ctx.obj`` with the resolved state."""
    ctx.obj = cli_ctx


def get_cli_context(ctx: click.Context) -> CLIContext:
    """Return the state stored by the root command.

    Raises:
        RuntimeError: The command ran without the root group.
    """
    if not isinstance(ctx.obj, CLIContext):
        raise RuntimeError("CLI context not initialized. Call store_cli_context first.")
    return ctx.obj


def apply_traceback_preferences(enabled: bool) -> None:
    """Turn full, coloured tracebacks in lib_cli_exit_tools on or off.

    Example:
        >>> apply_traceback_preferences(True)
        >>> bool(lib_cli_exit_tools.config.traceback)
        True
        >>> apply_traceback_preferences(False)
    """
    lib_cli_exit_tools.config.traceback = bool(enabled)
    lib_cli_exit_tools.config.traceback_force_color = bool(enabled)


def snapshot_traceback_state() -> TracebackState:
    """Capture the traceback flags so :func:`restore_traceback_state` can reset them."""
    return (
        bool(getattr(lib_cli_exit_tools.config, "traceback", False)),
        bool(getattr(lib_cli_exit_tools.config, "traceback_force_color", False)),
    )


def restore_traceback_state(state: TracebackState) -> None:
    """Reapply flags captured by :func:`snapshot_traceback_state`.

    Example:
        >>> original = snapshot_traceback_state()
        >>> apply_traceback_preferences(True)
        >>> restore_traceback_state(original)
        >>> snapshot_traceback_state() == original
        True
    """
    lib_cli_exit_tools.config.traceback, lib_cli_exit_tools.config.traceback_force_color = state


__all__ = [
    "CLIContext",
    "TracebackState",
    "apply_traceback_preferences",
    "get_cli_context",
    "restore_traceback_state",
    "snapshot_traceback_state",
    "store_cli_context",
]

"""lib_log_rich runtime setup shared by every entry point.

Library modules only ever log through ``logging.getLogger(__name__)``; this
module is where those records get somewhere. :func:`init_logging` starts the
lib_log_rich runtime from the ``[lib_log_rich]`` section and attaches the
standard logging bridge, and :func:`command_scope` binds the per-command
context the CLI logs under.

Contents:
    * :class:`LoggingConfigModel` - Validation of the ``[lib_log_rich]`` section.
    * :func:`init_logging` - Idempotent runtime initialisation.
    * :func:`command_scope` - Logging context for one CLI command.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, cast

import lib_log_rich.config
import lib_log_rich.runtime
from lib_layered_config import Config
from pydantic import BaseModel, ConfigDict

from relaymail import __init__conf__


class LoggingConfigModel(BaseModel):
    """The ``[lib_log_rich]`` section.

    ``service`` and ``environment`` are typed here; every other key is passed
    through to :class:`lib_log_rich.runtime.RuntimeConfig` unchanged.

    Example:
        >>> LoggingConfigModel().environment
        'prod'
        >>> LoggingConfigModel(console_level="DEBUG").model_dump(exclude_none=True)
        {'environment': 'prod', 'console_level': 'DEBUG'}
    """

    model_config = ConfigDict(extra="allow")

    service: str | None = None
    environment: str = "prod"


def build_runtime_config(config: Config) -> lib_log_rich.runtime.RuntimeConfig:
    """Translate the ``[lib_log_rich]`` section into a RuntimeConfig.

    The service name defaults to the distribution name when not configured.
    """
    section: object = config.get("lib_log_rich", default={})
    parsed = LoggingConfigModel.model_validate(cast("dict[str, object]", section) if section else {})
    passthrough = parsed.model_dump(exclude={"service", "environment"}, exclude_none=True)
    return lib_log_rich.runtime.RuntimeConfig(
        service=parsed.service or __init__conf__.name,
        environment=parsed.environment,
        **passthrough,
    )


def init_logging(config: Config) -> None:
    """Start the lib_log_rich runtime once per process.

    ``.env`` files are loaded first so ``LOG_*`` variables in them take
    effect. Later calls return immediately.

    Example:
        >>> init_logging(Config({"lib_log_rich": {"environment": "test"}}, {}))  # doctest: +SKIP
    """
    if lib_log_rich.runtime.is_initialised():
        return
    lib_log_rich.config.enable_dotenv()
    lib_log_rich.runtime.init(build_runtime_config(config))
    lib_log_rich.runtime.attach_std_logging()


@contextmanager
def command_scope(command: str, extra: Mapping[str, Any] | None = None) -> Iterator[None]:
    """Bind ``command`` (and ``extra``) to every record logged inside the block.

    The job id is ``cli-<command>``. Without an initialised runtime the block
    runs unbound, so commands also work under ``CliRunner`` with in-memory
    logging.
    """
    if not lib_log_rich.runtime.is_initialised():
        yield
        return
    context = {"command": command, **(extra or {})}
    with lib_log_rich.runtime.bind(job_id=f"cli-{command}", extra=context):
        yield


__all__ = [
    "LoggingConfigModel",
    "build_runtime_config",
    "command_scope",
    "init_logging",
]

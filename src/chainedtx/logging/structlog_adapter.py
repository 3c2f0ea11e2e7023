# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""StructlogAdapter — default LoggingPort implementation using structlog."""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog

from chainedtx.core.config import Config
from chainedtx.kernel.exceptions import ConfigurationException

LEVEL_SECTION = "chainedtx.logging.level"
FORMAT_KEY = "chainedtx.logging.format"

_RENDERERS: dict[str, Any] = {
    "console": structlog.dev.ConsoleRenderer,
    "json": structlog.processors.JSONRenderer,
}

logger = structlog.get_logger("chainedtx.logging")


def _level_number(level: Any, setting: str) -> int:
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ConfigurationException(
            f"Unknown log level '{level}' for {setting}",
            code="LOGGING_LEVEL",
            context={"setting": setting, "level": level},
        )
    return value


class StructlogAdapter:
    """Logging port that renders structlog events through stdlib logging.

    Configured from::

        chainedtx:
          logging:
            format: console        # or json
            level:
              root: INFO
              chainedtx.transaction: DEBUG

    Every key under level other than root names a logger. The
    context configures this adapter first on refresh, so post-processor
    events (for example chained_transaction_manager_registered) are
    rendered with the configured format.
    """

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream
        self._root_level = "INFO"
        self._format = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        levels = {str(k): str(v).upper() for k, v in config.get_section(LEVEL_SECTION).items()}
        root_level = levels.pop("root", "INFO")
        _level_number(root_level, f"{LEVEL_SECTION}.root")
        for name, level in levels.items():
            _level_number(level, f"{LEVEL_SECTION}.{name}")

        log_format = str(config.get(FORMAT_KEY, "console")).lower()
        if log_format not in _RENDERERS:
            raise ConfigurationException(
                f"Unknown log format '{log_format}', expected one of {sorted(_RENDERERS)}",
                code="LOGGING_FORMAT",
                context={"setting": FORMAT_KEY, "format": log_format},
            )

        self._root_level = root_level
        self._module_levels = levels
        self._format = log_format
        self._install()
        for name, level in levels.items():
            self.set_level(name, level)
        logger.debug("logging_configured", root=root_level, format=log_format, loggers=levels)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(_level_number(level, f"{LEVEL_SECTION}.{name}"))

    def _install(self) -> None:
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.UnicodeDecoder(),
                _RENDERERS[self._format](),
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=self._stream or sys.stdout,
            level=_level_number(self._root_level, f"{LEVEL_SECTION}.root"),
            force=True,
        )

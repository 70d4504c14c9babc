# Copyright 2025 - Oumi
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

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

_DISABLE_RICH_LOGGING_ENV_VAR = "GEMINI_CHAT_DISABLE_RICH_LOGGING"
_TRUTHY_ENV_VALUES = frozenset({"1", "y", "yes", "on", "true"})

_PLAIN_FORMAT = (
    "[%(asctime)s][%(name)s][%(levelname)s][%(filename)s:%(lineno)s] %(message)s"
)
_RICH_FORMAT = "%(message)s"
_RICH_DEBUG_FORMAT = "[%(threadName)s] %(message)s"


def get_logger(
    name: str,
    level: str = "info",
    log_dir: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Returns the named logger, configuring it on first use.

    A logger that already exists is returned as is: `level` and `log_dir` only
    apply the first time.

    Args:
        name: The name of the logger.
        level: Log level name, e.g. "debug". Defaults to "info".
        log_dir: If set, records are also written to `<log_dir>/<name>.log`.

    Returns:
        logging.Logger: The logger instance.
    """
    if name not in logging.Logger.manager.loggerDict:
        configure_logger(name, level=level, log_dir=log_dir)
    return logging.getLogger(name)


def configure_logger(
    name: str,
    level: str = "info",
    log_dir: Optional[Union[str, Path]] = None,
) -> None:
    """(Re)configures the handlers of the named logger.

    The console handler is a `rich` handler when attached to a terminal and a
    plain stream handler on stdout otherwise. Records do not propagate to the
    root logger.
    """
    log_level = level.upper()
    logger = logging.getLogger(name)
    logger.handlers = []
    logger.setLevel(log_level)

    handlers = [_build_console_handler(log_level)]
    if log_dir:
        handlers.append(_build_file_handler(name, Path(log_dir)))
    for handler in handlers:
        handler.setLevel(log_level)
        logger.addHandler(handler)

    logger.propagate = False


def should_use_rich_logging() -> bool:
    """Whether console output should be rendered with `rich`.

    True when stdout is a terminal, unless the environment variable
    `GEMINI_CHAT_DISABLE_RICH_LOGGING` is set to a truthy value.
    """
    if os.environ.get(_DISABLE_RICH_LOGGING_ENV_VAR, "").lower() in _TRUTHY_ENV_VALUES:
        return False
    return sys.stdout.isatty()


def update_logger_level(name: str, level: str = "info") -> None:
    """Sets the level of the named logger and of all its handlers."""
    log_level = level.upper()
    logger = get_logger(name, level=level)
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.setLevel(log_level)


def _build_console_handler(log_level: str) -> logging.Handler:
    if not should_use_rich_logging():
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))
        return handler

    from rich.console import Console
    from rich.logging import RichHandler

    debug = log_level == "DEBUG"
    rich_handler = RichHandler(
        console=Console(),
        show_time=True,
        show_level=True,
        show_path=True,
        markup=False,
        rich_tracebacks=debug,
        locals_max_length=10,
        locals_max_string=80,
    )
    rich_handler.setFormatter(
        logging.Formatter(_RICH_DEBUG_FORMAT if debug else _RICH_FORMAT)
    )
    return rich_handler


def _build_file_handler(name: str, log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / f"{name}.log")
    handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))
    return handler


logger = get_logger("gemini_chat")

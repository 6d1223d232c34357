# Copyright 2025 iGenius S.p.A
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

from rich.console import Console
from rich.logging import RichHandler


def setup_logger(
    name: str = "procform",
    level=logging.INFO,
    console: Console | None = None,
) -> logging.Logger:
    """Return a logger whose records all go to stderr.

    stdout is reserved for rendered documents, so even INFO records must
    not be interleaved with them.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False  # Avoid duplicate logs

    if logger.handlers:
        return logger

    stderr_console = console or Console(stderr=True)
    handler = RichHandler(
        level=logging.DEBUG,
        console=stderr_console,
        rich_tracebacks=True,
        markup=True,
        show_time=True,
        show_level=True,
        show_path=False,
    )
    logger.addHandler(handler)

    return logger


def set_level(level: int | str, prefix: str = "procform") -> None:
    """Apply ``level`` to every already-configured logger under ``prefix``."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved
    for name, obj in logging.Logger.manager.loggerDict.items():
        if isinstance(obj, logging.Logger) and (name == prefix or name.startswith(prefix + ".")):
            obj.setLevel(level)

# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Logging setup for the qualifier CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from qualifier.common.environment import Environment

_LOG_FORMAT = "%(message)s"

# Third-party loggers that are too chatty at DEBUG.
_QUIET_LOGGERS = ("botocore", "boto3", "urllib3", "s3transfer")


def setup_rich_logging(level: str | None = None, console: Console | None = None) -> None:
    """Route all log records through a RichHandler.

    Args:
        level: Log level name. Falls back to ``Environment.LOGGING.LEVEL``.
        console: Console to render to. Defaults to stderr.
    """
    level = (level or Environment.LOGGING.LEVEL).upper()
    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        log_time_format="[%X]",
    )
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Helpers shared by CLI commands."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.panel import Panel

from qualifier.common.exceptions import QualifierError

logger = logging.getLogger(__name__)


def print_error_panel(message: str, title: str = "Error") -> None:
    console = Console(stderr=True)
    console.print(
        Panel(
            message,
            title=title,
            border_style="bold red",
            title_align="left",
            expand=False,
        )
    )


@contextmanager
def exit_on_error(title: str = "Error") -> Iterator[None]:
    """Turn qualifier and configuration errors into an error panel and exit code 1."""
    try:
        yield
    except (QualifierError, ValueError, FileNotFoundError) as e:
        logger.debug("Command failed", exc_info=True)
        print_error_panel(str(e), title=title)
        sys.exit(1)
    except KeyboardInterrupt:
        print_error_panel("Interrupted", title=title)
        sys.exit(130)

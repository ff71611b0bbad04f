# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Logger mixin shared by the orchestrator and exporter classes."""

import logging
from collections.abc import Callable

__all__ = ["QualifierLoggerMixin"]

Message = str | Callable[[], str]


class QualifierLoggerMixin:
    """Adds level-named logging helpers bound to the subclass's module logger.

    ``debug`` accepts a callable so expensive messages are only built when
    DEBUG is enabled, e.g. ``self.debug(lambda: f"payload: {data!r}")``.
    """

    def __init__(self, logger_name: str | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.logger = logging.getLogger(logger_name or self.__class__.__module__)

    def debug(self, message: Message) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(message() if callable(message) else message)

    def info(self, message: str) -> None:
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.logger.error(message)

    def exception(self, message: str) -> None:
        self.logger.exception(message)

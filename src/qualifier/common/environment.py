# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Environment-driven settings.

Each group reads ``QUALIFIER_<GROUP>_<NAME>`` variables, e.g.
``QUALIFIER_POLL_INTERVAL=2`` or ``QUALIFIER_METRICS_RETRY_ATTEMPTS=10``.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Environment"]


class _PollSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="QUALIFIER_POLL_")

    INTERVAL: float = Field(
        default=5.0,
        ge=0,
        description="Seconds between two fetch attempts of a worker's result artifact",
    )


class _MetricsSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="QUALIFIER_METRICS_")

    RETRY_ATTEMPTS: int = Field(
        default=5,
        ge=1,
        description="Maximum number of metrics queries before giving up",
    )
    RETRY_BACKOFF: float = Field(
        default=10.0,
        ge=0,
        description="Seconds to wait between two metrics queries",
    )
    NAMESPACE: str = Field(
        default="CWAgent", description="CloudWatch namespace of the agent metrics"
    )
    WORKER_ID_PATTERN: str = Field(
        default=r"i-[0-9a-z]{17}",
        description="Pattern of the worker identifier token inside a metric label",
    )


class _LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="QUALIFIER_LOGGING_")

    LEVEL: str = Field(default="INFO", description="Root log level")


class _ResultsSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="QUALIFIER_RESULTS_")

    DIR: Path = Field(
        default=Path("results"), description="Local directory for result artifacts"
    )


class _Environment:
    """Grouped access to all settings, e.g. ``Environment.POLL.INTERVAL``."""

    def __init__(self) -> None:
        self.POLL = _PollSettings()
        self.METRICS = _MetricsSettings()
        self.LOGGING = _LoggingSettings()
        self.RESULTS = _ResultsSettings()


Environment = _Environment()

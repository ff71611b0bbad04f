# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Run configuration."""

from qualifier.common.config.loader import (
    TEST_FIXTURE_FILENAME,
    load_run_context,
    load_run_context_from_bucket,
)
from qualifier.common.config.run_context import (
    CPU_METRIC,
    MEM_METRIC,
    RunContext,
    TimeRange,
)

__all__ = [
    "CPU_METRIC",
    "MEM_METRIC",
    "RunContext",
    "TEST_FIXTURE_FILENAME",
    "TimeRange",
    "load_run_context",
    "load_run_context_from_bucket",
]

# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Result collection for a qualifier run.

This module provides the components that poll every worker for its result
artifact, merge the results into one aggregated set, and overlay the
telemetry collected while the workers were running.
"""

from qualifier.orchestrator.aggregator import (
    ResultAggregator,
)
from qualifier.orchestrator.coordinator import (
    PollCoordinator,
)
from qualifier.orchestrator.poller import (
    ResultPoller,
)
from qualifier.orchestrator.reconciler import (
    MetricsReconciler,
)

__all__ = [
    "MetricsReconciler",
    "PollCoordinator",
    "ResultAggregator",
    "ResultPoller",
]

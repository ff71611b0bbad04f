# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Collaborator interfaces consumed by the orchestrator.

Implementations are synchronous; the orchestrator calls them from worker
threads so blocking SDK clients can be used directly.
"""

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from qualifier.common.config.run_context import TimeRange
from qualifier.common.models import Worker

__all__ = [
    "ArtifactStore",
    "MetricSeries",
    "MetricsBackend",
    "WorkerLister",
    "WorkerStatusProbe",
]


@dataclass(slots=True)
class MetricSeries:
    """Values of one metric for one worker over the queried window.

    Attributes:
        label: ``"<namespace> <worker id> <worker type> <metric name>"``
        values: Data points, most recent first
    """

    label: str
    values: list[float] = field(default_factory=list)


@runtime_checkable
class ArtifactStore(Protocol):
    """Key-addressed blob storage."""

    def exists(self, bucket: str, path: str) -> bool:
        """Return True if an object exists at ``path``."""
        ...

    def get(self, bucket: str, path: str) -> bytes:
        """Return the object's bytes.

        Raises:
            TransientFetchError: If the object does not exist.
            ArtifactStoreError: For any other store failure.
        """
        ...

    def put(self, bucket: str, path: str, data: bytes) -> None:
        """Write ``data`` at ``path``.

        Raises:
            UploadError: If the write fails.
        """
        ...


@runtime_checkable
class WorkerStatusProbe(Protocol):
    def is_running(self, worker_id: str) -> bool:
        """Return True while the worker is still executing the test suite."""
        ...


@runtime_checkable
class WorkerLister(Protocol):
    def list_workers(self) -> list[Worker]:
        """Return the provisioned workers (identifier and type only)."""
        ...


@runtime_checkable
class MetricsBackend(Protocol):
    def query(
        self, workers: list[Worker], metric_names: list[str], time_range: TimeRange
    ) -> list[MetricSeries]:
        """Return one series per worker and metric.

        Raises:
            QueryError: If the backend rejects or fails the query.
        """
        ...

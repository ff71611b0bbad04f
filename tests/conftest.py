# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Shared fixtures and in-memory collaborators."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

import pytest

from qualifier.common.config import CPU_METRIC, MEM_METRIC, RunContext, TimeRange
from qualifier.common.exceptions import (
    ArtifactStoreError,
    QueryError,
    TransientFetchError,
    UploadError,
)
from qualifier.common.models import Measurement, TestOutcome, Worker
from qualifier.resources import Collaborators, MetricSeries

WORKER_A = "i-0ff4a2f594b270b54"
WORKER_B = "i-0123456789abcdef0"
WORKER_C = "i-0aaaaaaaaaaaaaaa1"


class InMemoryArtifactStore:
    """Artifact store keeping objects in a dict and recording every call."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.calls: list[tuple[str, str]] = []
        self.failing_puts: set[str] = set()
        self.failing_gets: set[str] = set()
        self._lock = threading.Lock()

    def _record(self, op: str, path: str) -> None:
        with self._lock:
            self.calls.append((op, path))

    def calls_for(self, path: str) -> list[str]:
        return [op for op, p in self.calls if p == path]

    def exists(self, bucket: str, path: str) -> bool:
        self._record("exists", path)
        return (bucket, path) in self.objects

    def get(self, bucket: str, path: str) -> bytes:
        self._record("get", path)
        if path in self.failing_gets:
            raise ArtifactStoreError(f"get {path} failed", bucket, path)
        try:
            return self.objects[(bucket, path)]
        except KeyError:
            raise TransientFetchError(f"{path} does not exist", bucket, path) from None

    def put(self, bucket: str, path: str, data: bytes) -> None:
        self._record("put", path)
        if path in self.failing_puts:
            raise UploadError(f"put {path} failed", bucket, path)
        self.objects[(bucket, path)] = bytes(data)


class FakeStatusProbe:
    """Returns scripted liveness answers per worker; the last answer repeats."""

    def __init__(self, statuses: dict[str, Iterable[bool | Exception]] | None = None):
        self._statuses = {k: list(v) for k, v in (statuses or {}).items()}
        self.calls: list[str] = []

    def is_running(self, worker_id: str) -> bool:
        self.calls.append(worker_id)
        answers = self._statuses.get(worker_id, [False])
        answer = answers.pop(0) if len(answers) > 1 else answers[0]
        if isinstance(answer, Exception):
            raise answer
        return answer


class FakeWorkerLister:
    def __init__(self, workers: list[Worker]) -> None:
        self.workers = workers

    def list_workers(self) -> list[Worker]:
        return [Worker(worker_id=w.worker_id, worker_type=w.worker_type) for w in self.workers]


class FakeMetricsBackend:
    """Returns scripted responses; the last response repeats."""

    def __init__(self, responses: list[list[MetricSeries] | QueryError]) -> None:
        self._responses = list(responses)
        self.calls: list[tuple[list[str], list[str], TimeRange]] = []

    def query(
        self, workers: list[Worker], metric_names: list[str], time_range: TimeRange
    ) -> list[MetricSeries]:
        self.calls.append(([w.worker_id for w in workers], metric_names, time_range))
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def make_worker(
    worker_id: str = WORKER_A,
    worker_type: str = "m4.large",
    outcomes: list[TestOutcome] | None = None,
    is_timeout: bool = False,
) -> Worker:
    return Worker(
        worker_id=worker_id,
        worker_type=worker_type,
        vcpus="2",
        memory="8192",
        os="Linux/UNIX",
        architecture="x86_64",
        is_timeout=is_timeout,
        results=outcomes if outcomes is not None else [],
    )


def make_outcome(
    label: str = "cpu-test.sh",
    status: str = "pass",
    execution_time: float = 10.0,
    metrics: list[Measurement] | None = None,
) -> TestOutcome:
    return TestOutcome(
        label=label,
        status=status,
        execution_time=execution_time,
        metrics=metrics or [],
    )


def metric_label(worker_id: str, worker_type: str, metric_name: str) -> str:
    return f"CWAgent {worker_id} {worker_type} {metric_name}"


@pytest.fixture
def run_context(tmp_path: Path) -> RunContext:
    return RunContext(
        run_id="abc123",
        metric_thresholds={CPU_METRIC: 40, MEM_METRIC: 40},
        timeout=600,
        results_dir=tmp_path / "results",
        poll_interval=0,
        metrics_retry_attempts=3,
        metrics_retry_backoff=0,
        start_time=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def store() -> InMemoryArtifactStore:
    return InMemoryArtifactStore()


@pytest.fixture
def make_collaborators(store: InMemoryArtifactStore):
    def _make(
        workers: list[Worker],
        statuses: dict[str, Iterable[bool | Exception]] | None = None,
        metric_responses: list | None = None,
    ) -> Collaborators:
        return Collaborators(
            store=store,
            probe=FakeStatusProbe(statuses),
            lister=FakeWorkerLister(workers),
            metrics=FakeMetricsBackend(metric_responses or [[]]),
        )

    return _make

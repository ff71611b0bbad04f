# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Run-wide configuration consumed by the result collection pipeline."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from qualifier.common.environment import Environment

__all__ = [
    "CPU_METRIC",
    "MEM_METRIC",
    "RunContext",
    "TimeRange",
]

CPU_METRIC = "cpu_usage_active"
MEM_METRIC = "mem_used_percent"

BUCKET_NAME_PREFIX = "qualifier-bucket-"
BUCKET_ROOT_DIR_PREFIX = "Instance-Qualifier-Run-"
CFN_STACK_NAME_PREFIX = "qualifier-stack-"
FINAL_RESULT_PREFIX = "final-results-"
INSTANCE_RESULT_SUFFIX = "-test-results.json"
BUCKET_TESTS_DIR = "Tests"
DEFAULT_TIMEOUT = 3600


class TimeRange(BaseModel):
    """Closed time window for a metrics query."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime


class RunContext(BaseModel):
    """Immutable configuration of one qualifier run.

    Created once before polling begins and passed explicitly into every
    orchestrator component. Field aliases match the ``test-fixture.json``
    persisted in the run's bucket so a prior run can be resumed from it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    run_id: str = Field(alias="runId")
    bucket_name: str = Field(alias="bucket-name")
    bucket_root_dir: str = Field(default="", alias="bucket-root-dir")
    stack_name: str = Field(default="", alias="stack-name")
    final_result_filename: str = Field(default="", alias="final-results")
    start_time: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="start-time"
    )
    timeout: int = Field(default=DEFAULT_TIMEOUT, gt=0, description="Run deadline in seconds")
    metric_thresholds: dict[str, float] = Field(
        default_factory=lambda: {CPU_METRIC: 100.0, MEM_METRIC: 100.0},
        description="Metric name to threshold, in report column order",
    )
    results_dir: Path = Field(default_factory=lambda: Environment.RESULTS.DIR)
    poll_interval: float = Field(
        default_factory=lambda: Environment.POLL.INTERVAL, ge=0
    )
    metrics_retry_attempts: int = Field(
        default_factory=lambda: Environment.METRICS.RETRY_ATTEMPTS, ge=1
    )
    metrics_retry_backoff: float = Field(
        default_factory=lambda: Environment.METRICS.RETRY_BACKOFF, ge=0
    )
    metrics_namespace: str = Field(default_factory=lambda: Environment.METRICS.NAMESPACE)
    worker_id_pattern: str = Field(
        default_factory=lambda: Environment.METRICS.WORKER_ID_PATTERN
    )

    @model_validator(mode="before")
    @classmethod
    def _fill_derived_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        run_id = data.get("runId", data.get("run_id"))

        # The persisted fixture carries flat per-metric thresholds.
        if "metric_thresholds" not in data and (
            "cpu-threshold" in data or "mem-threshold" in data
        ):
            data["metric_thresholds"] = {
                CPU_METRIC: data.pop("cpu-threshold", 100),
                MEM_METRIC: data.pop("mem-threshold", 100),
            }

        if run_id:
            defaults = {
                ("bucket-root-dir", "bucket_root_dir"): BUCKET_ROOT_DIR_PREFIX + run_id,
                ("stack-name", "stack_name"): CFN_STACK_NAME_PREFIX + run_id,
                ("final-results", "final_result_filename"): f"{FINAL_RESULT_PREFIX}{run_id}.json",
                ("bucket-name", "bucket_name"): BUCKET_NAME_PREFIX + run_id,
            }
            for (alias, name), value in defaults.items():
                if not data.get(alias) and not data.get(name):
                    data[name] = value
        return data

    @staticmethod
    def run_id_from_bucket(bucket_name: str) -> str:
        """Return the run id encoded in a qualifier bucket name."""
        return bucket_name.replace(BUCKET_NAME_PREFIX, "", 1)

    @property
    def metric_names(self) -> list[str]:
        return list(self.metric_thresholds)

    @property
    def local_final_result_path(self) -> Path:
        return Path(self.results_dir) / self.final_result_filename

    @property
    def remote_final_result_path(self) -> str:
        return f"{self.bucket_root_dir}/{self.final_result_filename}"

    def worker_dir(self, worker_id: str, worker_type: str) -> str:
        return f"{self.bucket_root_dir}/{worker_type}/{worker_id}"

    def primary_result_path(self, worker_id: str, worker_type: str) -> str:
        """Remote path of the result uploaded after the whole suite finished."""
        return f"{self.worker_dir(worker_id, worker_type)}/{worker_id}{INSTANCE_RESULT_SUFFIX}"

    def fallback_result_path(self, worker_id: str, worker_type: str) -> str:
        """Remote path of the partial result uploaded while tests are running."""
        return (
            f"{self.worker_dir(worker_id, worker_type)}/{BUCKET_TESTS_DIR}/"
            f"{worker_id}{INSTANCE_RESULT_SUFFIX}"
        )

    def remote_path(self, filename: str) -> str:
        return f"{self.bucket_root_dir}/{filename}"

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(
            start=self.start_time,
            end=self.start_time + timedelta(seconds=self.timeout),
        )

# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Data models for worker results and the aggregated result set.

Field aliases match the JSON written by the on-instance agent, so the same
models decode per-worker artifacts and encode the final result file.
"""

from pathlib import Path
from typing import Any

import orjson
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    ValidationError,
    field_serializer,
    field_validator,
)

from qualifier.common.exceptions import DecodeError

__all__ = [
    "AggregatedResultSet",
    "Measurement",
    "QualifierBaseModel",
    "TestOutcome",
    "Worker",
]

STATUS_FAIL = "fail"


class QualifierBaseModel(BaseModel):
    """Base model accepting both field names and wire aliases."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_json_dict(self) -> dict[str, Any]:
        """Dump using wire aliases and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)


class Measurement(QualifierBaseModel):
    """One metric reading attached to a test outcome."""

    metric: str = Field(description="Metric name (e.g., 'cpu_usage_active')")
    value: float = Field(description="Observed value")
    threshold: float = Field(description="Value at or above which the metric fails")
    unit: str = Field(default="", description="Unit of value and threshold")


class TestOutcome(QualifierBaseModel):
    """Result of running one test file on one worker."""

    # Keep pytest from collecting this model as a test class.
    __test__ = False

    label: str = Field(description="Test file name")
    status: str = Field(description="'pass' or 'fail'")
    execution_time: float = Field(
        default=0.0,
        alias="execution-time",
        description="Execution duration in seconds",
    )
    metrics: list[Measurement] = Field(default_factory=list, alias="Metrics")

    @field_validator("execution_time", mode="before")
    @classmethod
    def _parse_execution_time(cls, value: Any) -> Any:
        if isinstance(value, str):
            return float(value.strip())
        return value

    @field_validator("metrics", mode="before")
    @classmethod
    def _null_metrics(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_serializer("execution_time")
    def _serialize_execution_time(self, value: float) -> str:
        return repr(value)

    @property
    def failed(self) -> bool:
        return self.status == STATUS_FAIL


class Worker(QualifierBaseModel):
    """One provisioned instance under test and the results it reported."""

    worker_id: str = Field(alias="instance-id", description="Instance identifier")
    worker_type: str = Field(alias="instance-type", description="Instance type")
    vcpus: str = Field(default="", alias="vCPUs")
    memory: str = Field(default="")
    os: str = Field(default="", alias="OS")
    architecture: str = Field(default="", alias="Architecture")
    is_timeout: bool = Field(
        default=False,
        alias="isTimeout",
        description="True if the run deadline elapsed before all tests finished",
    )
    results: list[TestOutcome] = Field(default_factory=list)

    @field_validator("results", mode="before")
    @classmethod
    def _null_results(cls, value: Any) -> Any:
        return [] if value is None else value

    @classmethod
    def from_json(cls, data: bytes | str) -> "Worker":
        """Decode a single worker record.

        Raises:
            DecodeError: If the payload is not a valid worker record.
        """
        try:
            return cls.model_validate(orjson.loads(data))
        except (orjson.JSONDecodeError, ValidationError, ValueError) as e:
            raise DecodeError(f"Invalid worker result: {e}") from e

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_json_dict(), option=orjson.OPT_INDENT_2)


class AggregatedResultSet(RootModel[list[Worker]]):
    """Run-wide collection of worker records in arrival order.

    Holds at most one record per worker id when built through ``add``.
    """

    root: list[Worker] = Field(default_factory=list)

    def __iter__(self):
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    @classmethod
    def from_bytes(cls, data: bytes | str) -> "AggregatedResultSet":
        """Decode a persisted result set.

        Raises:
            DecodeError: If the payload is not a JSON array of worker records.
        """
        try:
            return cls.model_validate(orjson.loads(data))
        except (orjson.JSONDecodeError, ValidationError, ValueError) as e:
            raise DecodeError(f"Invalid aggregated result set: {e}") from e

    @classmethod
    def load(cls, path: Path) -> "AggregatedResultSet":
        with open(path, "rb") as f:
            return cls.from_bytes(f.read())

    def to_bytes(self) -> bytes:
        return orjson.dumps(
            [worker.to_json_dict() for worker in self.root],
            option=orjson.OPT_INDENT_2,
        )

    def save(self, path: Path) -> bytes:
        """Write the set to ``path`` and return the written bytes."""
        data = self.to_bytes()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
        return data

    def get(self, worker_id: str) -> Worker | None:
        return next((w for w in self.root if w.worker_id == worker_id), None)

    def contains(self, worker_id: str) -> bool:
        return self.get(worker_id) is not None

    def add(self, worker: Worker) -> bool:
        """Append ``worker`` unless a record with the same id is already present.

        Returns:
            True if the record was appended, False if it was a duplicate.
        """
        if self.contains(worker.worker_id):
            return False
        self.root.append(worker)
        return True

    def overlay_measurements(self, measurements: dict[str, list[Measurement]]) -> None:
        """Replace the measurements of every test outcome with its worker's list.

        All outcomes of one worker share the same list. Workers missing from
        ``measurements`` end up with empty measurement lists.
        """
        for worker in self.root:
            worker_measurements = measurements.get(worker.worker_id, [])
            for outcome in worker.results:
                outcome.metrics = worker_measurements

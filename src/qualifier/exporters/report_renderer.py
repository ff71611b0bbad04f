# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Conversion of the aggregated result set into per-worker report rows."""

from qualifier.common.config.run_context import CPU_METRIC, MEM_METRIC
from qualifier.common.models import AggregatedResultSet, Measurement, Worker

__all__ = [
    "NOT_APPLICABLE",
    "STATUS_FAIL",
    "STATUS_SUCCESS",
    "ReportRenderer",
]

STATUS_SUCCESS = "SUCCESS"
STATUS_FAIL = "FAIL"
NOT_APPLICABLE = "N/A"


class ReportRenderer:
    """Renders one row per worker with its pass/fail verdicts.

    Row layout: instance type, status, then value and threshold of every
    tracked metric, all-tests-pass flag and total execution time.

    - status is FAIL if the worker timed out or any measurement is at or
      above its threshold
    - all-tests-pass is false if the worker timed out or any test failed
    - a tracked metric shows the last measurement seen for it
    """

    def __init__(self, metric_names: list[str] | None = None) -> None:
        self.metric_names = list(metric_names or [CPU_METRIC, MEM_METRIC])

    @property
    def header(self) -> list[str]:
        header = ["INSTANCE TYPE", "STATUS"]
        for metric_name in self.metric_names:
            prefix = metric_name.split("_", 1)[0].upper()
            header += [metric_name.upper(), f"{prefix}_THRESHOLD"]
        return header + ["ALL TESTS PASS?", "TOTAL EXECUTION TIME (sec)"]

    def render(
        self, result_set: AggregatedResultSet, live_workers: list[Worker]
    ) -> list[list[str]]:
        """Return the report rows.

        Workers in ``live_workers`` without a record in ``result_set`` get a
        row of N/A placeholders. Neither input is modified.
        """
        rows = [self.render_worker(worker) for worker in result_set]

        reported = {worker.worker_id for worker in result_set}
        for worker in live_workers:
            if worker.worker_id in reported:
                continue
            reported.add(worker.worker_id)
            rows.append([worker.worker_type] + [NOT_APPLICABLE] * (len(self.header) - 1))
        return rows

    def render_worker(self, worker: Worker) -> list[str]:
        success = not worker.is_timeout
        all_tests_pass = not worker.is_timeout
        total_execution_time = 0.0
        latest: dict[str, Measurement] = {}

        for outcome in worker.results:
            if outcome.failed:
                all_tests_pass = False
            total_execution_time += outcome.execution_time
            for measurement in outcome.metrics:
                latest[measurement.metric] = measurement
                if measurement.value >= measurement.threshold:
                    success = False

        row = [worker.worker_type, STATUS_SUCCESS if success else STATUS_FAIL]
        for metric_name in self.metric_names:
            measurement = latest.get(metric_name)
            if measurement is None:
                row += [NOT_APPLICABLE, NOT_APPLICABLE]
            else:
                row += [
                    _format_number(measurement.value),
                    _format_number(measurement.threshold),
                ]
        row += [str(all_tests_pass).lower(), _format_number(total_execution_time)]
        return row


def _format_number(value: float) -> str:
    return f"{value:.2f}"

# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Overlay of externally collected metrics onto the aggregated result set."""

import asyncio
import re
from pathlib import Path

from qualifier.common.config.run_context import RunContext
from qualifier.common.exceptions import QueryError, SchemaMismatchError, UploadError
from qualifier.common.mixins import QualifierLoggerMixin
from qualifier.common.models import AggregatedResultSet, Measurement, Worker
from qualifier.resources.interfaces import ArtifactStore, MetricsBackend, MetricSeries

__all__ = ["MetricsReconciler", "METRIC_UNIT"]

METRIC_UNIT = "Percent"


class MetricsReconciler(QualifierLoggerMixin):
    """Replaces self-reported measurements with metrics from the telemetry backend.

    The telemetry is sampled over the whole run, not per test file, so every
    test outcome of a worker receives the same worker-level measurement list.
    """

    def __init__(
        self,
        backend: MetricsBackend,
        store: ArtifactStore,
        context: RunContext,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._backend = backend
        self._store = store
        self._context = context
        self._worker_id_pattern = re.compile(context.worker_id_pattern)

    async def reconcile(self, workers: list[Worker]) -> AggregatedResultSet:
        """Fetch metrics for ``workers`` and splice them into the persisted set.

        Returns:
            The updated result set, also written locally and uploaded.

        Raises:
            QueryError: If every query attempt failed.
            SchemaMismatchError: If a metric label carries no worker identifier.
            DecodeError: If the local result set cannot be decoded.
        """
        series = await self._query_with_retry(workers)
        measurements = self.build_measurements(series)

        local_path = Path(self._context.local_final_result_path)
        result_set = await asyncio.to_thread(AggregatedResultSet.load, local_path)
        result_set.overlay_measurements(measurements)

        self.info("Updating local and remote results files after merging metrics data")
        data = await asyncio.to_thread(result_set.save, local_path)
        try:
            await asyncio.to_thread(
                self._store.put,
                self._context.bucket_name,
                self._context.remote_final_result_path,
                data,
            )
        except UploadError as e:
            self.error(f"Failed to upload the reconciled results: {e}")

        return result_set

    async def _query_with_retry(self, workers: list[Worker]) -> list[MetricSeries]:
        """Query the backend until it returns data or the attempts run out.

        Freshly published metrics may not be ingested yet, so both failed and
        empty responses are retried with a fixed backoff.
        """
        attempts = self._context.metrics_retry_attempts
        last_error: QueryError | None = None
        series: list[MetricSeries] = []

        for attempt in range(1, attempts + 1):
            try:
                series = await asyncio.to_thread(
                    self._backend.query,
                    workers,
                    self._context.metric_names,
                    self._context.time_range,
                )
                last_error = None
            except QueryError as e:
                last_error = e
                self.warning(f"Metrics query attempt {attempt}/{attempts} failed: {e}")
            else:
                if not workers or any(s.values for s in series):
                    return series
                self.warning(
                    f"Metrics query attempt {attempt}/{attempts} returned no data"
                )

            if attempt < attempts:
                await asyncio.sleep(self._context.metrics_retry_backoff)

        if last_error is not None:
            raise last_error
        return series

    def build_measurements(
        self, series: list[MetricSeries]
    ) -> dict[str, list[Measurement]]:
        """Group metric series into per-worker measurement lists.

        The worker is identified by the identifier-shaped token of the label and
        the metric by its last token. Each measurement holds the maximum value
        of the series and the run's threshold for that metric.

        Raises:
            SchemaMismatchError: If a label has no identifier-shaped token.
        """
        maxima: dict[str, dict[str, float]] = {}
        for s in series:
            if not s.values:
                continue
            worker_id, metric_name = self.parse_label(s.label)
            per_worker = maxima.setdefault(worker_id, {})
            value = max(s.values)
            per_worker[metric_name] = max(value, per_worker.get(metric_name, value))

        thresholds = self._context.metric_thresholds
        return {
            worker_id: [
                Measurement(
                    metric=metric_name,
                    value=value,
                    threshold=float(thresholds.get(metric_name, 0.0)),
                    unit=METRIC_UNIT,
                )
                for metric_name, value in per_worker.items()
            ]
            for worker_id, per_worker in maxima.items()
        }

    def parse_label(self, label: str) -> tuple[str, str]:
        """Return ``(worker id, metric name)`` extracted from a series label."""
        tokens = label.split()
        for token in tokens:
            if self._worker_id_pattern.fullmatch(token):
                return token, tokens[-1]
        raise SchemaMismatchError(
            f"Could not extract a worker identifier from metric label {label!r}"
        )

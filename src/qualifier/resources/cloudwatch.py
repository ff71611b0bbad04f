# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""CloudWatch-backed metrics source for agent-published instance metrics."""

import logging

from botocore.exceptions import BotoCoreError, ClientError

from qualifier.common.config.run_context import CPU_METRIC, TimeRange
from qualifier.common.exceptions import QueryError
from qualifier.common.models import Worker
from qualifier.resources.interfaces import MetricSeries

logger = logging.getLogger(__name__)

__all__ = ["CloudWatchMetricsBackend", "build_metric_query"]

# Highest sample within the period.
STATISTIC = "Maximum"


def build_metric_query(
    query_id: str,
    worker: Worker,
    metric_name: str,
    namespace: str,
    period: int,
) -> dict:
    """Build one GetMetricData query for ``metric_name`` on ``worker``.

    The label carries the worker id so results can be matched back to workers
    regardless of the order CloudWatch returns them in.
    """
    dimensions = [
        {"Name": "InstanceId", "Value": worker.worker_id},
        {"Name": "InstanceType", "Value": worker.worker_type},
    ]
    if metric_name == CPU_METRIC:
        dimensions.append({"Name": "cpu", "Value": "cpu-total"})

    return {
        "Id": query_id,
        "Label": f"{namespace} {worker.worker_id} {worker.worker_type} {metric_name}",
        "ReturnData": True,
        "MetricStat": {
            "Metric": {
                "Namespace": namespace,
                "MetricName": metric_name,
                "Dimensions": dimensions,
            },
            "Period": period,
            "Stat": STATISTIC,
        },
    }


class CloudWatchMetricsBackend:
    """Queries the CloudWatch agent metrics of all workers in a single request."""

    def __init__(self, client, namespace: str, period: int) -> None:
        self._client = client
        self._namespace = namespace
        # CloudWatch periods must be a multiple of 60 seconds.
        self._period = max(60, period - period % 60)

    def query(
        self, workers: list[Worker], metric_names: list[str], time_range: TimeRange
    ) -> list[MetricSeries]:
        queries = [
            build_metric_query(
                f"m{metric_index}w{worker_index}",
                worker,
                metric_name,
                self._namespace,
                self._period,
            )
            for metric_index, metric_name in enumerate(metric_names)
            for worker_index, worker in enumerate(workers)
        ]
        if not queries:
            return []

        series = []
        kwargs = {
            "MetricDataQueries": queries,
            "StartTime": time_range.start,
            "EndTime": time_range.end,
        }
        logger.debug(f"Requesting {len(queries)} metric queries for {time_range}")
        try:
            while True:
                response = self._client.get_metric_data(**kwargs)
                for result in response.get("MetricDataResults", []):
                    series.append(
                        MetricSeries(
                            label=result.get("Label", ""),
                            values=list(result.get("Values", [])),
                        )
                    )
                next_token = response.get("NextToken")
                if not next_token:
                    break
                kwargs["NextToken"] = next_token
        except (ClientError, BotoCoreError) as e:
            raise QueryError(f"Failed to get metric data from CloudWatch: {e}") from e

        return series

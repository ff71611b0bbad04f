# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""External collaborators: artifact storage, worker status, worker listing and metrics."""

from dataclasses import dataclass

from qualifier.resources.interfaces import (
    ArtifactStore,
    MetricsBackend,
    MetricSeries,
    WorkerLister,
    WorkerStatusProbe,
)

__all__ = [
    "ArtifactStore",
    "Collaborators",
    "MetricSeries",
    "MetricsBackend",
    "WorkerLister",
    "WorkerStatusProbe",
    "create_aws_collaborators",
]


@dataclass(slots=True)
class Collaborators:
    """The set of collaborators the collection workflow needs."""

    store: ArtifactStore
    probe: WorkerStatusProbe
    lister: WorkerLister
    metrics: MetricsBackend


def create_aws_collaborators(
    stack_name: str,
    namespace: str,
    period: int,
    region: str | None = None,
    profile: str | None = None,
) -> Collaborators:
    """Create boto3-backed collaborators for one run.

    Raises:
        ValueError: If no region is configured for the session.
    """
    import boto3

    from qualifier.resources.bucket import S3ArtifactStore
    from qualifier.resources.cloudwatch import CloudWatchMetricsBackend
    from qualifier.resources.instance import Ec2WorkerStatusProbe, StackWorkerLister

    session = boto3.Session(region_name=region, profile_name=profile)
    if not session.region_name:
        raise ValueError(
            "Cannot collect results without a region. Pass --region or set AWS_REGION."
        )

    ec2 = session.client("ec2")
    return Collaborators(
        store=S3ArtifactStore(session.client("s3")),
        probe=Ec2WorkerStatusProbe(ec2),
        lister=StackWorkerLister(session.client("cloudformation"), ec2, stack_name),
        metrics=CloudWatchMetricsBackend(
            session.client("cloudwatch"), namespace=namespace, period=period
        ),
    )

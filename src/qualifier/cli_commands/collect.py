# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""CLI command for collecting the results of a qualifier run."""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter

collect_app = App(name="collect")


@collect_app.default
def collect(
    bucket: Annotated[
        str,
        Parameter(
            help="Bucket of the run to collect results for "
            "(e.g. qualifier-bucket-<run id>)."
        ),
    ],
    region: Annotated[
        str | None,
        Parameter(help="AWS region. Falls back to the AWS_REGION environment variable."),
    ] = None,
    profile: Annotated[
        str | None, Parameter(help="AWS credentials profile to use.")
    ] = None,
    fixture_file: Annotated[
        Path | None,
        Parameter(
            help="Local run fixture (JSON or YAML) to use instead of the "
            "test-fixture.json stored in the bucket."
        ),
    ] = None,
    results_dir: Annotated[
        Path | None,
        Parameter(
            help="Local directory for result files. "
            "Falls back to QUALIFIER_RESULTS_DIR, then to ./results."
        ),
    ] = None,
    poll_interval: Annotated[
        float | None,
        Parameter(
            help="Seconds between result polls. Falls back to QUALIFIER_POLL_INTERVAL."
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        Parameter(help="Log level. Falls back to QUALIFIER_LOGGING_LEVEL."),
    ] = None,
) -> None:
    """Collect, reconcile and report the results of a run.

    Polls every instance of the run for its result file, merges the results,
    adds CloudWatch CPU and memory data and prints one row per instance type.
    Can be run again at any time to resume a run that was interrupted.
    """
    from qualifier.cli_utils import exit_on_error

    with exit_on_error(title="Error Collecting Results"):
        from qualifier.cli_runner import run_collection
        from qualifier.common.config.loader import (
            load_run_context,
            load_run_context_from_bucket,
        )
        from qualifier.common.logging import setup_rich_logging
        from qualifier.resources import create_aws_collaborators
        from qualifier.resources.bucket import S3ArtifactStore

        setup_rich_logging(log_level)

        overrides = {
            "bucket_name": bucket,
            "results_dir": results_dir,
            "poll_interval": poll_interval,
        }

        if fixture_file is not None:
            context = load_run_context(fixture_file, **overrides)
        else:
            import boto3

            session = boto3.Session(region_name=region, profile_name=profile)
            store = S3ArtifactStore(session.client("s3"))
            context = load_run_context_from_bucket(store, bucket, **overrides)

        collaborators = create_aws_collaborators(
            stack_name=context.stack_name,
            namespace=context.metrics_namespace,
            period=context.timeout,
            region=region,
            profile=profile,
        )
        run_collection(context, collaborators)

# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Collection workflow behind the ``collect`` command: poll, reconcile, render and export."""

import asyncio
import logging
from pathlib import Path

from rich.console import Console

from qualifier.common.config import RunContext
from qualifier.common.exceptions import UploadError
from qualifier.common.models import AggregatedResultSet
from qualifier.exporters import ConsoleTableExporter, ReportRenderer
from qualifier.exporters.report import (
    ReportCsvExporter,
    ReportExporterConfig,
    ReportJsonExporter,
)
from qualifier.orchestrator import MetricsReconciler, PollCoordinator
from qualifier.resources import Collaborators

logger = logging.getLogger(__name__)


def run_collection(
    context: RunContext,
    collaborators: Collaborators,
    console: Console | None = None,
) -> AggregatedResultSet:
    """Collect, reconcile and report the results of a run.

    Returns:
        The final aggregated result set.

    Raises:
        QualifierError: If the final result set cannot be trusted.
    """
    return asyncio.run(_collect(context, collaborators, console or Console()))


async def _collect(
    context: RunContext, collaborators: Collaborators, console: Console
) -> AggregatedResultSet:
    logger.info(f"Collecting results of run {context.run_id}")
    logger.info(f"  Bucket: s3://{context.bucket_name}/{context.bucket_root_dir}")
    logger.info(f"  Timeout: {context.timeout}s")
    logger.info(
        "  Thresholds: "
        + ", ".join(f"{k}={v:g}" for k, v in context.metric_thresholds.items())
    )

    workers = await asyncio.to_thread(collaborators.lister.list_workers)
    logger.info(f"Found {len(workers)} worker(s) in stack {context.stack_name}")

    coordinator = PollCoordinator(collaborators.store, collaborators.probe, context)
    await coordinator.poll_for_results(workers)

    # Workers may have been terminated while polling.
    live_workers = await asyncio.to_thread(collaborators.lister.list_workers)

    reconciler = MetricsReconciler(collaborators.metrics, collaborators.store, context)
    result_set = await reconciler.reconcile(live_workers)

    renderer = ReportRenderer(context.metric_names)
    rows = renderer.render(result_set, live_workers)

    await ConsoleTableExporter(
        renderer.header, rows, context.bucket_name, context.bucket_root_dir
    ).export(console)

    await _export_report(context, collaborators, renderer.header, rows)
    return result_set


async def _export_report(
    context: RunContext,
    collaborators: Collaborators,
    header: list[str],
    rows: list[list[str]],
) -> None:
    """Write the report as CSV and JSON and upload both next to the results."""
    exporter_config = ReportExporterConfig(
        run_id=context.run_id,
        header=header,
        rows=rows,
        output_dir=Path(context.results_dir),
    )
    paths = await asyncio.gather(
        ReportCsvExporter(exporter_config).export(),
        ReportJsonExporter(exporter_config).export(),
    )

    for path in paths:
        try:
            data = await asyncio.to_thread(path.read_bytes)
            await asyncio.to_thread(
                collaborators.store.put,
                context.bucket_name,
                context.remote_path(path.name),
                data,
            )
        except UploadError as e:
            logger.error(f"Failed to upload {path}: {e}")

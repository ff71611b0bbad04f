# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Concurrent polling of all workers with a single aggregation writer."""

import asyncio

from qualifier.common.config.run_context import RunContext
from qualifier.common.mixins import QualifierLoggerMixin
from qualifier.common.models import Worker
from qualifier.orchestrator.aggregator import ResultAggregator
from qualifier.orchestrator.poller import ResultPoller
from qualifier.resources.interfaces import ArtifactStore, WorkerStatusProbe

__all__ = ["PollCoordinator"]

# Marks the end of the completion queue.
_DONE = None


class PollCoordinator(QualifierLoggerMixin):
    """Polls every worker concurrently and funnels results into one writer.

    One poll task runs per worker. Each completed result is put on a queue
    sized to the number of workers, so producers never wait. A single
    aggregation task drains the queue in arrival order and is the only code
    that touches the aggregated result artifact.

    Failure handling:
    - a failing poll task is logged and its worker is left out of the set
    - a failing merge is logged and the remaining results are still merged
    - only a failure of the final download of the remote set is raised
    """

    def __init__(
        self,
        store: ArtifactStore,
        probe: WorkerStatusProbe,
        context: RunContext,
        poller: ResultPoller | None = None,
        aggregator: ResultAggregator | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._context = context
        self._poller = poller or ResultPoller(
            store, probe, context.bucket_name, context.poll_interval
        )
        self._aggregator = aggregator or ResultAggregator(store, context)

    @property
    def aggregator(self) -> ResultAggregator:
        return self._aggregator

    async def poll_for_results(self, workers: list[Worker]) -> None:
        """Collect the results of ``workers`` into the aggregated result set.

        On return the local result artifact mirrors the remote one.

        Raises:
            OSError: If the empty result set cannot be seeded locally.
            ArtifactStoreError: If the final download of the remote set fails.
                The local artifact is kept and remains usable.
            DecodeError: If the downloaded remote set is invalid.
        """
        queue: asyncio.Queue[tuple[Worker, bytes] | None] = asyncio.Queue(maxsize=len(workers) + 1)
        seeded = asyncio.Event()

        self.info(f"Polling for the results of {len(workers)} worker(s)")
        aggregation_task = asyncio.create_task(self._aggregate(queue, seeded))

        # Pollers must not start before the set is seeded.
        seeded_wait = asyncio.create_task(seeded.wait())
        await asyncio.wait(
            {aggregation_task, seeded_wait}, return_when=asyncio.FIRST_COMPLETED
        )
        if not seeded.is_set():
            seeded_wait.cancel()
            # Seeding failed, surface its error.
            await aggregation_task

        await asyncio.gather(*(self._poll_worker(worker, queue) for worker in workers))
        queue.put_nowait(_DONE)

        await aggregation_task

    async def _poll_worker(self, worker: Worker, queue: asyncio.Queue) -> None:
        primary_path = self._context.primary_result_path(
            worker.worker_id, worker.worker_type
        )
        fallback_path = self._context.fallback_result_path(
            worker.worker_id, worker.worker_type
        )
        try:
            data = await self._poller.poll_for_result(
                worker.worker_id, primary_path, fallback_path
            )
        except Exception as e:
            # One worker's failure must not stop the others.
            self.error(
                f"Polling for {worker.worker_id} ({worker.worker_type}) at "
                f"{primary_path} failed: {e!r}"
            )
            return
        queue.put_nowait((worker, data))

    async def _aggregate(self, queue: asyncio.Queue, seeded: asyncio.Event) -> None:
        await asyncio.to_thread(self._aggregator.initialize)
        seeded.set()

        while True:
            item = await queue.get()
            if item is _DONE:
                break
            worker, data = item
            try:
                await asyncio.to_thread(self._aggregator.merge_and_persist, data)
            except Exception as e:
                self.error(
                    f"Failed to merge the result of {worker.worker_id} "
                    f"({worker.worker_type}) into {self._aggregator.local_path}: {e!r}"
                )

        try:
            await asyncio.to_thread(self._aggregator.refresh_from_remote)
        except Exception as e:
            self.error(
                f"Failed to download {self._aggregator.remote_path}, "
                f"local copy {self._aggregator.local_path} is kept: {e!r}"
            )
            raise

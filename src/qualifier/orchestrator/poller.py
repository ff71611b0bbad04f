# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Per-worker polling for result artifacts."""

import asyncio

from qualifier.common.exceptions import LivenessCheckError, TransientFetchError
from qualifier.common.mixins import QualifierLoggerMixin
from qualifier.resources.interfaces import ArtifactStore, WorkerStatusProbe

__all__ = ["ResultPoller"]


class ResultPoller(QualifierLoggerMixin):
    """Waits for one worker's result artifact to appear in the store.

    Every ``interval`` seconds the primary artifact is fetched. While it is
    missing the worker's liveness is checked; once the worker is no longer
    running, the partial artifact at the fallback path is fetched once and
    returned instead. There is no retry limit: the run deadline is enforced
    on the worker itself, which then stops running.
    """

    def __init__(
        self,
        store: ArtifactStore,
        probe: WorkerStatusProbe,
        bucket: str,
        interval: float,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._store = store
        self._probe = probe
        self._bucket = bucket
        self._interval = interval

    async def poll_for_result(
        self, worker_id: str, primary_path: str, fallback_path: str
    ) -> bytes:
        """Return the bytes of the worker's result artifact.

        Raises:
            LivenessCheckError: If the status probe fails. Not retried.
            TransientFetchError: If the worker stopped and no fallback artifact exists.
            ArtifactStoreError: If the fallback fetch fails for another reason.
        """
        self.info(f"Polling for {primary_path}...")
        while True:
            await asyncio.sleep(self._interval)

            data = await self._try_fetch(primary_path)
            if data is not None:
                self.info(f"Polling for {primary_path} succeeded")
                return data

            try:
                is_running = await asyncio.to_thread(self._probe.is_running, worker_id)
            except LivenessCheckError:
                raise
            except Exception as e:
                raise LivenessCheckError(
                    f"Failed to check whether {worker_id} is running: {e}",
                    worker_id=worker_id,
                ) from e

            if not is_running:
                data = await asyncio.to_thread(
                    self._store.get, self._bucket, fallback_path
                )
                self.info(
                    f"{worker_id} stopped before uploading {primary_path}, "
                    f"downloaded partial result from {fallback_path}"
                )
                return data

            self.debug(lambda: f"{worker_id} still running, {primary_path} not found yet")

    async def _try_fetch(self, path: str) -> bytes | None:
        """Fetch ``path`` or return None if it is not available yet."""
        try:
            if not await asyncio.to_thread(self._store.exists, self._bucket, path):
                return None
            return await asyncio.to_thread(self._store.get, self._bucket, path)
        except TransientFetchError:
            return None
        except Exception as e:
            self.warning(f"Fetching {path} failed, will retry: {e}")
            return None

# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Merging of per-worker results into the aggregated result set."""

from pathlib import Path

from qualifier.common.config.run_context import RunContext
from qualifier.common.exceptions import UploadError
from qualifier.common.mixins import QualifierLoggerMixin
from qualifier.common.models import AggregatedResultSet, Worker
from qualifier.resources.interfaces import ArtifactStore

__all__ = ["ResultAggregator"]


class ResultAggregator(QualifierLoggerMixin):
    """Maintains the aggregated result set locally and in the artifact store.

    Not safe for concurrent use: all calls must come from a single writer.
    """

    def __init__(self, store: ArtifactStore, context: RunContext, **kwargs) -> None:
        super().__init__(**kwargs)
        self._store = store
        self._bucket = context.bucket_name
        self.local_path = Path(context.local_final_result_path)
        self.remote_path = context.remote_final_result_path
        self._upload_pending = False

    def initialize(self) -> None:
        """Seed the local and remote artifacts with an empty set.

        Raises:
            OSError: If the local artifact cannot be written.
        """
        data = AggregatedResultSet().save(self.local_path)
        try:
            self._upload(data)
        except UploadError as e:
            self.warning(f"Could not seed s3://{self._bucket}/{self.remote_path}: {e}")

    def merge_and_persist(self, raw_result: bytes) -> Worker:
        """Append one worker's result to the set and persist it.

        The local artifact is written before the upload, so an upload failure
        leaves the local copy ahead of the remote one until the next merge.

        Returns:
            The decoded worker record.

        Raises:
            DecodeError: If the worker result or the current set cannot be decoded.
            UploadError: If the updated set cannot be uploaded.
        """
        worker = Worker.from_json(raw_result)
        result_set = AggregatedResultSet.load(self.local_path)

        if not result_set.add(worker):
            self.warning(
                f"Result for {worker.worker_id} ({worker.worker_type}) already merged, "
                "ignoring duplicate"
            )
            return worker

        data = result_set.save(self.local_path)
        self.debug(lambda: f"Merged {worker.worker_id} into {self.local_path}")
        self._upload(data)
        self.info(
            f"Merged result of {worker.worker_id} ({worker.worker_type}), "
            f"{len(result_set)} result(s) collected"
        )
        return worker

    def refresh_from_remote(self) -> AggregatedResultSet:
        """Replace the local artifact with the remote copy.

        A local set whose last upload failed is uploaded first so it is not
        overwritten by a stale remote copy. If that upload fails again the
        local set is newer than the remote one, so it is kept and returned
        without downloading. The local artifact is also left untouched if the
        download or decode fails.

        Raises:
            ArtifactStoreError: If the remote artifact cannot be downloaded.
            DecodeError: If the remote artifact is not a valid result set.
        """
        if self._upload_pending:
            local_set = AggregatedResultSet.load(self.local_path)
            try:
                self._upload(local_set.to_bytes())
            except UploadError as e:
                self.error(
                    f"Failed to upload {self.local_path} to "
                    f"s3://{self._bucket}/{self.remote_path}, keeping the local copy: {e}"
                )
                return local_set

        data = self._store.get(self._bucket, self.remote_path)
        result_set = AggregatedResultSet.from_bytes(data)
        result_set.save(self.local_path)
        self.info(
            f"Downloaded s3://{self._bucket}/{self.remote_path} to {self.local_path}"
        )
        return result_set

    def _upload(self, data: bytes) -> None:
        try:
            self._store.put(self._bucket, self.remote_path, data)
        except UploadError:
            self._upload_pending = True
            raise
        self._upload_pending = False

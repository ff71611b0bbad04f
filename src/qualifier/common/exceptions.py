# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy for result collection.

Per-worker failures (fetch, liveness, decode, upload) are isolated by the
orchestrator and only logged. Query and schema failures abort metric
reconciliation and are surfaced to the CLI.
"""

__all__ = [
    "ArtifactStoreError",
    "DecodeError",
    "LivenessCheckError",
    "QualifierError",
    "QueryError",
    "SchemaMismatchError",
    "TransientFetchError",
    "UploadError",
    "WorkerListError",
]


class QualifierError(Exception):
    """Base class for all instance-qualifier errors."""


class ArtifactStoreError(QualifierError):
    """Raised when the artifact store fails to serve a request."""

    def __init__(self, message: str, bucket: str | None = None, path: str | None = None):
        super().__init__(message)
        self.bucket = bucket
        self.path = path


class TransientFetchError(ArtifactStoreError):
    """Raised when an artifact does not exist (yet) in the store."""


class UploadError(ArtifactStoreError):
    """Raised when writing an artifact to the store fails."""


class LivenessCheckError(QualifierError):
    """Raised when the worker status probe cannot be reached."""

    def __init__(self, message: str, worker_id: str | None = None):
        super().__init__(message)
        self.worker_id = worker_id


class DecodeError(QualifierError):
    """Raised when a result artifact cannot be decoded."""


class QueryError(QualifierError):
    """Raised when the metrics backend query fails."""


class SchemaMismatchError(QualifierError):
    """Raised when a metric label does not carry a recognizable worker identifier."""


class WorkerListError(QualifierError):
    """Raised when the provisioned workers of a run cannot be listed."""

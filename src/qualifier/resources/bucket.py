# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""S3-backed artifact store."""

import logging

from botocore.exceptions import BotoCoreError, ClientError

from qualifier.common.exceptions import (
    ArtifactStoreError,
    TransientFetchError,
    UploadError,
)

logger = logging.getLogger(__name__)

__all__ = ["S3ArtifactStore"]

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _is_not_found(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES


class S3ArtifactStore:
    """Artifact store on top of a boto3 S3 client."""

    def __init__(self, client) -> None:
        self._client = client

    def exists(self, bucket: str, path: str) -> bool:
        try:
            self._client.head_object(Bucket=bucket, Key=path)
        except ClientError as e:
            if _is_not_found(e):
                return False
            raise ArtifactStoreError(
                f"Failed to check s3://{bucket}/{path}: {e}", bucket, path
            ) from e
        except BotoCoreError as e:
            raise ArtifactStoreError(
                f"Failed to check s3://{bucket}/{path}: {e}", bucket, path
            ) from e
        return True

    def get(self, bucket: str, path: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=bucket, Key=path)
            data = response["Body"].read()
        except ClientError as e:
            if _is_not_found(e):
                raise TransientFetchError(
                    f"s3://{bucket}/{path} does not exist", bucket, path
                ) from e
            raise ArtifactStoreError(
                f"Failed to download s3://{bucket}/{path}: {e}", bucket, path
            ) from e
        except BotoCoreError as e:
            raise ArtifactStoreError(
                f"Failed to download s3://{bucket}/{path}: {e}", bucket, path
            ) from e
        logger.debug(f"Downloaded s3://{bucket}/{path} ({len(data)} bytes)")
        return data

    def put(self, bucket: str, path: str, data: bytes) -> None:
        try:
            self._client.put_object(Bucket=bucket, Key=path, Body=data)
        except (ClientError, BotoCoreError) as e:
            raise UploadError(
                f"Failed to upload s3://{bucket}/{path}: {e}", bucket, path
            ) from e
        logger.info(f"Uploaded s3://{bucket}/{path}")

# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Configuration loader for the qualifier."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson
from ruamel.yaml import YAML

from qualifier.common.exceptions import DecodeError

if TYPE_CHECKING:
    from qualifier.common.config.run_context import RunContext
    from qualifier.resources.interfaces import ArtifactStore

TEST_FIXTURE_FILENAME = "test-fixture.json"


def _load_config_file(path: Path) -> dict[str, Any]:
    """Load a configuration file (JSON or YAML) and return its contents as a dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()

    if suffix == ".json":
        with open(path, "rb") as f:
            data = orjson.loads(f.read())
    elif suffix in (".yaml", ".yml"):
        yaml = YAML(pure=True)
        with open(path) as f:
            data = yaml.load(f)
    else:
        raise ValueError(
            f"Unsupported config file format: {suffix}. Use .json, .yaml, or .yml"
        )

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping/object: {path}")

    return data


def load_run_context(path: Path, **overrides: Any) -> RunContext:
    """Load a run context from a local fixture file.

    Args:
        path: JSON or YAML file using the ``test-fixture.json`` keys.
        **overrides: Field values that take precedence over the file (e.g. CLI flags).

    Raises:
        FileNotFoundError: If the file does not exist.
        ValidationError: If the file content is not a valid run context.
    """
    from qualifier.common.config.run_context import RunContext

    data = _load_config_file(Path(path))
    return _apply_overrides(RunContext.model_validate(data), overrides)


def load_run_context_from_bucket(
    store: ArtifactStore, bucket_name: str, **overrides: Any
) -> RunContext:
    """Rehydrate the run context persisted in a prior run's bucket.

    Raises:
        TransientFetchError: If the bucket has no persisted fixture.
        DecodeError: If the persisted fixture is not valid JSON.
    """
    from qualifier.common.config.run_context import RunContext

    raw = store.get(bucket_name, TEST_FIXTURE_FILENAME)
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise DecodeError(f"Invalid {TEST_FIXTURE_FILENAME} in {bucket_name}: {e}") from e
    if not isinstance(data, dict):
        raise DecodeError(f"{TEST_FIXTURE_FILENAME} in {bucket_name} is not an object")

    data.setdefault("bucket-name", bucket_name)
    if not data.get("runId"):
        data["runId"] = RunContext.run_id_from_bucket(bucket_name)
    return _apply_overrides(RunContext.model_validate(data), overrides)


def _apply_overrides(context: RunContext, overrides: dict[str, Any]) -> RunContext:
    update = {k: v for k, v in overrides.items() if v is not None}
    if not update:
        return context
    return context.model_copy(update=update)

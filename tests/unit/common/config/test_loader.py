# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for config loader functions."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from qualifier.common.config import (
    CPU_METRIC,
    TEST_FIXTURE_FILENAME,
    RunContext,
    load_run_context,
    load_run_context_from_bucket,
)
from qualifier.common.config.loader import _load_config_file
from qualifier.common.exceptions import DecodeError, TransientFetchError
from tests.conftest import InMemoryArtifactStore

_MINIMAL_FIXTURE = {"runId": "abc123", "cpu-threshold": 40, "mem-threshold": 30}


class TestLoadConfigFile:
    """Tests for _load_config_file()."""

    def test_json_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.json"
        config_file.write_text('{"key": "value"}')

        assert _load_config_file(config_file) == {"key": "value"}

    def test_yaml_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("key: value\n")

        assert _load_config_file(config_file) == {"key": "value"}

    def test_yml_extension(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yml"
        config_file.write_text("key: value\n")

        assert _load_config_file(config_file) == {"key": "value"}

    def test_file_not_found_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            _load_config_file(tmp_path / "missing.json")

    def test_unsupported_extension_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.toml"
        config_file.write_text("")

        with pytest.raises(ValueError, match="Unsupported config file format"):
            _load_config_file(config_file)

    def test_empty_yaml_returns_empty_dict(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        assert _load_config_file(config_file) == {}

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.json"
        config_file.write_text("[1, 2]")

        with pytest.raises(ValueError, match="must contain a mapping"):
            _load_config_file(config_file)


class TestLoadRunContext:
    """Tests for load_run_context()."""

    def test_json_fixture(self, tmp_path: Path) -> None:
        path = tmp_path / "fixture.json"
        path.write_text(json.dumps(_MINIMAL_FIXTURE))

        context = load_run_context(path)

        assert context.run_id == "abc123"
        assert context.metric_thresholds[CPU_METRIC] == 40

    def test_yaml_fixture_with_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "fixture.yaml"
        path.write_text("runId: abc123\ntimeout: 900\n")

        context = load_run_context(
            path, results_dir=tmp_path / "out", poll_interval=None, bucket_name="other"
        )

        assert context.timeout == 900
        assert context.results_dir == tmp_path / "out"
        assert context.bucket_name == "other"
        assert context.poll_interval == RunContext(run_id="x").poll_interval


class TestRunContextInBucket:
    """Tests for rehydrating the run fixture stored in the bucket."""

    def test_fixture_is_loaded(self) -> None:
        store = InMemoryArtifactStore()
        fixture = {**_MINIMAL_FIXTURE, "timeout": 900}
        store.put(
            "qualifier-bucket-abc123", TEST_FIXTURE_FILENAME, json.dumps(fixture).encode()
        )

        context = load_run_context_from_bucket(store, "qualifier-bucket-abc123")

        assert context.run_id == "abc123"
        assert context.timeout == 900
        assert context.metric_thresholds[CPU_METRIC] == 40

    def test_overrides_take_precedence(self, tmp_path: Path) -> None:
        store = InMemoryArtifactStore()
        store.put(
            "qualifier-bucket-abc123",
            TEST_FIXTURE_FILENAME,
            json.dumps(_MINIMAL_FIXTURE).encode(),
        )

        context = load_run_context_from_bucket(
            store, "qualifier-bucket-abc123", results_dir=tmp_path, poll_interval=None
        )

        assert context.results_dir == tmp_path

    def test_run_id_derived_from_bucket_name(self) -> None:
        store = InMemoryArtifactStore()
        store.put("qualifier-bucket-xyz", TEST_FIXTURE_FILENAME, b'{"timeout": 60}')

        context = load_run_context_from_bucket(store, "qualifier-bucket-xyz")

        assert context.run_id == "xyz"
        assert context.bucket_name == "qualifier-bucket-xyz"
        assert context.stack_name == "qualifier-stack-xyz"

    def test_missing_fixture_raises(self) -> None:
        with pytest.raises(TransientFetchError):
            load_run_context_from_bucket(InMemoryArtifactStore(), "qualifier-bucket-xyz")

    def test_invalid_fixture_raises(self) -> None:
        store = InMemoryArtifactStore()
        store.put("qualifier-bucket-xyz", TEST_FIXTURE_FILENAME, b"{broken")

        with pytest.raises(DecodeError):
            load_run_context_from_bucket(store, "qualifier-bucket-xyz")

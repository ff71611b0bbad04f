# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for ResultPoller."""

import pytest

from qualifier.common.exceptions import LivenessCheckError, TransientFetchError
from qualifier.orchestrator.poller import ResultPoller
from tests.conftest import WORKER_A, FakeStatusProbe

BUCKET = "qualifier-bucket-abc123"
PRIMARY = f"root/m4.large/{WORKER_A}/{WORKER_A}-test-results.json"
FALLBACK = f"root/m4.large/{WORKER_A}/Tests/{WORKER_A}-test-results.json"


class TestResultPoller:
    """Tests for ResultPoller.poll_for_result."""

    @pytest.fixture
    def make_poller(self, store):
        def _make(statuses=None) -> tuple[ResultPoller, FakeStatusProbe]:
            probe = FakeStatusProbe({WORKER_A: statuses} if statuses else None)
            return ResultPoller(store, probe, BUCKET, interval=0), probe

        return _make

    async def test_primary_available_returns_immediately(self, store, make_poller):
        store.put(BUCKET, PRIMARY, b"primary")
        poller, probe = make_poller()

        data = await poller.poll_for_result(WORKER_A, PRIMARY, FALLBACK)

        assert data == b"primary"
        assert probe.calls == []
        assert store.calls_for(FALLBACK) == []

    async def test_stopped_worker_returns_fallback_once(self, store, make_poller):
        store.put(BUCKET, FALLBACK, b"partial")
        poller, probe = make_poller([True, True, False])

        data = await poller.poll_for_result(WORKER_A, PRIMARY, FALLBACK)

        assert data == b"partial"
        assert probe.calls == [WORKER_A] * 3
        assert store.calls_for(FALLBACK) == ["get"]
        # No primary fetch after the fallback was taken.
        assert store.calls[-1] == ("get", FALLBACK)

    async def test_missing_fallback_raises(self, store, make_poller):
        poller, _ = make_poller([False])

        with pytest.raises(TransientFetchError):
            await poller.poll_for_result(WORKER_A, PRIMARY, FALLBACK)

    async def test_probe_failure_raises_liveness_error(self, store, make_poller):
        poller, probe = make_poller([RuntimeError("throttled")])

        with pytest.raises(LivenessCheckError) as exc_info:
            await poller.poll_for_result(WORKER_A, PRIMARY, FALLBACK)

        assert exc_info.value.worker_id == WORKER_A
        assert probe.calls == [WORKER_A]

    async def test_primary_fetch_error_is_retried(self, store, make_poller):
        store.put(BUCKET, PRIMARY, b"primary")
        store.put(BUCKET, FALLBACK, b"partial")
        store.failing_gets.add(PRIMARY)
        poller, probe = make_poller([True, False])

        data = await poller.poll_for_result(WORKER_A, PRIMARY, FALLBACK)

        assert data == b"partial"
        assert store.calls_for(PRIMARY) == ["exists", "get", "exists", "get"]

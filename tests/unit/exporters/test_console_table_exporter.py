# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for ConsoleTableExporter."""

import io

from rich.console import Console

from qualifier.exporters import ConsoleTableExporter, ReportRenderer


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None)


class TestConsoleTableExporter:
    """Tests for ConsoleTableExporter.export."""

    async def test_prints_table_and_footer(self):
        header = ReportRenderer().header
        rows = [
            ["m4.large", "SUCCESS", "35.80", "40.00", "1.48", "40.00", "true", "19.75"],
            ["m4.xlarge", "N/A", "N/A", "N/A", "N/A", "N/A", "N/A", "N/A"],
        ]
        console = _console()

        await ConsoleTableExporter(
            header, rows, "qualifier-bucket-abc123", "Instance-Qualifier-Run-abc123"
        ).export(console)

        output = console.file.getvalue()
        assert "INSTANCE TYPE" in output
        assert "m4.large" in output
        assert "SUCCESS" in output
        assert "35.80" in output
        assert "m4.xlarge" in output
        assert (
            "Detailed test results can be found in "
            "s3://qualifier-bucket-abc123/Instance-Qualifier-Run-abc123"
        ) in output

    async def test_empty_table_still_prints_footer(self):
        console = _console()

        await ConsoleTableExporter(
            ReportRenderer().header, [], "bucket", "root"
        ).export(console)

        assert "s3://bucket/root" in console.file.getvalue()

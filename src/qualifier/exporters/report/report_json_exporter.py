# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""JSON exporter for the per-worker report table."""

import orjson

from qualifier.exporters.report.report_base_exporter import ReportBaseExporter


class ReportJsonExporter(ReportBaseExporter):
    """Rows as objects keyed by column name.

    Example::

        {"run_id": "abc123", "rows": [{"INSTANCE TYPE": "m4.large", "STATUS": "SUCCESS", ...}]}
    """

    file_suffix = "json"

    def _format(self) -> str:
        data = {"run_id": self._config.run_id, "rows": self.records()}
        return orjson.dumps(data, option=orjson.OPT_INDENT_2).decode()

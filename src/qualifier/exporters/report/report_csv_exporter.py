# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""CSV exporter for the per-worker report table."""

import csv
import io

from qualifier.exporters.report.report_base_exporter import ReportBaseExporter


class ReportCsvExporter(ReportBaseExporter):
    """Header line followed by one line per report row."""

    file_suffix = "csv"

    def _format(self) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(self._config.header)
        writer.writerows(self._config.rows)
        return buf.getvalue()

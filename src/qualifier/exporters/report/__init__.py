# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""File exporters for the per-worker report table."""

from qualifier.exporters.report.report_base_exporter import (
    ReportBaseExporter,
    ReportExporterConfig,
)
from qualifier.exporters.report.report_csv_exporter import (
    ReportCsvExporter,
)
from qualifier.exporters.report.report_json_exporter import (
    ReportJsonExporter,
)

__all__ = [
    "ReportBaseExporter",
    "ReportCsvExporter",
    "ReportExporterConfig",
    "ReportJsonExporter",
]

# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Rendering and export of the per-worker report."""

from qualifier.exporters.console_table_exporter import (
    ConsoleTableExporter,
)
from qualifier.exporters.report_renderer import (
    ReportRenderer,
)

__all__ = [
    "ConsoleTableExporter",
    "ReportRenderer",
]

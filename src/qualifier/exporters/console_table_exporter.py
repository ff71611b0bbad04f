# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Rich console rendering of the per-worker report table."""

from rich.console import Console
from rich.table import Table

from qualifier.common.mixins import QualifierLoggerMixin
from qualifier.exporters.report_renderer import (
    NOT_APPLICABLE,
    STATUS_FAIL,
    STATUS_SUCCESS,
)

_STATUS_STYLES = {
    STATUS_SUCCESS: "bold green",
    STATUS_FAIL: "bold red",
    NOT_APPLICABLE: "dim",
}


class ConsoleTableExporter(QualifierLoggerMixin):
    """Prints the report table and the location of the detailed results."""

    def __init__(
        self,
        header: list[str],
        rows: list[list[str]],
        bucket_name: str,
        bucket_root_dir: str,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._header = header
        self._rows = rows
        self._bucket_name = bucket_name
        self._bucket_root_dir = bucket_root_dir

    async def export(self, console: Console) -> None:
        if not self._rows:
            self.warning("No workers to report")

        table = Table(title="Instance Qualifier Results", title_style="bold")
        for column in self._header:
            table.add_column(column, justify="left" if column == self._header[0] else "right")
        for row in self._rows:
            table.add_row(*self._style_row(row))

        console.print()
        console.print(table)
        console.print(
            f"\nDetailed test results can be found in "
            f"s3://{self._bucket_name}/{self._bucket_root_dir}",
            highlight=False,
        )
        console.file.flush()

    def _style_row(self, row: list[str]) -> list[str]:
        styled = list(row)
        status = row[1]
        style = _STATUS_STYLES.get(status)
        if style:
            styled[1] = f"[{style}]{status}[/{style}]"
        return styled

# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Shared file handling of the report exporters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

import aiofiles

from qualifier.common.mixins import QualifierLoggerMixin


@dataclass(slots=True)
class ReportExporterConfig:
    """Rendered report handed to every file exporter.

    Attributes:
        run_id: Run identifier, part of the file name
        header: Column names, one per row cell
        rows: Report rows as produced by ``ReportRenderer.render``
        output_dir: Directory the report file is written to
    """

    run_id: str
    header: list[str]
    rows: list[list[str]]
    output_dir: Path


class ReportBaseExporter(QualifierLoggerMixin, ABC):
    """Writes the report table to ``report-<run id>.<suffix>``.

    Subclasses set ``file_suffix`` and format the table in ``_format``.
    """

    file_suffix: ClassVar[str]

    def __init__(self, config: ReportExporterConfig, **kwargs) -> None:
        super().__init__(**kwargs)
        self._config = config

    def get_file_name(self) -> str:
        return f"report-{self._config.run_id}.{self.file_suffix}"

    @property
    def file_path(self) -> Path:
        return Path(self._config.output_dir) / self.get_file_name()

    def records(self) -> list[dict[str, str]]:
        """Return the rows as column name to cell mappings.

        Raises:
            ValueError: If a row does not have one cell per column.
        """
        header = self._config.header
        return [dict(zip(header, row, strict=True)) for row in self._config.rows]

    @abstractmethod
    def _format(self) -> str:
        """Return the file content for the configured table."""

    async def export(self) -> Path:
        """Write the report file and return its path.

        Raises:
            ValueError: If the table cannot be formatted.
            OSError: If the file cannot be written.
        """
        file_path = self.file_path
        content = self._format()

        file_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiofiles.open(file_path, "w", newline="", encoding="utf-8") as f:
                await f.write(content)
        except OSError as e:
            self.error(f"Failed to write report {file_path}: {e}")
            raise

        self.info(f"Wrote {len(self._config.rows)} report row(s) to {file_path}")
        return file_path

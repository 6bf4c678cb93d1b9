"""File-based persistence helpers for financial report exports."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from openpyxl import Workbook

from ..config import settings

RUN_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S%fZ"


class FileStorage:
    """Thin wrapper around the data root for storing JSON, CSV and XLSX outputs."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.output_root = self.root / "outputs"
        self.output_root.mkdir(parents=True, exist_ok=True)

    def make_run_directory(self, prefix: str = "report") -> Path:
        timestamp = datetime.now(timezone.utc).strftime(RUN_TIMESTAMP_FORMAT)
        path = self.output_root / f"{prefix}_{timestamp}"
        path.mkdir(parents=True, exist_ok=False)
        return path

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent, default=str)

    def write_csv(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)

    def write_workbook(
        self,
        path: Path,
        header: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        title: str = "Sheet1",
    ) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = title
        sheet.append(list(header))
        for row in rows:
            sheet.append(list(row))
        workbook.save(path)

    def resolve(self, run_id: str, filename: str) -> Path:
        output_root = self.output_root.resolve()
        candidate = (output_root / run_id / filename).resolve()
        if output_root not in candidate.parents or not candidate.is_file():
            raise FileNotFoundError(filename)
        return candidate

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from analytics.exceptions import UnsupportedFileError
from analytics.interpreter import interpret_rows
from analytics.models import AttendanceParseConfig, ParsedResult

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xls"}
CSV_SUFFIXES = {".csv"}


class AttendanceFileParser:
    """Reads an attendance sheet (Excel or CSV) and interprets its first sheet."""

    def __init__(self, config: AttendanceParseConfig | None = None) -> None:
        self.config = config or AttendanceParseConfig()

    def read(self, file, filename: Optional[str] = None) -> ParsedResult:
        rows = self.read_rows(file, filename)
        return interpret_rows(rows, self.config)

    def read_rows(self, file, filename: Optional[str] = None) -> List[Dict[str, Any]]:
        name = filename or getattr(file, "name", None) or str(file)
        suffix = Path(name).suffix.lower()
        logger.info("Reading attendance sheet %s", name)
        if suffix in EXCEL_SUFFIXES:
            df = pd.read_excel(file, sheet_name=0)
        elif suffix in CSV_SUFFIXES:
            df = pd.read_csv(file)
        else:
            raise UnsupportedFileError(
                f"Invalid file type {suffix or '(none)'}. Please upload a .xlsx, .xls or .csv file"
            )
        return self._to_rows(df)

    @staticmethod
    def _to_rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
        # empty cells (NaN/NaT) become None
        cleaned = df.astype(object).where(pd.notna(df), None)
        return [
            {str(key): value for key, value in row.items()}
            for row in cleaned.to_dict(orient="records")
        ]


__all__ = ["AttendanceFileParser"]

"""
CSV file sink.
"""

import csv
import io
import json
from pathlib import Path
from typing import Any

from recordflow.core.errors import PipelineError
from recordflow.core.models import Record, build_csv_options

from .file_sink import LineFileSink


def format_cell(value: Any) -> str:
    """
    Render one value as CSV cell text.

    Strings verbatim, null as empty, booleans as true/false, numbers via
    str(), nested JSON as compact JSON text.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class CsvSink(LineFileSink):
    """
    Sink writing a header line followed by one CSV row per record.

    Columns are the explicit headers option, or the first record's key order.
    That column list is fixed for the whole file: later records are written
    in the same column order, with empty cells for missing keys and extra
    keys dropped.
    """

    def __init__(
        self,
        file_path: str | Path,
        delimiter: str = ",",
        headers: list[str] | None = None,
    ):
        """
        Initialize CSV sink.

        Args:
            file_path: Destination path (created or truncated on first write)
            delimiter: Field delimiter (single character)
            headers: Explicit column list

        Raises:
            PipelineError: kind CONFIG if options are invalid
        """
        super().__init__(file_path)
        self.options = build_csv_options(delimiter=delimiter, headers=headers)
        self._columns: list[str] | None = None

    def with_delimiter(self, delimiter: str) -> "CsvSink":
        self.options = self.options.updated(delimiter=delimiter)
        return self

    def with_headers(self, headers: list[str]) -> "CsvSink":
        self.options = self.options.updated(headers=headers)
        return self

    def _join(self, cells: list[str]) -> str:
        buffer = io.StringIO()
        csv.writer(buffer, delimiter=self.options.delimiter, lineterminator="").writerow(cells)
        return buffer.getvalue()

    def _lines_for(self, record: Record) -> list[str]:
        lines = []
        if self._columns is None:
            if self.options.headers is not None:
                columns = list(self.options.headers)
            else:
                columns = list(record.data.keys())
            lines.append(self._join(columns))
        else:
            columns = self._columns

        try:
            cells = [format_cell(record.data.get(column)) for column in columns]
        except (TypeError, ValueError) as e:
            raise PipelineError.from_json_error(e) from e

        lines.append(self._join(cells))
        # Fixed only once the first row serialized successfully
        self._columns = columns
        return lines

    def __repr__(self) -> str:
        return f"CsvSink(path={self.file_path}, delimiter={self.options.delimiter!r})"

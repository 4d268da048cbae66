"""
CSV file source.

Reads delimited text line by line; every value is the trimmed cell text.
"""

import csv
from pathlib import Path
from typing import AsyncGenerator

from recordflow.core.errors import PipelineError
from recordflow.core.models import DataType, Field, Record, Schema, build_csv_options
from recordflow.observability.logger import get_logger
from recordflow.utils.async_files import AsyncLineReader

from .base_source import BaseSource, RecordStream

logger = get_logger(__name__)


class CsvSource(BaseSource):
    """
    Source producing one record per non-blank CSV line.

    Field names come from the explicit headers option, the header row, or
    positional "column_{i}" names. Cells beyond the field list are dropped;
    short rows produce records with fewer keys.
    """

    def __init__(
        self,
        file_path: str | Path,
        delimiter: str = ",",
        has_header: bool = True,
        headers: list[str] | None = None,
    ):
        """
        Initialize CSV source.

        Args:
            file_path: Path to the CSV file
            delimiter: Field delimiter (single character)
            has_header: Whether the first line is a header row
            headers: Explicit field names overriding the header row

        Raises:
            PipelineError: kind CONFIG if options are invalid
        """
        super().__init__()
        self.file_path = str(file_path)
        self.options = build_csv_options(delimiter=delimiter, has_header=has_header, headers=headers)

    def with_delimiter(self, delimiter: str) -> "CsvSource":
        self.options = self.options.updated(delimiter=delimiter)
        return self

    def with_header(self, has_header: bool) -> "CsvSource":
        self.options = self.options.updated(has_header=has_header)
        return self

    def with_headers(self, headers: list[str]) -> "CsvSource":
        self.options = self.options.updated(headers=headers)
        return self

    def _split(self, line: str) -> list[str]:
        row = next(csv.reader([line], delimiter=self.options.delimiter), [])
        return [cell.strip() for cell in row]

    def _field_names(self, first_line: str) -> list[str]:
        if self.options.headers is not None:
            return list(self.options.headers)
        cells = self._split(first_line)
        if self.options.has_header:
            return cells
        return [f"column_{i}" for i in range(len(cells))]

    async def _open_non_empty(self) -> tuple[AsyncLineReader, str]:
        reader = await AsyncLineReader(self.file_path).open()
        first_line = await reader.readline()
        if first_line is None:
            await reader.close()
            raise PipelineError.source(f"Empty CSV file: {self.file_path}")
        return reader, first_line

    async def get_schema(self) -> Schema:
        reader, first_line = await self._open_non_empty()
        await reader.close()

        try:
            names = self._field_names(first_line)
        except csv.Error as e:
            raise PipelineError.schema(f"Cannot parse CSV header in {self.file_path}: {e}", e) from e

        fields = [Field(name=name, data_type=DataType.STRING, nullable=True) for name in names]
        try:
            return Schema(fields=fields, metadata={"source": self.file_path, "format": "csv"})
        except ValueError as e:
            raise PipelineError.schema(f"Invalid CSV header in {self.file_path}: {e}", e) from e

    async def read(self) -> RecordStream:
        reader, first_line = await self._open_non_empty()
        try:
            field_names = self._field_names(first_line)
        except csv.Error as e:
            await reader.close()
            raise PipelineError.schema(f"Cannot parse CSV header in {self.file_path}: {e}", e) from e

        logger.debug("Opened CSV source", extra={"path": self.file_path, "fields": field_names})
        stream = self._records(reader, first_line, field_names)
        return self._track(stream, reader)

    async def _records(
        self,
        reader: AsyncLineReader,
        first_line: str,
        field_names: list[str],
    ) -> AsyncGenerator[Record | PipelineError, None]:
        try:
            line: str | None = first_line
            if self.options.has_header:
                line = await reader.readline()

            while line is not None:
                if line.strip():
                    yield self._parse_line(line, reader.line_number, field_names)
                line = await reader.readline()
        finally:
            await reader.close()
            self._untrack(reader)

    def _parse_line(self, line: str, line_number: int, field_names: list[str]) -> Record | PipelineError:
        try:
            cells = self._split(line)
        except csv.Error as e:
            return PipelineError.source(f"Malformed CSV at {self.file_path}:{line_number}: {e}", e)

        record = Record.with_data(dict(zip(field_names, cells)))
        record.set_metadata("line", str(line_number))
        return record

    def __repr__(self) -> str:
        return f"CsvSource(path={self.file_path}, delimiter={self.options.delimiter!r})"

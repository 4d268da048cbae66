"""
JSON-Lines file source.

Each non-blank line must hold one JSON object; its keys become record fields.
"""

import json
from pathlib import Path
from typing import AsyncGenerator

from recordflow.core.errors import PipelineError
from recordflow.core.models import DataType, Field, Record, Schema
from recordflow.observability.logger import get_logger
from recordflow.utils.async_files import AsyncLineReader

from .base_source import BaseSource, RecordStream

logger = get_logger(__name__)


class JsonLinesSource(BaseSource):
    """
    Source producing one record per JSON object line.

    Invalid JSON on a line yields a SERIALIZATION error item, and a line
    holding a non-object value yields a SCHEMA error item; the stream
    continues past both.
    """

    def __init__(self, file_path: str | Path):
        super().__init__()
        self.file_path = str(file_path)

    async def _open_non_empty(self) -> tuple[AsyncLineReader, str]:
        """Open the file and return the reader plus the first non-blank line."""
        reader = await AsyncLineReader(self.file_path).open()
        line = await reader.readline()
        while line is not None and not line.strip():
            line = await reader.readline()
        if line is None:
            await reader.close()
            raise PipelineError.source(f"Empty JSON Lines file: {self.file_path}")
        return reader, line

    async def get_schema(self) -> Schema:
        reader, first_line = await self._open_non_empty()
        await reader.close()

        try:
            value = json.loads(first_line)
        except json.JSONDecodeError as e:
            raise PipelineError.from_json_error(e) from e

        if not isinstance(value, dict):
            raise PipelineError.schema(f"First line of {self.file_path} is not a JSON object")

        fields = [Field(name=key, data_type=DataType.JSON, nullable=True) for key in value]
        return Schema(fields=fields, metadata={"source": self.file_path, "format": "jsonl"})

    async def read(self) -> RecordStream:
        reader, first_line = await self._open_non_empty()
        logger.debug("Opened JSON Lines source", extra={"path": self.file_path})
        stream = self._records(reader, first_line)
        return self._track(stream, reader)

    async def _records(
        self,
        reader: AsyncLineReader,
        first_line: str,
    ) -> AsyncGenerator[Record | PipelineError, None]:
        try:
            line: str | None = first_line
            while line is not None:
                if line.strip():
                    yield self._parse_line(line, reader.line_number)
                line = await reader.readline()
        finally:
            await reader.close()
            self._untrack(reader)

    def _parse_line(self, line: str, line_number: int) -> Record | PipelineError:
        try:
            value = json.loads(line)
        except json.JSONDecodeError as e:
            return PipelineError.serialization(
                f"Invalid JSON at {self.file_path}:{line_number}: {e}", e
            )

        if not isinstance(value, dict):
            return PipelineError.schema(f"Line {line_number} of {self.file_path} is not a JSON object")

        record = Record.with_data(value)
        record.set_metadata("line", str(line_number))
        return record

    def __repr__(self) -> str:
        return f"JsonLinesSource(path={self.file_path})"

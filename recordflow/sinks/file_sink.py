"""
Shared lifecycle for sinks writing one text line per record to a file.
"""

from abc import abstractmethod
from pathlib import Path

from recordflow.core.errors import PipelineError
from recordflow.core.models import Record
from recordflow.observability.logger import get_logger
from recordflow.utils.async_files import AsyncLineWriter

from .base_sink import BaseSink

logger = get_logger(__name__)


class LineFileSink(BaseSink):
    """
    File sink writing each record as one newline-terminated line.

    The file is created (or truncated) on the first write. close() flushes
    and releases the handle once; later calls are no-ops, and writes after
    close fail with kind SINK rather than silently truncating the output.
    """

    def __init__(self, file_path: str | Path):
        self.file_path = str(file_path)
        self._writer: AsyncLineWriter | None = None
        self._closed = False
        self.records_written = 0

    async def _ensure_writer(self) -> AsyncLineWriter:
        if self._closed:
            raise PipelineError.sink(f"Sink for {self.file_path} is closed")
        if self._writer is None:
            self._writer = await AsyncLineWriter(self.file_path).open()
            logger.debug("Opened sink file", extra={"path": self.file_path})
        return self._writer

    async def write(self, record: Record) -> None:
        writer = await self._ensure_writer()
        for line in self._lines_for(record):
            await writer.write_line(line)
        self.records_written += 1

    @abstractmethod
    def _lines_for(self, record: Record) -> list[str]:
        """Serialize a record into the lines to append (header rows included)."""
        pass

    async def flush(self) -> None:
        if self._writer is not None:
            await self._writer.flush()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        writer, self._writer = self._writer, None
        if writer is None:
            return
        try:
            await writer.flush()
        finally:
            await writer.close()
        logger.debug(
            "Closed sink file",
            extra={"path": self.file_path, "records_written": self.records_written},
        )

    @property
    def closed(self) -> bool:
        return self._closed

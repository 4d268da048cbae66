"""
Base source interface.

A source produces a finite, lazy, single-pass sequence of records from an
external resource. All sources must inherit from BaseSource and implement
get_schema() and read().
"""

from abc import ABC, abstractmethod
from typing import AsyncGenerator, AsyncIterator, Union

from recordflow.core.errors import PipelineError
from recordflow.core.models import Record, Schema
from recordflow.utils.async_files import AsyncLineReader

# Each item is either a record or the per-item error that replaced it.
RecordStream = AsyncIterator[Union[Record, PipelineError]]


class BaseSource(ABC):
    """
    Abstract base class for record sources.

    read() reopens the underlying resource on every call and returns a new
    stream starting from the beginning; a partially consumed stream is never
    resumed. Resource failures raise from read() itself, while per-record
    failures are yielded as PipelineError items so the stream can continue.
    """

    def __init__(self):
        self._open_streams: list[tuple[AsyncGenerator, AsyncLineReader]] = []

    @abstractmethod
    async def get_schema(self) -> Schema:
        """
        Describe the records this source produces without consuming it.

        Returns:
            Schema derived from a prefix of the underlying data

        Raises:
            PipelineError: If the resource cannot be read or is empty
        """
        pass

    @abstractmethod
    async def read(self) -> RecordStream:
        """
        Open the resource and return a lazy record stream.

        Raises:
            PipelineError: If the resource cannot be opened or is empty
        """
        pass

    def _track(self, stream: AsyncGenerator, reader: AsyncLineReader) -> AsyncGenerator:
        """Remember an open stream so close() can release it."""
        self._open_streams.append((stream, reader))
        return stream

    def _untrack(self, reader: AsyncLineReader) -> None:
        """Forget a stream once it has finished and released its reader."""
        self._open_streams = [entry for entry in self._open_streams if entry[1] is not reader]

    async def close(self) -> None:
        """
        Release any streams still open. Safe to call repeatedly and
        without a prior read().
        """
        streams, self._open_streams = self._open_streams, []
        for stream, reader in streams:
            await stream.aclose()
            await reader.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

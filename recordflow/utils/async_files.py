"""
Line-oriented async file access.

Blocking file calls run on worker threads via asyncio.to_thread, so each
open/readline/write/flush/close is a suspension point for the event loop.
OSError and decode failures surface as PipelineError of kind IO.
"""

import asyncio
import os
from typing import IO

from recordflow.core.errors import PipelineError


def _strip_newline(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n") or line.endswith("\r"):
        return line[:-1]
    return line


class AsyncLineReader:
    """Reads a UTF-8 text file one line at a time."""

    def __init__(self, path: str):
        self.path = path
        self._handle: IO[str] | None = None
        self.line_number = 0

    async def open(self) -> "AsyncLineReader":
        try:
            self._handle = await asyncio.to_thread(open, self.path, "r", encoding="utf-8", newline="")
        except OSError as e:
            raise PipelineError.from_os_error(e, self.path) from e
        return self

    async def readline(self) -> str | None:
        """Return the next line without its terminator, or None at EOF."""
        if self._handle is None:
            return None
        try:
            line = await asyncio.to_thread(self._handle.readline)
        except OSError as e:
            raise PipelineError.from_os_error(e, self.path) from e
        except UnicodeDecodeError as e:
            raise PipelineError.io(f"{self.path} is not valid UTF-8 text", e) from e
        if line == "":
            return None
        self.line_number += 1
        return _strip_newline(line)

    async def close(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            await asyncio.to_thread(handle.close)

    @property
    def closed(self) -> bool:
        return self._handle is None


class AsyncLineWriter:
    """Writes newline-terminated text to a file opened with truncation."""

    def __init__(self, path: str):
        self.path = path
        self._handle: IO[str] | None = None

    async def open(self) -> "AsyncLineWriter":
        try:
            self._handle = await asyncio.to_thread(open, self.path, "w", encoding="utf-8", newline="")
        except OSError as e:
            raise PipelineError.from_os_error(e, self.path) from e
        return self

    async def write_line(self, text: str) -> None:
        if self._handle is None:
            raise PipelineError.sink(f"Writer for {self.path} is not open")
        try:
            await asyncio.to_thread(self._handle.write, text + "\n")
        except OSError as e:
            raise PipelineError.from_os_error(e, self.path) from e

    async def flush(self) -> None:
        """Flush Python buffers and fsync the file."""
        if self._handle is None:
            return
        handle = self._handle
        try:
            await asyncio.to_thread(handle.flush)
            await asyncio.to_thread(os.fsync, handle.fileno())
        except OSError as e:
            raise PipelineError.from_os_error(e, self.path) from e

    async def close(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            try:
                await asyncio.to_thread(handle.close)
            except OSError as e:
                raise PipelineError.from_os_error(e, self.path) from e

    @property
    def is_open(self) -> bool:
        return self._handle is not None

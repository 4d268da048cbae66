"""
Base sink interface.

A sink consumes records and persists them, in call order, to an external
resource. All sinks must inherit from BaseSink and implement write().
"""

from abc import ABC, abstractmethod
from typing import Iterable

from recordflow.core.models import Record


class BaseSink(ABC):
    """
    Abstract base class for record sinks.

    Sinks acquire their resource lazily on the first write(), so no explicit
    open call exists.
    """

    @abstractmethod
    async def write(self, record: Record) -> None:
        """
        Append one record to the destination.

        Raises:
            PipelineError: If the record cannot be serialized or written
        """
        pass

    async def write_batch(self, records: Iterable[Record]) -> None:
        """
        Write records one at a time in input order.

        A failure on one record propagates immediately: later records are
        not attempted and earlier ones stay written (no rollback).
        """
        for record in records:
            await self.write(record)

    async def flush(self) -> None:
        """Force buffered output to storage. No-op unless overridden."""
        return None

    async def close(self) -> None:
        """Flush, then release the resource. Subclasses must stay idempotent."""
        await self.flush()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

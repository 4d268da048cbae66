"""
Pipeline driver.

Coordinates the flow: source -> transform chain -> sink, one record at a
time, followed by ordered shutdown (sink first, then source).
"""

import asyncio
import time
from typing import Any, AsyncIterator, Sequence

from recordflow.core.errors import ErrorKind, PipelineError
from recordflow.core.models import PipelineResult, PipelineState, Record, Schema
from recordflow.observability.logger import get_logger, log_operation
from recordflow.observability.metrics import MetricsCollector
from recordflow.sinks import BaseSink
from recordflow.sources import BaseSource
from recordflow.transforms import BaseTransform

logger = get_logger(__name__)


def _tag(error: Exception, kind: ErrorKind, action: str) -> PipelineError:
    """Return PipelineErrors unchanged; wrap anything else with the given kind."""
    if isinstance(error, PipelineError):
        return error
    return PipelineError(kind, f"{action} failed: {error}", error)


class Pipeline:
    """
    Single-shot, sequential pipeline over one source, a transform chain,
    and one sink.

    Flow for run():
    1. Open the source stream (failure aborts before the sink is touched)
    2. For each stream item: raise it if it is an error, otherwise thread
       the record through the transforms and write the result
    3. Close the sink, then the source

    Transform chaining keeps only the first output of each transform. When
    a transform returns no output, the record it was given continues to the
    next stage unchanged, so every source record reaches the sink.

    The first failure ends the run: the pipeline becomes FAILED and the
    error propagates with no retry and no partial result.
    """

    def __init__(
        self,
        source: BaseSource,
        transforms: Sequence[BaseTransform] | None,
        sink: BaseSink,
        name: str = "pipeline",
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize pipeline.

        Args:
            source: Record source, owned by this pipeline for the run
            transforms: Transforms applied in list order (may be empty)
            sink: Record sink, owned by this pipeline for the run
            name: Name used in logs and metric labels
            metrics: Metrics collector (one bound to name is created if None)
        """
        self.source = source
        self.transforms = list(transforms or [])
        self.sink = sink
        self.name = name
        self.metrics = metrics or MetricsCollector(name)

        self._state = PipelineState.CREATED
        self._records_read = 0
        self._records_written = 0

        logger.debug(
            "Initialized pipeline",
            extra={
                "pipeline": name,
                "source": repr(source),
                "transforms": [repr(t) for t in self.transforms],
                "sink": repr(sink),
            },
        )

    @property
    def state(self) -> PipelineState:
        return self._state

    async def output_schema(self) -> Schema:
        """
        Compose the schema the sink would receive, without reading records.

        Returns:
            The source schema passed through every transform's
            get_output_schema(), in order

        Raises:
            PipelineError: If the source schema cannot be derived or a
                transform rejects its input schema
        """
        schema = await self.source.get_schema()
        for transform in self.transforms:
            schema = await transform.get_output_schema(schema)
        return schema

    async def run(self) -> PipelineResult:
        """
        Execute the pipeline once.

        Returns:
            PipelineResult summary of the completed run

        Raises:
            RuntimeError: If the pipeline has already been run
            PipelineError: The first failure encountered at any stage
        """
        if self._state is not PipelineState.CREATED:
            raise RuntimeError(f"Pipeline {self.name} has already been run (state: {self._state.value})")

        self._state = PipelineState.RUNNING
        start_time = time.monotonic()

        try:
            with log_operation("Pipeline run", logger=logger, pipeline=self.name):
                await self._execute()
        except (Exception, asyncio.CancelledError):
            self._state = PipelineState.FAILED
            self.metrics.record_run("failed", time.monotonic() - start_time)
            raise

        duration = time.monotonic() - start_time
        self._state = PipelineState.COMPLETED
        self.metrics.record_run("completed", duration)

        return PipelineResult(
            pipeline_name=self.name,
            state=self._state,
            records_read=self._records_read,
            records_written=self._records_written,
            duration_seconds=duration,
        )

    async def _execute(self) -> None:
        try:
            stream = await self.source.read()
        except Exception as e:
            raise _tag(e, ErrorKind.SOURCE, "Opening source")

        try:
            await self._drain(stream)
        finally:
            # Releases the read handle when the run stops early
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

        try:
            await self.sink.close()
        except Exception as e:
            raise _tag(e, ErrorKind.SINK, "Closing sink")

        try:
            await self.source.close()
        except Exception as e:
            raise _tag(e, ErrorKind.SOURCE, "Closing source")

    async def _drain(self, stream: AsyncIterator[Any]) -> None:
        while True:
            try:
                item = await stream.__anext__()
            except StopAsyncIteration:
                return
            except Exception as e:
                raise _tag(e, ErrorKind.SOURCE, "Reading source")

            if isinstance(item, BaseException):
                raise item

            self._records_read += 1
            self.metrics.record_read()

            record = await self._apply_transforms(item)

            try:
                await self.sink.write(record)
            except Exception as e:
                raise _tag(e, ErrorKind.SINK, "Writing record")

            self._records_written += 1
            self.metrics.record_written()

    async def _apply_transforms(self, record: Record) -> Record:
        for transform in self.transforms:
            try:
                outputs = await transform.transform(record.copy_record())
            except Exception as e:
                raise _tag(e, ErrorKind.TRANSFORM, f"Transform {transform.name}")

            first = next(iter(outputs), None)
            if first is None:
                logger.debug(
                    "Transform produced no output; carrying its input forward",
                    extra={"pipeline": self.name, "transform": transform.name},
                )
                self.metrics.record_empty_output(transform.name)
                continue
            record = first
        return record

    def get_status(self) -> dict[str, Any]:
        """
        Get current status of the pipeline.

        Returns:
            Dictionary with state and record counters
        """
        return {
            "status": self._state.value,
            "pipeline": self.name,
            "records_read": self._records_read,
            "records_written": self._records_written,
        }

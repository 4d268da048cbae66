"""
JSON-Lines file sink.
"""

import json
from pathlib import Path

from recordflow.core.errors import PipelineError
from recordflow.core.models import Record

from .file_sink import LineFileSink


class JsonLinesSink(LineFileSink):
    """Sink writing each record's data map as one compact JSON object line."""

    def __init__(self, file_path: str | Path):
        super().__init__(file_path)

    def _lines_for(self, record: Record) -> list[str]:
        try:
            return [json.dumps(record.data, separators=(",", ":"), ensure_ascii=False, allow_nan=False)]
        except (TypeError, ValueError) as e:
            raise PipelineError.from_json_error(e) from e

    def __repr__(self) -> str:
        return f"JsonLinesSink(path={self.file_path})"

"""
Record sinks: the abstract contract and file-backed adapters.
"""

from .base_sink import BaseSink
from .csv_sink import CsvSink
from .file_sink import LineFileSink
from .jsonl_sink import JsonLinesSink

__all__ = [
    "BaseSink",
    "LineFileSink",
    "CsvSink",
    "JsonLinesSink",
]

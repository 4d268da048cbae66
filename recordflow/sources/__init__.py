"""
Record sources: the abstract contract and file-backed adapters.
"""

from .base_source import BaseSource, RecordStream
from .csv_source import CsvSource
from .jsonl_source import JsonLinesSource

__all__ = [
    "BaseSource",
    "RecordStream",
    "CsvSource",
    "JsonLinesSource",
]

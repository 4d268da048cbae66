"""
Pytest configuration and fixtures for recordflow tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import json
from pathlib import Path
from typing import Callable

import pytest

from recordflow.core.models import DataType, Field, Record, Schema


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't touch more than one component"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests wiring real sources and sinks"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that drive the CLI"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture
def write_file(tmp_path) -> Callable[[str, str], Path]:
    """
    Factory writing text content to a file under tmp_path

    Returns:
        Function (name, content) -> Path
    """
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def orders_csv(write_file) -> Path:
    """CSV file with a header row and three orders"""
    return write_file(
        "orders.csv",
        "order_id,amount,paid\n"
        "A-1, 10.50 ,true\n"
        "A-2,7,false\n"
        "A-3,99.99,yes\n",
    )


@pytest.fixture
def orders_jsonl(write_file) -> Path:
    """JSON Lines file with three order objects"""
    rows = [
        {"order_id": "A-1", "amount": 10.5, "paid": True},
        {"order_id": "A-2", "amount": 7, "paid": False},
        {"order_id": "A-3", "amount": 99.99, "paid": True, "tags": ["vip"]},
    ]
    return write_file("orders.jsonl", "".join(json.dumps(row) + "\n" for row in rows))


# =======================
# MODEL FIXTURES
# =======================

@pytest.fixture
def order_schema() -> Schema:
    """Schema with two required fields and one optional field"""
    return Schema(
        fields=[
            Field(name="order_id", data_type=DataType.STRING, nullable=False),
            Field(name="amount", data_type=DataType.FLOAT, nullable=False),
            Field(name="note", data_type=DataType.STRING, nullable=True),
        ]
    )


@pytest.fixture
def sample_record() -> Record:
    """Valid order record"""
    return Record.with_data({"order_id": "A-1", "amount": 10.5})


@pytest.fixture
def read_jsonl() -> Callable[[Path], list[dict]]:
    """Parser returning every line of a JSON Lines file as a dict"""
    def _read(path: Path) -> list[dict]:
        return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]

    return _read

"""
PipelineResult model summarizing a completed pipeline run (ephemeral).
"""

from enum import Enum

from pydantic import BaseModel, Field


class PipelineState(str, Enum):
    """Lifecycle of a pipeline: CREATED -> RUNNING -> COMPLETED | FAILED."""

    CREATED = "created"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class PipelineResult(BaseModel):
    """
    Summary returned by a successful run.

    Failed runs raise instead, so no partial result is ever reported.

    Attributes:
        pipeline_name: Name the pipeline was created with
        state: Final state (always COMPLETED for a returned result)
        records_read: Records pulled from the source
        records_written: Records written to the sink
        duration_seconds: Wall-clock duration of the run
    """

    pipeline_name: str
    state: PipelineState
    records_read: int = Field(..., ge=0)
    records_written: int = Field(..., ge=0)
    duration_seconds: float = Field(..., ge=0.0)

    class Config:
        json_schema_extra = {
            "example": {
                "pipeline_name": "orders_csv_to_jsonl",
                "state": "completed",
                "records_read": 1200,
                "records_written": 1200,
                "duration_seconds": 0.84,
            }
        }

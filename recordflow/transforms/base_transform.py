"""
Base transform interface.

A transform maps one input record to zero, one, or many output records.
All transforms must inherit from BaseTransform.
"""

from abc import ABC, abstractmethod

from recordflow.core.models import Record, Schema


class BaseTransform(ABC):
    """
    Abstract base class for record transforms.

    The pipeline calls transform() once per record, in arrival order, never
    concurrently. Implementations holding state across calls (a running
    aggregate, a seen-set) must say so in their docstring.
    """

    @abstractmethod
    async def transform(self, record: Record) -> list[Record]:
        """
        Map one record to its outputs.

        Args:
            record: Input record (a private copy; safe to mutate)

        Returns:
            Output records. The pipeline keeps only the first; an empty
            list leaves the input record in the flow unchanged

        Raises:
            PipelineError: If the record cannot be transformed
        """
        pass

    @abstractmethod
    async def get_output_schema(self, input_schema: Schema) -> Schema:
        """
        Describe this transform's output without processing any record.

        Args:
            input_schema: Schema of the records fed to this transform

        Returns:
            Schema of the records it would produce
        """
        pass

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, Any
from ..models.errors import NachaFileError
from ..types import RowResult, Row

class BaseOutput(ABC):
    """Abstract base for output writers.

    Concrete implementations must provide lifecycle and row handling methods.

    :param dest: Destination path / identifier.
    :param schema: Optional dict with a ``tables`` mapping of table name to JSON Schema.
    :param opts: Additional implementation-specific options.
    """
    def __init__(self, dest: str, schema: Dict[str, Any] | None, **opts: Any):
        self.dest = dest
        self.schema = schema or {}
        self.opts = opts

    def register_table(self, name: str, json_schema: Dict[str, Any]) -> None:
        """Declare the JSON Schema of the rows that will be written to table ``name``."""
        self.schema.setdefault("tables", {})[name] = json_schema

    @abstractmethod
    def open(self) -> None:
        """Initialize resources (directories, files, connections)."""
        ...

    @abstractmethod
    def write(self, row: Row) -> None:
        """Persist a single accepted row.

        :param row: Row dictionary to write; ``_table`` names its table.
        """
        ...

    @abstractmethod
    def quarantine(self, rr: RowResult) -> None:
        """Record a rejected row and its associated error.

        :param rr: RowResult containing original row and error.
        """
        ...

    @abstractmethod
    def report(self, error: NachaFileError) -> None:
        """Record a structural error found by the parser."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Finalize and release resources, flushing buffers as needed."""
        ...

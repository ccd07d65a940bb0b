from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

Row = Dict[str, Any]


class RecordType(str, Enum):
    """Closed set of NACHA record kinds, valued by their type code."""
    FILE_HEADER = "1"
    BATCH_HEADER = "5"
    ENTRY_DETAIL = "6"
    ENTRY_ADDENDUM = "7"
    BATCH_CONTROL = "8"
    FILE_CONTROL = "9"
    PADDING = "999"
    UNRECOGNIZED = "?"

    @property
    def table_name(self) -> str:
        return self.name.lower()


@dataclass
class RowResult:
    row: Optional[Row]
    error: Optional[Exception]

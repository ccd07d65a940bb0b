from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .records import NachaRecord


@dataclass(frozen=True)
class NachaFileError:
    """
    A structural problem found while parsing. Collected, never raised.

    When built with only a ``record``, ``line`` and ``line_number`` are taken from it.

    :param message: Human-readable description.
    :param line: The offending raw line, if known.
    :param line_number: 1-based line number, if known.
    :param record: The offending record, if known.
    """
    message: str
    line: Optional[str] = None
    line_number: Optional[int] = None
    record: Optional["NachaRecord"] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.record is not None:
            if self.line is None:
                object.__setattr__(self, "line", self.record.raw_text)
            if self.line_number is None:
                object.__setattr__(self, "line_number", self.record.line_number)

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"line {self.line_number}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "line": self.line,
            "line_number": self.line_number,
            "record_type": self.record.type_code if self.record is not None else None,
        }

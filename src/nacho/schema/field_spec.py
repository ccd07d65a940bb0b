from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import re

# Leading whitespace, optional sign, then the leading run of ASCII digits.
_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_leading_int(raw: str) -> Optional[int]:
    """
    Parse the leading base-10 integer of a raw field value.

    Leading whitespace and a sign are tolerated and trailing garbage after the
    digits is ignored (``"  12ab"`` gives 12). A value with no leading digits,
    including an empty one, gives ``None``.

    :param raw: Raw field text.
    :return: The parsed integer or ``None`` when the value is not a number.
    """
    m = _LEADING_INT_RE.match(raw)
    if m is None:
        return None
    return int(m.group(1))


@dataclass(frozen=True)
class FieldSpec:
    """
    One fixed-width field: a 1-based inclusive character range and a numeric flag.

    Extraction never validates the line length. A line shorter than ``end``
    yields whatever part of the range is present, possibly an empty string.
    """
    start: int
    end: int
    numeric: bool = False

    def __post_init__(self) -> None:
        if self.start < 1:
            raise ValueError(f"Field start must be >= 1, got {self.start}.")
        if self.end < self.start:
            raise ValueError(f"Field has invalid end {self.end} < start {self.start}.")

    @property
    def width(self) -> int:
        return self.end - self.start + 1

    def get_raw(self, text: str) -> str:
        """
        Return the characters of ``text`` covered by this field, unmodified.

        :param text: A full record line.
        :return: The raw field value (shorter than ``width`` on short lines).
        """
        return text[self.start - 1:self.end]

    def get_str(self, text: str) -> str:
        return self.get_raw(text).strip()

    def get_int(self, text: str) -> Optional[int]:
        """
        Return the field parsed as a base-10 integer, or ``None`` if it is not a number.

        :param text: A full record line.
        """
        return parse_leading_int(self.get_raw(text))

    def get_value(self, text: str) -> Any:
        return self.get_int(text) if self.numeric else self.get_str(text)

    def to_fwf_field(self, name: str) -> Dict[str, Any]:
        """
        Describe this field as a fixed-width field dict
        (``name``, ``start``, ``end``, ``length``, ``type``).
        """
        return {
            "name": name,
            "start": self.start,
            "end": self.end,
            "length": self.width,
            "type": "integer" if self.numeric else "string",
        }

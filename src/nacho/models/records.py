"""
Record classes for the lines of a NACHA ACH file.

Every line becomes exactly one record. The concrete class is chosen by the
record type code (see :mod:`nacho.engine.registry`) and carries that type's
static field table from :mod:`nacho.schema.layouts`. Structural links between
records are plain references, filled in only by the parser's validation pass.
"""
from __future__ import annotations
from typing import Any, ClassVar, List, Optional, Tuple

from ..schema.field_spec import FieldSpec
from ..schema.layouts import LAYOUTS, Layout
from ..types import RecordType, Row


class NachaRecord:
    """
    A single parsed line.

    :param raw_text: The full line, without its line terminator.
    :param line_number: 1-based position of the line in the file.
    """
    RECORD_TYPE: ClassVar[RecordType] = RecordType.UNRECOGNIZED
    FIELDS: ClassVar[Layout] = LAYOUTS[RecordType.UNRECOGNIZED]

    def __init__(self, raw_text: str, line_number: int):
        self.raw_text = raw_text
        self.line_number = line_number

    def __repr__(self) -> str:
        return f"{type(self).__name__}(line_number={self.line_number}, raw_text={self.raw_text!r})"

    @property
    def record_type(self) -> RecordType:
        return self.RECORD_TYPE

    @property
    def type_code(self) -> str:
        return self.RECORD_TYPE.value

    def _spec(self, name: str) -> FieldSpec:
        try:
            return self.FIELDS[name]
        except KeyError:
            raise KeyError(f"No field '{name}' defined for {type(self).__name__}") from None

    def get_raw(self, name: str) -> str:
        return self._spec(name).get_raw(self.raw_text)

    def get_str(self, name: str) -> str:
        return self._spec(name).get_str(self.raw_text)

    def get_int(self, name: str) -> Optional[int]:
        """Integer value of a field, ``None`` when the field holds no number."""
        return self._spec(name).get_int(self.raw_text)

    def get_value(self, name: str) -> Any:
        return self._spec(name).get_value(self.raw_text)

    def to_row(self) -> Row:
        """
        Flatten the record into a row dict.

        :return: ``line_number`` and ``type_code`` followed by every field in
            layout order; numeric fields as ``int`` (or ``None``), others as stripped text.
        """
        row: Row = {"line_number": self.line_number, "type_code": self.type_code}
        for name, spec in self.FIELDS.items():
            row[name] = spec.get_value(self.raw_text)
        return row


class FileHeaderRecord(NachaRecord):
    RECORD_TYPE = RecordType.FILE_HEADER
    FIELDS = LAYOUTS[RecordType.FILE_HEADER]

    def __init__(self, raw_text: str, line_number: int):
        super().__init__(raw_text, line_number)
        self.control: Optional[FileControlRecord] = None


class FileControlRecord(NachaRecord):
    RECORD_TYPE = RecordType.FILE_CONTROL
    FIELDS = LAYOUTS[RecordType.FILE_CONTROL]

    def __init__(self, raw_text: str, line_number: int):
        super().__init__(raw_text, line_number)
        self.header: Optional[FileHeaderRecord] = None


class BatchHeaderRecord(NachaRecord):
    RECORD_TYPE = RecordType.BATCH_HEADER
    FIELDS = LAYOUTS[RecordType.BATCH_HEADER]

    def __init__(self, raw_text: str, line_number: int):
        super().__init__(raw_text, line_number)
        self.control: Optional[BatchControlRecord] = None
        self._entries: List[EntryDetailRecord] = []

    @property
    def entries(self) -> Tuple[EntryDetailRecord, ...]:
        return tuple(self._entries)


class BatchControlRecord(NachaRecord):
    RECORD_TYPE = RecordType.BATCH_CONTROL
    FIELDS = LAYOUTS[RecordType.BATCH_CONTROL]

    def __init__(self, raw_text: str, line_number: int):
        super().__init__(raw_text, line_number)
        self.header: Optional[BatchHeaderRecord] = None


class EntryDetailRecord(NachaRecord):
    RECORD_TYPE = RecordType.ENTRY_DETAIL
    FIELDS = LAYOUTS[RecordType.ENTRY_DETAIL]

    def __init__(self, raw_text: str, line_number: int):
        super().__init__(raw_text, line_number)
        self.batch_header: Optional[BatchHeaderRecord] = None
        self.addendum: Optional[EntryAddendumRecord] = None


class EntryAddendumRecord(NachaRecord):
    RECORD_TYPE = RecordType.ENTRY_ADDENDUM
    FIELDS = LAYOUTS[RecordType.ENTRY_ADDENDUM]

    def __init__(self, raw_text: str, line_number: int):
        super().__init__(raw_text, line_number)
        self.entry: Optional[EntryDetailRecord] = None


class PaddingRecord(NachaRecord):
    RECORD_TYPE = RecordType.PADDING
    FIELDS = LAYOUTS[RecordType.PADDING]


class UnrecognizedRecord(NachaRecord):
    """A line whose type code is not part of the format. Keeps the code it was found with."""
    RECORD_TYPE = RecordType.UNRECOGNIZED
    FIELDS = LAYOUTS[RecordType.UNRECOGNIZED]

    @property
    def type_code(self) -> str:
        return self.raw_text[:1]

"""
AchInput: reads a NACHA ACH file and exposes one table of rows per record type.

The file is decoded with :func:`read_text_auto`, parsed once with
:class:`NachaFileParser` and every record is flattened with
:meth:`NachaRecord.to_row`. Rows also carry link columns from the structural
pass (``batch_number`` and ``has_addendum`` on entries, ``entry_count`` on batch
headers, ``header_line_number`` on batch controls, ``entry_line_number`` on
addenda). YYMMDD date fields get an extra ``<name>_iso`` column.

Padding and unrecognized records have no fields and are not exported as tables.
"""
from __future__ import annotations
from typing import Any, Dict, Iterator, List, Optional

from .base import BaseInput
from ..engine.parser import NachaFileParser
from ..models.errors import NachaFileError
from ..models.records import (
    BatchControlRecord,
    BatchHeaderRecord,
    EntryAddendumRecord,
    EntryDetailRecord,
    NachaRecord,
)
from ..schema.jsonschema_validator import layout_to_json_schema
from ..schema.layouts import DATE_FIELDS
from ..types import RecordType, Row
from ..utils.date_parser import coerce_date
from ..utils.encoding import read_text_auto

EXPORTED_TYPES = (
    RecordType.FILE_HEADER,
    RecordType.BATCH_HEADER,
    RecordType.ENTRY_DETAIL,
    RecordType.ENTRY_ADDENDUM,
    RecordType.BATCH_CONTROL,
    RecordType.FILE_CONTROL,
)

_COMMON_COLUMNS: Dict[str, Any] = {
    "line_number": {"type": "integer"},
    "type_code": {"type": "string"},
}

_LINK_COLUMNS: Dict[RecordType, Dict[str, Any]] = {
    RecordType.ENTRY_DETAIL: {
        "batch_number": {"type": ["integer", "null"]},
        "has_addendum": {"type": "boolean"},
    },
    RecordType.ENTRY_ADDENDUM: {"entry_line_number": {"type": ["integer", "null"]}},
    RecordType.BATCH_HEADER: {"entry_count": {"type": "integer"}},
    RecordType.BATCH_CONTROL: {"header_line_number": {"type": ["integer", "null"]}},
}


def export_json_schema(record_type: RecordType) -> Dict[str, Any]:
    """JSON Schema of the export rows of one record type: the layout plus link and ISO date columns."""
    schema = layout_to_json_schema(record_type)
    props: Dict[str, Any] = dict(_COMMON_COLUMNS)
    props.update(schema["properties"])
    props.update(_LINK_COLUMNS.get(record_type, {}))
    for name in DATE_FIELDS.get(record_type, ()):
        props[f"{name}_iso"] = {"type": ["string", "null"]}
    schema["properties"] = props
    schema["required"] = list(_COMMON_COLUMNS) + schema["required"]
    return schema


def _export_numeric(raw: str) -> Any:
    """Strict numeric value for export: int for digits, None for blank, the text itself otherwise."""
    token = raw.strip()
    if token == "":
        return None
    if token.isascii() and token.isdigit():
        return int(token)
    return token


def _batch_number(batch: Optional[BatchHeaderRecord]) -> Optional[int]:
    return batch.get_int("batch_number") if batch is not None else None


def record_to_row(record: NachaRecord) -> Row:
    """
    Flatten a record into an export row with its link and ISO date columns.

    :param record: A parsed record (with links set by the parser).
    :return: Row dict.
    """
    row = record.to_row()
    for name, spec in record.FIELDS.items():
        if spec.numeric:
            row[name] = _export_numeric(spec.get_raw(record.raw_text))
    if isinstance(record, EntryDetailRecord):
        row["batch_number"] = _batch_number(record.batch_header)
        row["has_addendum"] = record.addendum is not None
    elif isinstance(record, EntryAddendumRecord):
        row["entry_line_number"] = record.entry.line_number if record.entry is not None else None
    elif isinstance(record, BatchHeaderRecord):
        row["entry_count"] = len(record.entries)
    elif isinstance(record, BatchControlRecord):
        row["header_line_number"] = record.header.line_number if record.header is not None else None
    for name in DATE_FIELDS.get(record.record_type, ()):
        try:
            row[f"{name}_iso"] = coerce_date(row[name])
        except ValueError:
            row[f"{name}_iso"] = None
    return row


class AchInput(BaseInput):
    """
    Input class for NACHA ACH files.

    :param source: Path to the ACH file.
    :param encoding_priority: Encodings to try when decoding the file, in order.
    """

    def __init__(self, source: str, encoding_priority: List[str] | None = None, **opts: Any):
        super().__init__(source, **opts)
        self.encoding_priority = encoding_priority
        self._parser: NachaFileParser | None = None

    @property
    def parser(self) -> NachaFileParser:
        """The parsed file model, built on first access."""
        if self._parser is None:
            self._parser = NachaFileParser(read_text_auto(self.source, self.encoding_priority))
        return self._parser

    def iter_rows(self, record_type: RecordType) -> Iterator[Row]:
        for record in self.parser.records_of(record_type):
            yield record_to_row(record)

    def get_tables(self) -> List[Dict[str, Any]]:
        """
        Return one table dict per record type present in the file, in layout order.

        :return: List of dicts with ``name`` (record type table name), ``record_type``,
            ``schema`` (JSON Schema of the rows) and ``rows``.
        :rtype: list[dict]
        """
        tables = []
        for rt in EXPORTED_TYPES:
            if self.parser.records_of(rt):
                tables.append({
                    "name": rt.table_name,
                    "record_type": rt,
                    "schema": export_json_schema(rt),
                    "rows": self.iter_rows(rt),
                })
        return tables

    def structural_errors(self) -> List[NachaFileError]:
        return list(self.parser.errors)

"""
Record layouts for NACHA ACH files.

Each record kind owns a fixed, ordered table of named fields. Positions are
1-based and inclusive, following https://achdevguide.nacha.org/ach-file-details.
Every layout covers the full 94 character record.

:data LAYOUTS: Read-only mapping of :class:`RecordType` to its field table.
:func get_layout: Look up a layout by record type or type code.
:func layout_as_fwf_spec: Export a layout as a fixed-width field spec dict.
"""
from __future__ import annotations
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple, Union

from .field_spec import FieldSpec
from ..types import RecordType

RECORD_LENGTH = 94

Layout = Mapping[str, FieldSpec]

# (name, start, end, numeric)
_FieldRow = Tuple[str, int, int, bool]

_FILE_HEADER: Tuple[_FieldRow, ...] = (
    ("record_type", 1, 1, True),
    ("priority_code", 2, 3, True),
    ("immediate_destination", 4, 13, False),
    ("immediate_origin", 14, 23, False),
    ("file_creation_date", 24, 29, False),
    ("file_creation_time", 30, 33, False),
    ("file_id_modifier", 34, 34, False),
    ("record_size", 35, 37, True),
    ("blocking_factor", 38, 39, True),
    ("format_code", 40, 40, False),
    ("immediate_destination_name", 41, 63, False),
    ("immediate_origin_name", 64, 86, False),
    ("reference_code", 87, 94, False),
)

_FILE_CONTROL: Tuple[_FieldRow, ...] = (
    ("record_type", 1, 1, True),
    ("batch_count", 2, 7, True),
    ("block_count", 8, 13, True),
    ("entry_addenda_count", 14, 21, True),
    ("entry_hash", 22, 31, False),
    ("total_debit_amount_cents", 32, 43, True),
    ("total_credit_amount_cents", 44, 55, True),
    ("reserved", 56, 94, False),
)

_BATCH_HEADER: Tuple[_FieldRow, ...] = (
    ("record_type", 1, 1, True),
    ("service_class_code", 2, 4, False),
    ("company_name", 5, 20, False),
    ("company_discretionary_data", 21, 40, False),
    ("company_id", 41, 50, False),
    ("sec_code", 51, 53, False),
    ("description", 54, 63, False),
    ("descriptive_date", 64, 69, False),
    ("effective_date", 70, 75, False),
    ("settlement_date", 76, 78, True),
    ("originator_status_code", 79, 79, False),
    ("originator_dfi_id", 80, 87, False),
    ("batch_number", 88, 94, True),
)

_BATCH_CONTROL: Tuple[_FieldRow, ...] = (
    ("record_type", 1, 1, True),
    ("service_class_code", 2, 4, False),
    ("entry_addenda_count", 5, 10, True),
    ("entry_hash", 11, 20, False),
    ("total_debit_amount_cents", 21, 32, True),
    ("total_credit_amount_cents", 33, 44, True),
    ("company_id", 45, 54, False),
    ("message_authentication_code", 55, 73, True),
    ("reserved", 74, 79, False),
    ("originator_dfi_id", 80, 87, False),
    ("batch_number", 88, 94, True),
)

_ENTRY_DETAIL: Tuple[_FieldRow, ...] = (
    ("record_type", 1, 1, True),
    ("transaction_code", 2, 3, True),
    ("receiving_dfi_id", 4, 11, False),
    ("check_digit", 12, 12, True),
    ("account_number", 13, 29, False),
    ("amount", 30, 39, True),
    ("identification_number", 40, 54, False),
    ("receiver_name", 55, 76, False),
    ("discretionary_data", 77, 78, False),
    ("addenda_record_indicator", 79, 79, True),
    ("trace_number", 80, 94, True),
)

_ENTRY_ADDENDUM: Tuple[_FieldRow, ...] = (
    ("record_type", 1, 1, True),
    ("type_code", 2, 3, True),
    ("payment_information", 4, 83, False),
    ("addenda_sequence_number", 84, 87, True),
    ("entry_sequence_number", 88, 94, True),
)

# YYMMDD fields checked by the ``ach-date`` format during export validation.
DATE_FIELDS: Mapping[RecordType, Tuple[str, ...]] = MappingProxyType({
    RecordType.FILE_HEADER: ("file_creation_date",),
    RecordType.BATCH_HEADER: ("effective_date",),
})


def _build(rows: Tuple[_FieldRow, ...]) -> Layout:
    return MappingProxyType({name: FieldSpec(start, end, numeric) for name, start, end, numeric in rows})


_EMPTY: Layout = MappingProxyType({})

LAYOUTS: Mapping[RecordType, Layout] = MappingProxyType({
    RecordType.FILE_HEADER: _build(_FILE_HEADER),
    RecordType.FILE_CONTROL: _build(_FILE_CONTROL),
    RecordType.BATCH_HEADER: _build(_BATCH_HEADER),
    RecordType.BATCH_CONTROL: _build(_BATCH_CONTROL),
    RecordType.ENTRY_DETAIL: _build(_ENTRY_DETAIL),
    RecordType.ENTRY_ADDENDUM: _build(_ENTRY_ADDENDUM),
    RecordType.PADDING: _EMPTY,
    RecordType.UNRECOGNIZED: _EMPTY,
})


def resolve_record_type(record_type: Union[RecordType, str]) -> RecordType:
    """
    Resolve a record type given as a :class:`RecordType`, its code (``"1"``, ``"5"``, ...)
    or its table name (``"entry_detail"``).

    :raises KeyError: If no record type matches.
    """
    if isinstance(record_type, RecordType):
        return record_type
    for rt in RecordType:
        if record_type in (rt.value, rt.table_name):
            return rt
    raise KeyError(f"Unknown record type: {record_type}")


def get_layout(record_type: Union[RecordType, str]) -> Layout:
    return LAYOUTS[resolve_record_type(record_type)]


def layout_as_fwf_spec(record_type: Union[RecordType, str]) -> Dict[str, Any]:
    layout = get_layout(record_type)
    return {
        "encoding": "ascii",
        "record_length": RECORD_LENGTH,
        "fields": [spec.to_fwf_field(name) for name, spec in layout.items()],
    }

from __future__ import annotations
from typing import Any, Dict, Optional, Union
from jsonschema import Draft202012Validator, FormatChecker, ValidationError

from .layouts import DATE_FIELDS, get_layout, resolve_record_type
from ..types import RecordType, Row
from ..utils.date_parser import ACH_DATE_FORMAT, parse_date


def layout_to_json_schema(record_type: Union[RecordType, str]) -> Dict[str, Any]:
    """
    Build a JSON Schema for the rows of one record type.

    Numeric fields hold integers, or null when blank; any other text fails.
    Text fields must be strings no wider than the field. Date fields carry
    the ``ach-date`` format.
    """
    rt = resolve_record_type(record_type)
    layout = get_layout(rt)
    date_fields = DATE_FIELDS.get(rt, ())
    props: Dict[str, Any] = {}
    for name, spec in layout.items():
        if spec.numeric:
            props[name] = {"type": ["integer", "null"]}
        else:
            props[name] = {"type": "string", "maxLength": spec.width}
            if name in date_fields:
                props[name]["format"] = "ach-date"
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": props,
        "required": list(layout),
    }


class Validator:
    def __init__(self, schema: Dict[str, Any]):
        self.fc = FormatChecker()
        self._register_formats()
        self._validator = Draft202012Validator(schema, format_checker=self.fc)

    @classmethod
    def for_record_type(cls, record_type: Union[RecordType, str]) -> "Validator":
        return cls(layout_to_json_schema(record_type))

    def _register_formats(self) -> None:
        @self.fc.checks("ach-date")
        def _is_ach_date(value: object) -> bool:
            # blank dates are allowed
            if not isinstance(value, str) or value == "":
                return True
            return parse_date(value, ACH_DATE_FORMAT)

    def validate_row(self, row: Row) -> Optional[ValidationError]:
        try:
            self._validator.validate(row)
            return None
        except ValidationError as e:
            return e

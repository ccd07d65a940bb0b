from __future__ import annotations
from typing import Dict, Type

from ..inputs.base import BaseInput
from ..models.records import (
    BatchControlRecord,
    BatchHeaderRecord,
    EntryAddendumRecord,
    EntryDetailRecord,
    FileControlRecord,
    FileHeaderRecord,
    NachaRecord,
)
from ..outputs.base import BaseOutput

PADDING_PREFIX = "999"

RECORD_TYPE_MAP: Dict[str, Type[NachaRecord]] = {
    "1": FileHeaderRecord,
    "5": BatchHeaderRecord,
    "6": EntryDetailRecord,
    "7": EntryAddendumRecord,
    "8": BatchControlRecord,
    "9": FileControlRecord,
}


def get_record_cls(type_code: str) -> Type[NachaRecord]:
    """
    Return the record class for a one-character type code.
    Padding (``999`` prefix) is classified by the parser before this lookup.
    """
    try:
        return RECORD_TYPE_MAP[type_code]
    except KeyError:
        raise KeyError(f"Unknown record type: {type_code!r}") from None


def get_input_cls(kind: str) -> Type[BaseInput]:
    if kind == "ach":
        from ..inputs.ach_input import AchInput
        return AchInput
    raise KeyError(f"Unknown input kind: {kind}")


def get_output_cls(kind: str) -> Type[BaseOutput]:
    if kind == "parquet":
        from ..outputs.parquet_output import PQOutput
        return PQOutput
    raise KeyError(f"Unknown output kind: {kind}")

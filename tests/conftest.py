from __future__ import annotations
from pathlib import Path
from typing import Any, Callable
import pytest

from nacho.schema.layouts import get_layout
from nacho.types import RecordType

ROOT = Path(__file__).resolve().parent
DATA_DIR = ROOT / "test-files"


@pytest.fixture(scope="session")
def data_dir() -> Path:
    assert DATA_DIR.exists(), f"Missing test data dir: {DATA_DIR}"
    return DATA_DIR


@pytest.fixture
def tmp_out(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir(parents=True, exist_ok=True)
    return d


def make_line(record_type: RecordType, **values: Any) -> str:
    """Build a 94 character record: numeric fields zero-filled, text fields space-padded."""
    parts = []
    for name, spec in get_layout(record_type).items():
        if name == "record_type":
            parts.append(record_type.value)
            continue
        value = values.get(name)
        if spec.numeric:
            parts.append(str(value if value is not None else 0).rjust(spec.width, "0")[:spec.width])
        else:
            parts.append(str(value if value is not None else "").ljust(spec.width)[:spec.width])
    return "".join(parts)


@pytest.fixture
def ach_line() -> Callable[..., str]:
    return make_line


@pytest.fixture
def single_batch_text() -> str:
    """A well-formed file: one batch, two entries with an addendum, one without, one padding line."""
    lines = [
        make_line(RecordType.FILE_HEADER, priority_code=1, immediate_destination=" 091000019",
                  file_creation_date="261018", record_size=94, blocking_factor=10, format_code="1"),
        make_line(RecordType.BATCH_HEADER, service_class_code="200", company_name="ACME CORP",
                  sec_code="PPD", effective_date="261019", batch_number=1),
        make_line(RecordType.ENTRY_DETAIL, transaction_code=22, amount=1500, receiver_name="JANE DOE",
                  addenda_record_indicator=1, trace_number=1),
        make_line(RecordType.ENTRY_ADDENDUM, type_code=5, payment_information="FIRST",
                  addenda_sequence_number=1, entry_sequence_number=1),
        make_line(RecordType.ENTRY_DETAIL, transaction_code=22, amount=2500, receiver_name="JOHN ROE",
                  addenda_record_indicator=1, trace_number=2),
        make_line(RecordType.ENTRY_ADDENDUM, type_code=5, payment_information="SECOND",
                  addenda_sequence_number=1, entry_sequence_number=2),
        make_line(RecordType.ENTRY_DETAIL, transaction_code=27, amount=4000, receiver_name="ALEX POE",
                  trace_number=3),
        make_line(RecordType.BATCH_CONTROL, service_class_code="200", entry_addenda_count=5, batch_number=1),
        make_line(RecordType.FILE_CONTROL, batch_count=1, block_count=1, entry_addenda_count=5),
        "9" * 94,
    ]
    return "\n".join(lines) + "\n"

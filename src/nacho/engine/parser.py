"""
NachaFileParser: builds a validated record model from the text of an ACH file.

Parsing happens entirely in the constructor. The text is normalised and split
into lines, then a single pass over the lines classifies each one into a record
(:meth:`NachaFileParser.build_record`) and links it into the file / batch / entry
hierarchy while checking the record ordering (:meth:`NachaFileParser._link`).

Malformed content never raises. Every problem becomes a :class:`NachaFileError`
in :attr:`NachaFileParser.errors`, in input line order, and the model is always
complete. After construction the model is read-only.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging
import re

from .registry import PADDING_PREFIX, get_record_cls
from ..models.errors import NachaFileError
from ..models.records import (
    BatchControlRecord,
    BatchHeaderRecord,
    EntryAddendumRecord,
    EntryDetailRecord,
    FileControlRecord,
    FileHeaderRecord,
    NachaRecord,
    PaddingRecord,
    UnrecognizedRecord,
)
from ..types import RecordType

logger = logging.getLogger(__name__)

# whitespace and byte order marks at either end of the text
_TRIM_RE = re.compile(r"\A[\s\ufeff]+|[\s\ufeff]+\Z")


def split_lines(text: str) -> List[str]:
    """
    Normalise CR-LF to LF, strip the whole text (a byte order mark counts as
    whitespace) and split it on LF.

    Individual lines are not trimmed. Empty text gives a single empty line.
    """
    return _TRIM_RE.sub("", text.replace("\r\n", "\n")).split("\n")


@dataclass
class ScanState:
    """Transient state of the validation pass: the open batch and its latest entry."""
    current_batch: Optional[BatchHeaderRecord] = None
    current_entry: Optional[EntryDetailRecord] = None


class NachaFileParser:
    """
    Parse and structurally validate a NACHA ACH file.

    :param raw_text: The whole file as text.

    Attributes exposed after construction:

    * ``raw_text``, ``lines``, ``records`` (one record per line)
    * ``file_header`` (``None`` if the file has none)
    * ``batch_headers``, ``entries`` (flattened, in file order)
    * ``errors`` (structural problems, in line order)
    * ``scan_state`` (state left open at the end of the pass)
    """

    def __init__(self, raw_text: str):
        self.raw_text = raw_text
        self._lines = split_lines(raw_text)
        self._records: List[NachaRecord] = []
        self._errors: List[NachaFileError] = []
        self.file_header: Optional[FileHeaderRecord] = None
        self._batch_headers: List[BatchHeaderRecord] = []
        self._entries: List[EntryDetailRecord] = []

        state = ScanState()
        for line_number, line in enumerate(self._lines, start=1):
            record = self.build_record(line, line_number)
            self._records.append(record)
            self._link(record, state)
        self.scan_state = state
        logger.debug(
            "Parsed %d lines into %d records, %d batches, %d entries, %d errors",
            len(self._lines), len(self._records), len(self._batch_headers), len(self._entries), len(self._errors),
        )

    # ---------------- Read-only views -------------
    @property
    def lines(self) -> Tuple[str, ...]:
        return tuple(self._lines)

    @property
    def records(self) -> Tuple[NachaRecord, ...]:
        return tuple(self._records)

    @property
    def batch_headers(self) -> Tuple[BatchHeaderRecord, ...]:
        return tuple(self._batch_headers)

    @property
    def entries(self) -> Tuple[EntryDetailRecord, ...]:
        return tuple(self._entries)

    @property
    def errors(self) -> Tuple[NachaFileError, ...]:
        return tuple(self._errors)

    def records_of(self, record_type: RecordType) -> Tuple[NachaRecord, ...]:
        return tuple(r for r in self._records if r.record_type is record_type)

    def summary(self) -> Dict[str, Any]:
        """Counts of the main parts of the file, for reporting."""
        counts = {rt.table_name: 0 for rt in RecordType}
        for record in self._records:
            counts[record.record_type.table_name] += 1
        return {
            "records": len(self._records),
            "batches": len(self._batch_headers),
            "entries": len(self._entries),
            "addenda": sum(1 for e in self._entries if e.addendum is not None),
            "padding": counts[RecordType.PADDING.table_name],
            "unrecognized": counts[RecordType.UNRECOGNIZED.table_name],
            "errors": len(self._errors),
            "by_type": counts,
        }

    # ---------------- Construction ----------------
    def add_error(
            self,
            message: str,
            *,
            line: Optional[str] = None,
            line_number: Optional[int] = None,
            record: Optional[NachaRecord] = None,
    ) -> None:
        error = NachaFileError(message, line=line, line_number=line_number, record=record)
        logger.debug("Structural error: %s", error)
        self._errors.append(error)

    def build_record(self, line: str, line_number: int) -> NachaRecord:
        """
        Classify one line and build its record.

        A ``999`` prefix is padding regardless of the rest of the line. Otherwise
        the first character selects the record class; an unknown code gives an
        :class:`UnrecognizedRecord` and an error.

        :param line: The raw line.
        :param line_number: 1-based line number.
        :return: The record for the line.
        """
        if line.startswith(PADDING_PREFIX):
            return PaddingRecord(line, line_number)

        type_code = line[:1]
        try:
            record_cls = get_record_cls(type_code)
        except KeyError:
            record = UnrecognizedRecord(line, line_number)
            self.add_error(f'unrecognized record type "{type_code}"', record=record)
            return record
        return record_cls(line, line_number)

    # ---------------- Structural validation -------
    def _link(self, record: NachaRecord, state: ScanState) -> None:
        handler = self._HANDLERS[record.record_type]
        handler(self, record, state)

    def _on_file_header(self, record: FileHeaderRecord, state: ScanState) -> None:
        if self.file_header is None:
            self.file_header = record
        else:
            self.add_error("found more than one file header record", record=record)

    def _on_file_control(self, record: FileControlRecord, state: ScanState) -> None:
        if self.file_header is None:
            self.add_error("file control not preceeded by file header", record=record)
        elif self.file_header.control is None:
            self.file_header.control = record
            record.header = self.file_header
        else:
            self.add_error("found more than one file control record", record=record)

    def _on_batch_header(self, record: BatchHeaderRecord, state: ScanState) -> None:
        self._batch_headers.append(record)
        if self.file_header is None:
            self.add_error("batch header not preceeded by file header", record=record)
        if state.current_batch is None:
            state.current_batch = record
        else:
            self.add_error("starting a new batch before end of previous batch", record=record)

    def _on_batch_control(self, record: BatchControlRecord, state: ScanState) -> None:
        if state.current_batch is None:
            self.add_error("batch control not preceeded by batch header", record=record)
            return
        state.current_batch.control = record
        record.header = state.current_batch
        state.current_batch = None
        state.current_entry = None

    def _on_entry_detail(self, record: EntryDetailRecord, state: ScanState) -> None:
        if state.current_batch is None:
            self.add_error("entry detail not preceeded by batch header", record=record)
            return
        self._entries.append(record)
        state.current_batch._entries.append(record)
        record.batch_header = state.current_batch
        state.current_entry = record

    def _on_entry_addendum(self, record: EntryAddendumRecord, state: ScanState) -> None:
        if state.current_entry is None:
            # Same wording as an orphan entry; kept for compatibility with existing reports.
            self.add_error("entry detail not preceeded by batch header", record=record)
        elif state.current_entry.addendum is not None:
            self.add_error("more than one addendum for entry", record=record)
        else:
            state.current_entry.addendum = record
            record.entry = state.current_entry

    def _on_inert(self, record: NachaRecord, state: ScanState) -> None:
        """Padding carries no structure; unrecognized records were reported when built."""

    _HANDLERS: Dict[RecordType, Callable[["NachaFileParser", Any, ScanState], None]] = {
        RecordType.FILE_HEADER: _on_file_header,
        RecordType.FILE_CONTROL: _on_file_control,
        RecordType.BATCH_HEADER: _on_batch_header,
        RecordType.BATCH_CONTROL: _on_batch_control,
        RecordType.ENTRY_DETAIL: _on_entry_detail,
        RecordType.ENTRY_ADDENDUM: _on_entry_addendum,
        RecordType.PADDING: _on_inert,
        RecordType.UNRECOGNIZED: _on_inert,
    }


def parse_ach(text: str) -> NachaFileParser:
    """Parse ACH file text into a validated, read-only model."""
    return NachaFileParser(text)

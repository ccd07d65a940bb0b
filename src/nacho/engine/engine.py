from __future__ import annotations
from typing import Any, Dict, Iterable
import logging

from .registry import get_input_cls, get_output_cls
from ..schema.jsonschema_validator import Validator
from ..types import Row, RowResult

logger = logging.getLogger(__name__)


class Engine:
    def __init__(
            self,
            input_kind: str = "ach",
            output_kind: str = "parquet",
            output_mode: str = "vectorized",
            output_chunk_size: int = 50_000,
            compression: str = "snappy",
            **input_opts: Any,
    ) -> None:
        """Initialize the export engine.

        Wires together the selected input and output plugins. Structural errors
        found while parsing are reported to the output as they are; rows are
        validated against their table's JSON Schema and either written or
        quarantined.

        :param input_kind: Registered input kind (``"ach"``).
        :param output_kind: Registered output kind (``"parquet"``).
        :param output_mode: ``"vectorized"`` or ``"chunked"`` Parquet writing.
        :param output_chunk_size: Row threshold for chunked flushes.
        :param compression: Parquet compression codec.
        :param input_opts: Additional keyword options forwarded to the input class
            (e.g. ``encoding_priority``).
        """
        self.input_opts = input_opts
        self.output_opts: Dict[str, Any] = {}
        if output_kind == "parquet":
            self.output_opts["mode"] = output_mode
            self.output_opts["chunk_size"] = output_chunk_size
            self.output_opts["compression"] = compression
        self.Input = get_input_cls(input_kind)
        self.Output = get_output_cls(output_kind)

    @staticmethod
    def _process_rows(rows: Iterable[Row], table_name: str, validator: Validator) -> Iterable[RowResult]:
        for row in rows:
            row = dict(row, _table=table_name)
            err = validator.validate_row(row)
            if err is None:
                yield RowResult(row=row, error=None)
            else:
                field_path = ".".join(str(p) for p in err.absolute_path) or "<row>"
                yield RowResult(row=row, error=ValueError(f"Field '{field_path}': {err.message}"))

    def run(self, source: str, dest: str) -> Dict[str, int]:
        """Execute parse → validate → output pipeline.

        :param source: Path of the ACH file.
        :param dest: Output directory.
        :return: The output's counters (``read``, ``kept``, ``rejected``, ``structural_errors``).
        """
        input_plugin = self.Input(source, **self.input_opts)
        output_plugin = self.Output(dest, schema=None, **self.output_opts)

        output_plugin.open()
        try:
            for error in input_plugin.structural_errors():
                output_plugin.report(error)
            for table_descriptor in input_plugin.get_tables():
                table_name = table_descriptor["name"]
                table_schema = table_descriptor["schema"]
                output_plugin.register_table(table_name, table_schema)
                validator = Validator(table_schema)
                for rr in self._process_rows(table_descriptor["rows"], table_name, validator):
                    if rr.error is None:
                        output_plugin.write(rr.row)
                    else:
                        output_plugin.quarantine(rr)
        finally:
            output_plugin.close()
        logger.info("Exported %s to %s: %s", source, dest, output_plugin.counters)
        return dict(output_plugin.counters)

from __future__ import annotations

"""Parquet output writer.

Creates one Parquet file per record type table (``file_header.parquet``,
``entry_detail.parquet``, ...). Default mode is vectorized via ``polars``.
Optional ``mode='chunked'`` streams row batches using ``pyarrow`` append
writes, for very large files.

Column types come from the per-table JSON Schemas registered with
:meth:`PQOutput.register_table` (``integer`` -> int64, ``string`` -> utf8,
``boolean`` -> bool), so a table always has the same columns whatever its rows
contain.

Artifacts written under ``dest``:

* ``<table>.parquet`` – one per record type present
* ``_quarantine.jsonl`` – one JSON object per rejected row (may be empty)
* ``_errors.jsonl`` – one JSON object per structural error (may be empty)
* ``_manifest.json`` – summary counters: ``read``, ``kept``, ``rejected``, ``structural_errors``
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Literal

from ..models.errors import NachaFileError
from ..outputs.base import BaseOutput
from ..types import Row, RowResult
import pyarrow as pa
import pyarrow.parquet as pq
import polars as pl

logger = logging.getLogger(__name__)

_ARROW_TYPES = {"integer": pa.int64(), "string": pa.string(), "boolean": pa.bool_()}
_POLARS_TYPES = {"integer": pl.Int64, "string": pl.Utf8, "boolean": pl.Boolean}


def _json_type(prop: Dict[str, Any]) -> str:
    t = prop.get("type", "string")
    if isinstance(t, list):
        t = next((x for x in t if x != "null"), "string")
    return t if t in _ARROW_TYPES else "string"


class PQOutput(BaseOutput):
    """Parquet output writer with per-table file emission.

    Modes:
      * ``vectorized`` (default): buffer rows in-memory then build a Polars
        DataFrame per table and write with ``DataFrame.write_parquet``.
      * ``chunked``: flush row buffers to Parquet incrementally using a
        ``pyarrow.parquet.ParquetWriter`` once ``chunk_size`` is reached.

    :param dest: Output directory path (created if missing).
    :param schema: Optional dict with a ``tables`` mapping of table name to JSON Schema.
    :param mode: ``vectorized`` or ``chunked``.
    :param chunk_size: Row count threshold for flushing in ``chunked`` mode.
    :param compression: Parquet compression codec (default ``snappy``).
    """

    def __init__(
        self,
        dest: str,
        schema: dict | None = None,
        *,
        mode: str = "vectorized",
        chunk_size: int = 50_000,
        compression: str = "snappy",
        **kwargs: Any,
    ):
        super().__init__(dest, schema, **kwargs)
        allowed_comp: set[str] = {"snappy", "gzip", "brotli", "zstd", "lz4", "uncompressed"}
        if compression not in allowed_comp:
            raise ValueError(f"Unsupported compression '{compression}'. Allowed: {sorted(allowed_comp)}")
        self.compression: Literal["snappy", "gzip", "brotli", "zstd", "lz4", "uncompressed"] = compression  # type: ignore[assignment]
        self.mode = mode.lower()
        if self.mode not in {"vectorized", "chunked"}:
            raise ValueError("mode must be 'vectorized' or 'chunked'")
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        self.chunk_size = chunk_size
        self.table_schemas: Dict[str, Dict[str, Any]] = dict(self.schema.get("tables") or {})
        self.row_buffers: Dict[str, List[Row]] = {}
        self._writers: Dict[str, pq.ParquetWriter] = {}
        self._arrow_schemas: Dict[str, pa.Schema] = {}

    def open(self) -> None:  # type: ignore[override]
        self.output_dir = Path(self.dest)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.quarantine_file_path = self.output_dir / "_quarantine.jsonl"
        self.quarantine_handle = self.quarantine_file_path.open("w", encoding="utf-8")
        self.errors_file_path = self.output_dir / "_errors.jsonl"
        self.errors_handle = self.errors_file_path.open("w", encoding="utf-8")
        self.counters = {"read": 0, "kept": 0, "rejected": 0, "structural_errors": 0}

    def register_table(self, name: str, json_schema: Dict[str, Any]) -> None:
        """Declare the JSON Schema used to type the columns of ``name``."""
        self.table_schemas[name] = json_schema

    # ---------------- Public write API -----------
    def write(self, row: Row) -> None:  # type: ignore[override]
        self.counters["read"] += 1
        self.counters["kept"] += 1
        table_name = row.get("_table") or "data"
        clean_row = {k: v for k, v in row.items() if not k.startswith("_")}
        buf = self.row_buffers.setdefault(table_name, [])
        buf.append(clean_row)
        if self.mode == "chunked" and len(buf) >= self.chunk_size:
            self._flush_table_chunk(table_name)

    def quarantine(self, rr: RowResult) -> None:  # type: ignore[override]
        self.counters["read"] += 1
        self.counters["rejected"] += 1
        payload = {"row": rr.row, "error": str(rr.error)}
        self.quarantine_handle.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")

    def report(self, error: NachaFileError) -> None:  # type: ignore[override]
        self.counters["structural_errors"] += 1
        self.errors_handle.write(json.dumps(error.to_dict(), ensure_ascii=False) + "\n")

    # ---------------- Internal helpers ------------
    @staticmethod
    def _sanitize_table_name(name: str) -> str:
        base = Path(name).name
        return base.replace("/", "_").replace("\\", "_")

    def _columns(self, table_name: str, rows: List[Row]) -> Dict[str, str]:
        """Ordered column -> JSON type for a table; unknown columns default to string."""
        props = (self.table_schemas.get(table_name) or {}).get("properties") or {}
        cols = {name: _json_type(prop) for name, prop in props.items()}
        for row in rows:
            for k in row:
                cols.setdefault(k, "string")
        return cols

    def _arrow_schema(self, table_name: str, rows: List[Row]) -> pa.Schema:
        schema = self._arrow_schemas.get(table_name)
        if schema is None:
            cols = self._columns(table_name, rows)
            schema = pa.schema([(name, _ARROW_TYPES[t]) for name, t in cols.items()])
            self._arrow_schemas[table_name] = schema
        return schema

    def _out_path(self, table_name: str) -> Path:
        return self.output_dir / f"{self._sanitize_table_name(table_name)}.parquet"

    def _flush_table_chunk(self, table_name: str) -> None:
        rows = self.row_buffers.get(table_name)
        if not rows:
            return
        arrow_schema = self._arrow_schema(table_name, rows)
        writer = self._writers.get(table_name)
        if writer is None:
            writer = pq.ParquetWriter(self._out_path(table_name), arrow_schema, compression=self.compression)
            self._writers[table_name] = writer
        table_pa = pa.Table.from_pylist(rows, schema=arrow_schema)
        writer.write_table(table_pa)
        logger.debug("Flushed %d rows to %s", len(rows), table_name)
        rows.clear()

    def _flush_all_chunked(self) -> None:
        for table_name in list(self.row_buffers.keys()):
            self._flush_table_chunk(table_name)
        for writer in self._writers.values():
            writer.close()
        self._writers.clear()

    def _flush_vectorized(self) -> None:
        for table_name, rows in self.row_buffers.items():
            if not rows:
                continue
            cols = self._columns(table_name, rows)
            data = [{name: row.get(name) for name in cols} for row in rows]
            df = pl.DataFrame(data, schema={name: _POLARS_TYPES[t] for name, t in cols.items()})
            # polars may hand back large or view string types; store the registered ones
            table_pa = df.to_arrow().cast(self._arrow_schema(table_name, rows))
            pq.write_table(table_pa, self._out_path(table_name), compression=self.compression)
            logger.debug("Wrote %d rows to %s", df.height, table_name)
            rows.clear()

    def _flush_parquet(self) -> None:
        if self.mode == "chunked":
            self._flush_all_chunked()
        else:
            self._flush_vectorized()

    # ---------------- Lifecycle -------------------
    def close(self) -> None:  # type: ignore[override]
        try:
            self._flush_parquet()
        finally:
            for handle in (self.quarantine_handle, self.errors_handle):
                if not handle.closed:
                    handle.close()
            manifest = self.output_dir / "_manifest.json"
            manifest.write_text(json.dumps(self.counters, indent=2), encoding="utf-8")

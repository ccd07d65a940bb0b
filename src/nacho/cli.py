from __future__ import annotations
import argparse, json, logging, sys
from typing import List

from .engine.engine import Engine
from .engine.parser import NachaFileParser
from .schema.layouts import layout_as_fwf_spec
from .types import RecordType
from .utils.encoding import DEFAULT_ENCODINGS, read_text_auto
from . import __version__


def _print_report(parser: NachaFileParser, as_json: bool) -> None:
    if as_json:
        payload = {"summary": parser.summary(), "errors": [e.to_dict() for e in parser.errors]}
        print(json.dumps(payload, indent=2))
        return
    summary = parser.summary()
    print(
        f"{summary['records']} records, {summary['batches']} batches, "
        f"{summary['entries']} entries, {summary['addenda']} addenda, {summary['padding']} padding"
    )
    print(f"{summary['errors']} errors found")
    for error in parser.errors:
        print(f"  {error}")


def main(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser("nacho")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for diagnostics written to stderr",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    inspect = sub.add_parser("inspect", help="Parse an ACH file and report structural errors")
    inspect.add_argument("source")
    inspect.add_argument("--encoding-priority", nargs="*", default=list(DEFAULT_ENCODINGS))
    inspect.add_argument("--json", action="store_true", help="Print the report as JSON")

    export = sub.add_parser("export", help="Write the records of an ACH file to Parquet")
    export.add_argument("source")
    export.add_argument("--dest", required=True)
    export.add_argument("--encoding-priority", nargs="*", default=list(DEFAULT_ENCODINGS))
    export.add_argument("--mode", choices=["vectorized", "chunked"], default="vectorized")
    export.add_argument("--chunk-size", type=int, default=50_000)
    export.add_argument("--compression", default="snappy")

    layout = sub.add_parser("layout", help="Print the field layout of a record type as JSON")
    layout.add_argument(
        "record_type",
        choices=[rt.table_name for rt in RecordType if rt not in (RecordType.PADDING, RecordType.UNRECOGNIZED)],
    )

    args = p.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.cmd == "inspect":
        parser = NachaFileParser(read_text_auto(args.source, args.encoding_priority))
        _print_report(parser, args.json)
        return 1 if parser.errors else 0

    if args.cmd == "export":
        eng = Engine(
            input_kind="ach",
            output_kind="parquet",
            output_mode=args.mode,
            output_chunk_size=args.chunk_size,
            compression=args.compression,
            encoding_priority=args.encoding_priority,
        )
        counters = eng.run(args.source, args.dest)
        print(json.dumps(counters))
        return 1 if counters["structural_errors"] or counters["rejected"] else 0

    if args.cmd == "layout":
        print(json.dumps(layout_as_fwf_spec(args.record_type), indent=2))
        return 0

    return 2  # pragma: no cover


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

#!/usr/bin/env python3
"""Parse get-result JSON payloads and print what was assembled.

Usage::

    python3 scripts/parse_get_result.py response.json
    python3 scripts/parse_get_result.py responses.jsonl --jsonl --report-out out.json
    python3 scripts/parse_get_result.py response.json --options parser_options.json -v

Exit code 0 when every payload parses, 1 otherwise.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from getresult.config import ParserOptions
from getresult.errors import ParsingError
from getresult.get_result import GetResult
from getresult.io_utils import dumps_json, read_payloads, save_json
from getresult.parser import parse_get_result_json

log = logging.getLogger("parse_get_result")


def summarize(result: GetResult) -> dict[str, Any]:
    """Flatten a GetResult into plain JSON-encodable values."""
    return {
        "index": result.index,
        "id": result.id,
        "version": result.version,
        "seq_no": result.seq_no,
        "primary_term": result.primary_term,
        "found": result.found,
        "source": result.source_as_map(),
        "fields": {name: list(f.values) for name, f in result.document_fields.items()},
        "meta_fields": {name: list(f.values) for name, f in result.meta_fields.items()},
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Get-result token parser")
    parser.add_argument("input", type=Path, help="JSON file (or JSONL with --jsonl)")
    parser.add_argument("--jsonl", action="store_true", help="One get result per line")
    parser.add_argument("--options", type=Path, default=None, help="parser_options.json")
    parser.add_argument("--report-out", type=Path, default=None)
    parser.add_argument("--json", action="store_true", help="Print full records, not counts")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    options = ParserOptions.from_json(args.options) if args.options else ParserOptions()
    payloads = read_payloads(args.input, jsonl=args.jsonl)
    log.info("Parsing %d payload(s) from %s", len(payloads), args.input)

    records: list[dict[str, Any]] = []
    errors: list[dict[str, Any]] = []
    for number, payload in enumerate(payloads, start=1):
        try:
            result = parse_get_result_json(payload, options)
        except ParsingError as exc:
            log.error("Payload %d: %s", number, exc)
            errors.append({"payload": number, "error": str(exc)})
            continue
        records.append(summarize(result))

    report = {
        "input": str(args.input),
        "parsed": len(records),
        "failed": len(errors),
        "errors": errors,
        "records": records,
    }
    if args.report_out is not None:
        save_json(report, args.report_out)
    if args.json:
        print(dumps_json(report))
    else:
        print(
            dumps_json(
                {
                    "parsed": report["parsed"],
                    "failed": report["failed"],
                    "found": sum(1 for r in records if r["found"] is True),
                    "report_out": str(args.report_out) if args.report_out else None,
                },
            ),
        )
    return 1 if errors else 0


if __name__ == "__main__":
    raise SystemExit(main())

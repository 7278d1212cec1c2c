"""Command‑line interface wrapper around :pyfunc:`subset_optimizer.optimize_batch`."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from . import constants as C
from .certificate import certify
from .errors import InvalidInput, OptimizerError
from .models import Row
from .optimizer import optimize_batch
from .rows_io import read_csv_rows, rows_from_json, validate_rows

__all__ = ["main"]

logger = logging.getLogger(__name__)


def _parse_cli(argv: list[str] | None = None) -> argparse.Namespace:  # noqa: D401 – imperative mood
    parser = argparse.ArgumentParser(
        description="Pick, per row, the candidates whose sum comes closest to the target without exceeding it"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--csv", help="Header-less CSV: target then up to 12 candidates per line ('-' for stdin)")
    source.add_argument("--json", help="JSON rows: [{target, candidates}] or {rows: [...]} ('-' for stdin)")
    source.add_argument("--demo", action="store_true", help="Optimize the built-in demo rows")
    parser.add_argument("--exact", action="store_true", help="Use exact rational arithmetic for decimal inputs")
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help=f"Thread pool size for batch optimization (default: ${C.WORKERS_ENV_VAR} or sequential)",
    )
    parser.add_argument("--verify", action="store_true", help="Attach a brute-force optimality certificate to each row")
    parser.add_argument("--strict", action="store_true", help="Fail if any CSV record had to be skipped")
    parser.add_argument("--chart", help="Write a PNG bar chart of targets vs achieved sums")
    parser.add_argument("--out", help="Write JSON output to file")
    parser.add_argument(
        "--log-level",
        choices=["WARNING", "INFO", "DEBUG"],
        default=C.DEFAULT_LOG_LEVEL,
        help="Logging level for subset_optimizer",
    )
    return parser.parse_args(argv)


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name)
    pkg_logger = logging.getLogger("subset_optimizer")
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(logging.BASIC_FORMAT))
    handler.setLevel(level)
    pkg_logger.addHandler(handler)
    pkg_logger.propagate = False
    pkg_logger.setLevel(level)


def _resolve_workers(value: int | None) -> int | None:
    if value is not None:
        if value < 1:
            raise InvalidInput(f"--workers must be at least 1, got {value}")
        return value
    raw = os.environ.get(C.WORKERS_ENV_VAR, "").strip()
    if not raw:
        return None
    try:
        workers = int(raw)
    except ValueError:
        raise InvalidInput(f"{C.WORKERS_ENV_VAR} must be an integer, got {raw!r}")
    if workers < 1:
        raise InvalidInput(f"{C.WORKERS_ENV_VAR} must be at least 1, got {workers}")
    return workers


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text("utf-8")


def _load_rows(ns: argparse.Namespace) -> list[Row]:
    if ns.demo:
        return rows_from_json(C.DEMO_ROWS, exact=ns.exact)
    if ns.json:
        try:
            payload = json.loads(_read_text(ns.json))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidInput(f"Invalid JSON: {exc}") from exc
        return rows_from_json(payload, exact=ns.exact)

    if ns.csv == "-":
        rows, skipped = read_csv_rows(sys.stdin, exact=ns.exact)
    else:
        with open(ns.csv, newline="", encoding="utf-8") as fh:
            rows, skipped = read_csv_rows(fh, exact=ns.exact)
    if skipped and ns.strict:
        details = "; ".join(f"line {s.line}: {s.message}" for s in skipped)
        raise InvalidInput(f"{len(skipped)} invalid CSV record(s): {details}")
    return rows


def _run(ns: argparse.Namespace) -> dict[str, Any]:
    rows = _load_rows(ns)
    report = validate_rows(rows)
    if not report.is_valid:
        raise InvalidInput("Invalid rows: " + "; ".join(report.errors))

    results = optimize_batch(rows, max_workers=_resolve_workers(ns.workers))
    data: list[dict[str, Any]] = []
    for res in results:
        item = res.to_dict()
        if ns.verify:
            item["certificate"] = certify(res).to_dict()
        data.append(item)

    envelope: dict[str, Any] = {
        "success": True,
        "data": data,
        "message": f"Successfully optimized {len(results)} rows",
    }
    if ns.chart:
        from .chart import render_results_chart

        envelope["chart"] = render_results_chart(results, ns.chart)
    return envelope


def main(argv: list[str] | None = None) -> int:  # noqa: D401 – imperative mood
    ns = _parse_cli(argv)
    _configure_logging(ns.log_level)

    status = 0
    try:
        envelope = _run(ns)
    except (OptimizerError, OSError) as exc:
        logger.error("optimization failed: %s", exc)
        envelope = {"success": False, "error": str(exc)}
        status = 1

    json_out = json.dumps(
        envelope, ensure_ascii=False, allow_nan=False, separators=(",", ":")
    )
    if ns.out:
        Path(ns.out).write_text(json_out, "utf-8")
        print(f"✔ Results JSON written to {ns.out}")
    else:
        print(json_out)
    return status


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

#!/usr/bin/env python3
"""
Car Prices SQL CLI — load the dataset, run the analysis script, inspect the catalog, serve the API.

USAGE:
  python -m carsql.cli run car_prices.csv                    # Load + run the packaged script
  python -m carsql.cli run car_prices.csv my_queries.sql     # Custom script
  python -m carsql.cli run car_prices.csv --excel out.xlsx   # Also export results to Excel
  python -m carsql.cli run car_prices.csv --excel            # ... into the exports folder
  python -m carsql.cli run car_prices.csv --reload           # Reload the base table first

  python -m carsql.cli load car_prices.csv                   # Load only
  python -m carsql.cli query "SELECT COUNT(*) FROM car_prices"
  python -m carsql.cli catalog                               # Tables, views, indexes

  python -m carsql.cli serve --port 8000                     # Start API server
"""
from __future__ import annotations

import argparse
import os
import sys
from datetime import datetime
from pathlib import Path

from carsql.config import DATASET_PATH, DB_PATH, DEFAULT_MAX_ROWS, DEFAULT_SCRIPT, EXPORTS_FOLDER
from carsql.data.schemas import ResultSet
from carsql.data.store import CarStore
from carsql.errors import LoadError, QueryError
from carsql.queries.runner import QueryRunner
from carsql.queries.script import load_script
from carsql.reports.text_table import format_status, format_table


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(f"  CAR PRICES SQL — {title}")
    print("=" * 70)


def _open_loaded(args) -> CarStore | None:
    store = CarStore(args.db)
    try:
        store.load(args.dataset, replace=args.reload)
    except LoadError as exc:
        print(f"  Load failed: {exc}")
        return None
    return store


def cmd_load(args) -> int:
    """Load the dataset into the catalog."""
    _banner("LOAD")
    store = _open_loaded(args)
    if store is None:
        return 2
    print(f"\n  Catalog: {store.db_path}\n")
    return 0


def cmd_run(args) -> int:
    """Load the dataset and run every script statement in order."""
    _banner("ANALYSIS")
    print(f"  Started: {datetime.now():%Y-%m-%d %H:%M:%S}")

    store = _open_loaded(args)
    if store is None:
        return 2

    script = Path(args.script) if args.script else DEFAULT_SCRIPT
    try:
        statements = load_script(script)
    except OSError as exc:
        print(f"  Cannot read script {script}: {exc}")
        return 2
    print(f"  Script: {script.name} ({len(statements)} statements)\n")

    def _print_result(stmt, result):
        limit = stmt.limit if stmt.limit is not None else args.max_rows
        print(f"\n[{stmt.index}] {stmt.label}")
        print(format_table(result, limit=limit))

    runner = QueryRunner(store)
    report = runner.run_script(statements, on_result=_print_result)

    print("\n" + "-" * 70)
    print("  STATEMENT STATUS")
    print("-" * 70)
    print(format_status(report))

    if args.excel:
        from carsql.reports.excel_report import export_excel
        target = Path(args.excel)
        if target.suffix.lower() != ".xlsx":
            target = target / f"car_prices_analysis_{datetime.now():%Y%m%d_%H%M%S}.xlsx"
        out = export_excel(report, target, dataset=Path(args.dataset).name)
        print(f"\n  Excel report saved to: {out}")

    print("=" * 70 + "\n")
    return report.exit_code


def cmd_query(args) -> int:
    """Run one statement against an existing catalog."""
    store = CarStore(args.db)
    runner = QueryRunner(store)
    outcome = runner.run(args.sql)
    status = runner.report.statuses[-1]
    if not status.ok:
        return 1
    if isinstance(outcome, ResultSet):
        print(format_table(outcome, limit=args.max_rows))
    else:
        print(f"  {status.status}: {outcome.artifact_type} {outcome.name}".rstrip())
    return 0


def cmd_catalog(args) -> int:
    """List tables, views and indexes."""
    store = CarStore(args.db)
    print(f"\nCATALOG {store.db_path}\n")
    for table in store.tables():
        print(f"  table  {table:<30} {store.row_count(table):>10,} rows")
        for ix in store.indexes(table):
            print(f"    index  {ix['name']:<28} ({', '.join(ix['columns'])})")
    for view in store.views():
        print(f"  view   {view}")
    print()
    return 0


def cmd_serve(args) -> int:
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Car Prices SQL API on port {args.port}...")
    if args.reload:
        # The reloader re-imports the app in a child process; config picks up the env var
        os.environ["CARSQL_DB_PATH"] = str(args.db)
        uvicorn.run("carsql.main:app", host="0.0.0.0", port=args.port, reload=True)
    else:
        from carsql.main import create_app
        uvicorn.run(create_app(CarStore(args.db)), host="0.0.0.0", port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="carsql",
        description="Car Prices SQL — used-car sales analysis on SQLite",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    def _db(p):
        p.add_argument("--db", type=Path, default=DB_PATH, help=f"Catalog file (default: {DB_PATH})")

    run_parser = subparsers.add_parser("run", help="Load the dataset and run a query script")
    run_parser.add_argument("dataset", nargs="?", default=DATASET_PATH, help="CSV dataset path")
    run_parser.add_argument("script", nargs="?", help="SQL script (default: packaged analysis)")
    run_parser.add_argument("--reload", action="store_true", help="Replace an existing base table")
    run_parser.add_argument("--max-rows", type=int, default=DEFAULT_MAX_ROWS, help="Rows shown per result without LIMIT")
    run_parser.add_argument(
        "--excel", type=Path, nargs="?", const=EXPORTS_FOLDER,
        help=f"Also write results to this .xlsx file or folder (default folder: {EXPORTS_FOLDER})",
    )
    _db(run_parser)
    run_parser.set_defaults(func=cmd_run)

    load_parser = subparsers.add_parser("load", help="Load the dataset only")
    load_parser.add_argument("dataset", nargs="?", default=DATASET_PATH, help="CSV dataset path")
    load_parser.add_argument("--reload", action="store_true", help="Replace an existing base table")
    _db(load_parser)
    load_parser.set_defaults(func=cmd_load)

    query_parser = subparsers.add_parser("query", help="Run one statement")
    query_parser.add_argument("sql", help="SQL statement")
    query_parser.add_argument("--max-rows", type=int, default=DEFAULT_MAX_ROWS, help="Rows shown")
    _db(query_parser)
    query_parser.set_defaults(func=cmd_query)

    catalog_parser = subparsers.add_parser("catalog", help="List tables, views and indexes")
    _db(catalog_parser)
    catalog_parser.set_defaults(func=cmd_catalog)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    _db(serve_parser)
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0
    try:
        return args.func(args)
    except QueryError as exc:
        print(f"  Error: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

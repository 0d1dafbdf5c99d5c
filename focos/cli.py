"""
FOCOS Command Line Interface (CLI)
==================================

This file provides the interactive terminal program you run like:

    python -m focos.cli --data-dir "path/to/yearly_csvs"

On startup it:
- merges the yearly CSV files into one dataset (only if the merged file is stale)
- loads that dataset into an in-memory store (only if the store is empty)

then starts a REPL loop (Read-Eval-Print Loop) mapping commands to engine
methods (counts, growth, rankings, forecasts, exports, report).

The yearly source files are never modified.
"""

from __future__ import annotations
import argparse, logging, shlex
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .config import IngestConfig
from .engine import FireEngine, VIEWS
from .pipeline import run_ingestion
from .store import InMemoryStore

HELP_TEXT = """
FOCOS commands (grouped)
------------------------

1) View / Inspect
   help
   stats
   years | biomes                   (distinct values, sorted)

2) Counts
   by year | by biome | by month | by season
   peak-season                      (season with most occurrences)
   top <n>                          (example: top 10)

3) Growth / Trend
   growth                           (percent change year over year)
   change                           (percent change first -> last year)
   trend                            (next-year forecast)
   forecast <k>                     (example: forecast 5)

4) Export
   export <csv|json> <view> "<path>"
   views: years, biomes, months, seasons, growth, municipalities
   example: export csv years "by_year.csv"

5) Report (DOCX)
   report "<out.docx>"

6) Exit
   quit
"""


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the FOCOS CLI.

    1) Merge + load the dataset
    2) Build the engine
    3) Start an interactive REPL
    """
    ap = argparse.ArgumentParser(description="Fire occurrence analytics")
    ap.add_argument("--data-dir", help="Directory with the yearly CSV files")
    ap.add_argument("--merged", help="Path of the merged CSV (default: <data-dir>/focos_merged.csv)")
    ap.add_argument("--encoding", help="Encoding of the CSV files")
    ap.add_argument("--strict-bounds", action="store_true", default=None,
                    help="Reject Brazil records outside the country's bounding box")
    ap.add_argument("--reload", action="store_true", help="Clear the store before loading")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = IngestConfig.from_env().with_overrides(
        data_dir=Path(args.data_dir) if args.data_dir else None,
        merged_file=Path(args.merged) if args.merged else None,
        encoding=args.encoding,
        strict_bounds=args.strict_bounds,
    )

    print("Loading dataset...")
    store = InMemoryStore()
    summary = run_ingestion(config, store, reload=args.reload)
    for line in summary.lines():
        print(line)
    engine = FireEngine(store=store, dataset_path=str(config.merged_path))

    print(f"Loaded {engine.size()} records. Type 'help' for commands.")
    while True:
        try:
            line = input("focos> ")
            # Keep a lightweight log of commands for the report (reproducibility).
            stripped = line.strip()
            if stripped:
                cmd0 = stripped.split()[0].lower()
                if cmd0 not in ("help", "stats", "quit", "exit"):
                    engine.command_log.append(stripped)
        except EOFError:
            break
        if not line.strip():
            continue
        if line.strip().lower() in ("quit", "exit"):
            break
        try:
            handle(engine, line)
        except Exception as e:
            print(f"Error: {e}")


def handle(engine: FireEngine, line: str) -> None:
    """Handle one CLI command line.

    This parses the command and calls the appropriate engine method.
    """
    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        print(HELP_TEXT)
        return

    if cmd == "stats":
        years = engine.years()
        print(f"Records: {engine.size()}")
        if years:
            print(f"Years: {len(years)} ({years[0]}-{years[-1]}) | Biomes: {len(engine.biomes())}")
        return

    if cmd == "years":
        print(", ".join(str(y) for y in engine.years()) or "(no data)")
        return

    if cmd == "biomes":
        for b in engine.biomes():
            print(b)
        return

    if cmd == "by":
        if len(parts) < 2:
            raise ValueError("usage: by year|biome|month|season")
        kind = parts[1].lower()
        if kind == "year":
            _print_mapping(engine.count_by_year()); return
        if kind == "biome":
            _print_mapping(engine.count_by_biome()); return
        if kind == "month":
            _print_mapping(engine.count_by_month()); return
        if kind == "season":
            _print_mapping(engine.count_by_season()); return
        raise ValueError("by kind must be: year, biome, month, season")

    if cmd == "peak-season":
        season = engine.peak_season()
        print(season if season else "(no data)")
        return

    if cmd == "top":
        n = int(parts[1]) if len(parts) >= 2 else 10
        out = engine.top_municipalities(n)
        print(f"Top {len(out)} municipalities:")
        _print_mapping(out); return

    if cmd == "growth":
        _print_mapping({y: f"{g:+.2f}%" for y, g in engine.growth_percent_by_year().items()})
        return

    if cmd == "change":
        print(f"{engine.overall_change_percent():+.2f}%")
        return

    if cmd == "trend":
        f = engine.trend()
        print(f"{f.year}: {f.predicted_value} ({f.trend_label}, accuracy {f.accuracy_percent:.2f}%)")
        return

    if cmd == "forecast":
        k = int(parts[1]) if len(parts) >= 2 else 5
        for year, f in engine.forecast(k).items():
            msg = (f"{year}: {f.predicted_value} "
                   f"(accuracy {f.accuracy_percent:.2f}%, margin +/-{f.margin_of_error:.2f}%)")
            if f.warning:
                msg += f" [{f.warning}]"
            print(msg)
        return

    if cmd == "export":
        # export <csv|json> <view> "<path>"
        if len(parts) < 4:
            print('Usage: export csv years "out.csv"  OR  export json seasons "out.json"')
            return
        fmt, view, out_path = parts[1].lower(), parts[2].lower(), parts[3]
        if view not in VIEWS:
            print(f"Unknown view. Use one of: {', '.join(VIEWS)}")
            return
        if engine.size() == 0:
            print("Nothing to export: no records loaded.")
            return
        if fmt == "csv":
            engine.export_csv(view, out_path)
            print(f"Exported CSV to {out_path}")
            return
        if fmt == "json":
            engine.export_json(view, out_path)
            print(f"Exported JSON to {out_path}")
            return
        print("Unknown export format. Use: csv or json")
        return

    if cmd == "report":
        # report "<path.docx>"
        from .report import generate_docx_report, ReportConfig
        if len(parts) < 2:
            raise ValueError('usage: report "<path.docx>"')
        path = parts[1]
        cfg = ReportConfig(dataset_name=Path(engine.dataset_path).name if engine.dataset_path else "merged dataset",
                           command_log=engine.command_log)
        generate_docx_report(engine, path, config=cfg)
        print(f"Report written to {path}")
        return

    print("Unknown command. Type 'help'.")


def _print_mapping(data: Mapping) -> None:
    if not data:
        print("(no data)")
        return
    width = max(len(str(k)) for k in data)
    for k, v in data.items():
        print(f"{str(k).ljust(width)}  {v}")


if __name__ == "__main__":
    main()

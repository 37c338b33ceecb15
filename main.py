from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
import webbrowser

from slipchart_core import (
    ChartInputError,
    ChartOptions,
    DiagnosticsCollector,
    JsonlDiagnosticsSink,
    build_schedule_chart_from_file,
    load_chart_options,
    options_with_overrides,
)
from slipchart_ui import (
    OUTPUT_TYPES,
    export_chart,
    export_chart_bundle,
    require_valid_chart,
    resolve_output_type,
    validate_chart_suite,
)

LOGGER = logging.getLogger("slipchart")

BUNDLE_OUTPUT = "bundle"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="slipchart")
    parser.add_argument("--log-level", choices=["debug", "info", "warning", "error"], default="warning")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a chart from a CSV file or from every CSV in a folder.")
    render.add_argument("input", type=Path)
    render.add_argument("output", type=Path, nargs="?", default=None)
    render.add_argument("output_type", nargs="?", choices=[*OUTPUT_TYPES, BUNDLE_OUTPUT], default=None)
    render.add_argument("--open", action="store_true", help="Open the rendered file in the default browser.")
    _add_option_flags(render)

    inspect = sub.add_parser("inspect", help="Print the computed timeline and placements as JSON.")
    inspect.add_argument("input", type=Path)
    _add_option_flags(inspect)

    report = sub.add_parser("diagnostics-report", help="Print diagnostics counts from a JSONL sink.")
    report.add_argument("--diagnostics-jsonl", type=Path, required=True)
    report.add_argument("--max-rows", type=int, default=None, help="Prune the sink to the newest N rows first.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "diagnostics-report":
        sink = JsonlDiagnosticsSink(args.diagnostics_jsonl)
        if args.max_rows is not None:
            print(f"pruned rows={sink.prune(max_rows=args.max_rows)}")
        print(json.dumps(sink.summarize(), indent=2, sort_keys=True))
        return 0

    try:
        options = _resolve_options(args)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    sink = JsonlDiagnosticsSink(args.diagnostics_jsonl) if args.diagnostics_jsonl else None

    if args.command == "inspect":
        diagnostics = DiagnosticsCollector(source=args.input.name)
        try:
            chart = build_schedule_chart_from_file(args.input, options, diagnostics=diagnostics)
        except (ChartInputError, OSError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        finally:
            if sink is not None:
                sink.log_all(diagnostics.entries)
        payload = chart.as_dict()
        exit_code = 0
        if args.validate:
            result = validate_chart_suite(chart)
            payload["validation"] = {"errors": list(result.errors), "warnings": list(result.warnings)}
            exit_code = 0 if result.ok else 1
        print(json.dumps(payload, indent=2))
        return exit_code

    if args.command == "render":
        if args.input.is_dir():
            return _render_directory(args.input, args.output, args.output_type, options, sink, args.validate)
        try:
            out_path = _render_file(args.input, args.output, args.output_type, options, sink, args.validate)
        except (ValueError, OSError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        print(out_path)
        if args.open and out_path.is_file():
            webbrowser.open(out_path.resolve().as_uri())
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")


def _add_option_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=Path, default=None, help="TOML file with chart options.")
    parser.add_argument("--padding-days", type=int, default=None)
    parser.add_argument("--threshold-days", type=int, default=None)
    parser.add_argument("--week-numbering", choices=["global", "per-month"], default=None)
    parser.add_argument("--no-same-week", action="store_true", help="Do not highlight same-week tasks.")
    parser.add_argument("--no-passthrough", action="store_true", help="Leave in-between weeks empty.")
    parser.add_argument("--align-to-months", action="store_true")
    parser.add_argument("--day-first", action="store_true", help="Read ambiguous dates as day/month/year.")
    parser.add_argument("--title", default=None)
    parser.add_argument("--diagnostics-jsonl", type=Path, default=None)
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Check timeline integrity and renderer output; a failed check exits 1.",
    )


def _resolve_options(args: argparse.Namespace) -> ChartOptions:
    base = load_chart_options(args.config) if args.config is not None else ChartOptions()
    return options_with_overrides(
        base,
        padding_days=args.padding_days,
        short_arrow_threshold_days=args.threshold_days,
        week_numbering=args.week_numbering,
        same_week_highlighting=False if args.no_same_week else None,
        show_passthrough=False if args.no_passthrough else None,
        align_to_months=True if args.align_to_months else None,
        day_first=True if args.day_first else None,
        title=args.title,
    )


def _default_output(input_path: Path, output_type: str | None) -> Path:
    if output_type == BUNDLE_OUTPUT:
        return input_path.parent / f"{input_path.stem}_chart"
    return input_path.parent / f"{input_path.stem}_chart.{output_type or 'html'}"


def _render_file(
    input_path: Path,
    output: Path | None,
    output_type: str | None,
    options: ChartOptions,
    sink: JsonlDiagnosticsSink | None,
    validate: bool = False,
) -> Path:
    diagnostics = DiagnosticsCollector(source=input_path.name)
    out_path = output or _default_output(input_path, output_type)
    try:
        if output_type != BUNDLE_OUTPUT:
            resolve_output_type(out_path, output_type)
        chart = build_schedule_chart_from_file(input_path, options, diagnostics=diagnostics)
        if validate:
            require_valid_chart(chart)
        if output_type == BUNDLE_OUTPUT:
            export_chart_bundle(chart, out_dir=out_path, prefix=f"{input_path.stem}_chart")
            return out_path
        return export_chart(chart, out_path, output_type)
    except (ValueError, OSError) as exc:
        diagnostics.error(str(exc))
        raise
    finally:
        if sink is not None:
            sink.log_all(diagnostics.entries)


def _render_directory(
    input_dir: Path,
    output: Path | None,
    output_type: str | None,
    options: ChartOptions,
    sink: JsonlDiagnosticsSink | None,
    validate: bool = False,
) -> int:
    csv_files = sorted(path for path in input_dir.iterdir() if path.is_file() and path.suffix.lower() == ".csv")
    if not csv_files:
        print(f"error: no CSV files found in {input_dir}", file=sys.stderr)
        return 1

    out_dir = output or input_dir.with_name(f"{input_dir.name}_charts")
    succeeded = 0
    failed = 0
    for csv_path in csv_files:
        if output_type == BUNDLE_OUTPUT:
            target = out_dir / f"{csv_path.stem}_chart"
        else:
            target = out_dir / f"{csv_path.stem}_chart.{output_type or 'html'}"
        try:
            written = _render_file(csv_path, target, output_type, options, sink, validate)
        except (ValueError, OSError) as exc:
            LOGGER.error("failed to process %s: %s", csv_path, exc)
            failed += 1
            continue
        print(written)
        succeeded += 1

    print(f"processed {len(csv_files)} files: succeeded={succeeded} failed={failed}")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())

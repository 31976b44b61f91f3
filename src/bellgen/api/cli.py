"""Command-line interface for bellgen."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from .. import __version__
from ..schema.config import load_config
from ..schema.samples import available_sample_configs, get_sample_config
from .models import RunConfig
from .synthesizer import BellgenSynthesizer

_TABLE_ARGS = (
    ("first", "first_row_expectation"),
    ("min_col", "min_col"),
    ("max_col", "max_col"),
    ("max_diff", "max_diff"),
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bellgen",
        description="Generate 16-row unimodal distribution tables.",
    )
    parser.add_argument(
        "--sample",
        type=str,
        help="Run one built-in sample config by name (use --list-samples to inspect)",
    )
    parser.add_argument("--config", type=str, help="Path to YAML config file")
    parser.add_argument(
        "--list-samples",
        action="store_true",
        help="Print available built-in sample configs and exit",
    )
    parser.add_argument("--first", type=float, help="Target expectation of row 1")
    parser.add_argument("--min-col", type=int, help="Smallest column label")
    parser.add_argument("--max-col", type=int, help="Largest column label")
    parser.add_argument(
        "--max-diff",
        type=float,
        help="Maximum spread between the largest and smallest row expectation",
    )
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--attempts", type=int, help="Shape candidates per row")
    parser.add_argument(
        "--row-workers",
        type=int,
        help="Parallel worker processes for row synthesis",
    )
    parser.add_argument(
        "--strategy",
        choices=["fixed", "symmetric", "skewed"],
        help="Shape strategy for candidate draws",
    )
    parser.add_argument(
        "--peak-band",
        type=int,
        nargs=2,
        metavar=("LOW", "HIGH"),
        help="Keep the peak count of each row within [LOW, HIGH]",
    )
    parser.add_argument("--output", type=str, help="Output .xlsx path or directory")
    parser.add_argument(
        "--log-level",
        choices=["info", "quiet", "debug"],
        help="Log verbosity",
    )
    parser.add_argument("--log-dir", type=str, help="Directory for run log files")
    parser.add_argument(
        "--no-preview",
        action="store_true",
        help="Do not print the generated table",
    )
    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate config only (no generation)",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print package version and exit",
    )
    return parser


def _print_guidance() -> None:
    print("bellgen CLI")
    print("No command arguments provided.")
    print()
    print("Quick test paths:")
    print("- Script:   python sample_run.py")
    print()
    print("Direct CLI examples:")
    print("- python -m bellgen --list-samples")
    print("- python -m bellgen --sample default --seed 7")
    print("- python -m bellgen --first 8 --min-col 5 --max-col 15 --output out.xlsx")
    print("- python -m bellgen --config table.yaml --peak-band 25 50")


def _has_table_args(args: argparse.Namespace) -> bool:
    return any(getattr(args, attr) is not None for attr, _key in _TABLE_ARGS)


def _load_runtime_config(args: argparse.Namespace) -> dict:
    if args.sample:
        document = get_sample_config(args.sample)
    elif args.config:
        config_path = Path(args.config).expanduser()
        if not config_path.exists() or not config_path.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        document = load_config(config_path.read_text(encoding="utf-8"))
    else:
        document = {"metadata": {}, "table": {}}

    if _has_table_args(args):
        table = document.get("table")
        if not isinstance(table, dict):
            table = {}
            document["table"] = table
        for attr, key in _TABLE_ARGS:
            value = getattr(args, attr)
            if value is not None:
                table[key] = value
    return document


def _apply_shape_args(args: argparse.Namespace, document: dict) -> None:
    if args.strategy is None and args.peak_band is None:
        return
    shape = document.get("shape")
    if not isinstance(shape, dict):
        shape = {}
        document["shape"] = shape
    if args.strategy is not None:
        shape["strategy"] = args.strategy
    if args.peak_band is not None:
        shape["peak_band"] = list(args.peak_band)


def _build_run_config(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        seed=args.seed,
        attempts=args.attempts,
        row_workers=args.row_workers,
        log_level=args.log_level,
        log_dir=args.log_dir,
        output_path=args.output,
    )


def _validate_only(synth: BellgenSynthesizer) -> int:
    warnings, errors = synth.validate()
    status = "OK" if not errors else "ERROR"
    print(
        f"[VALIDATION] status={status} warnings={len(warnings)} errors={len(errors)}"
    )
    for warning in warnings:
        print(f"[WARN] {warning}")
    for error in errors:
        print(f"[ERROR] {error}", file=sys.stderr)
    return 0 if not errors else 1


def main(argv: Sequence[str] | None = None) -> int:
    args_list = list(argv) if argv is not None else sys.argv[1:]
    if not args_list:
        _print_guidance()
        return 0

    parser = _build_parser()
    args = parser.parse_args(args_list)

    if args.version:
        print(__version__)
        return 0

    if args.list_samples:
        print("Available sample configs:")
        for name in available_sample_configs():
            print(f"- {name}")
        return 0

    if args.sample and args.config:
        parser.error("Use either --sample or --config, not both")

    if not args.sample and not args.config and not _has_table_args(args):
        parser.error(
            "Provide --sample <name>, --config <path>, or --first/--min-col/--max-col. "
            "Run without arguments to view guided examples."
        )

    try:
        document = _load_runtime_config(args)
        _apply_shape_args(args, document)
        synth = BellgenSynthesizer(document, _build_run_config(args))
        if args.validate_config:
            return _validate_only(synth)
        result = synth.generate()
    except Exception as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    if not args.no_preview:
        print(result.dataframe.to_string(index=False))
        print()

    status = "OK" if result.success else "BEST_EFFORT"
    quality = result.quality_report
    output = result.output_path if result.output_path is not None else "-"
    print(
        f"[FINAL SUMMARY] status={status} seed={result.seed} "
        f"max_mean_error={float(quality.get('max_mean_error', 0.0)):.6f} "
        f"spread={float(quality.get('expectation_spread', 0.0)):.4f} "
        f"output={output} log={result.log_path}"
    )
    for note in result.runtime_notes:
        print(f"[NOTE] {note}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

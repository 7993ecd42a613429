# pupil_filter/cli.py
from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from typing import Dict, List, Optional

from .config import AOIConfig, EpochSpec, PipelineConfig, SessionMetadata, load_config
from .engine import PupilFilterEngine
from .exceptions import ConfigurationError, PupilFilterError
from .io import read_table, write_table


def _parse_bool(value: str) -> bool:
    v = value.strip().lower()
    if v in ("1", "true", "yes", "y"):
        return True
    if v in ("0", "false", "no", "n"):
        return False
    raise argparse.ArgumentTypeError(f"expected 0/1 or true/false, got {value!r}")


def _parse_aoi(values: List[str]) -> Dict[str, str]:
    mapping: Dict[str, str] = {}
    for item in values:
        name, sep, column = item.partition("=")
        if not sep or not name or not column:
            raise argparse.ArgumentTypeError(f"--aoi expects NAME=COLUMN, got {item!r}")
        mapping[name] = column
    return mapping


def build_arg_parser() -> argparse.ArgumentParser:
    """
    CLI parser for the pupil dilation pipeline.

    Parsing and option descriptions only; configuration is built in
    build_config().
    """
    parser = argparse.ArgumentParser(
        description=(
            "Baseline-correct, smooth and annotate a pupillometry trial recording "
            "and remove blink artifacts with a median/MAD velocity filter."
        ),
    )
    parser.add_argument("--calibration", required=True, help="Calibration recording (TSV/CSV).")
    parser.add_argument("--trial", required=True, help="Trial recording (TSV/CSV).")
    parser.add_argument(
        "--breakpoints",
        type=int,
        nargs="+",
        required=True,
        help="Epoch row breakpoints, e.g. 0 120 300 (last = row count).",
    )
    parser.add_argument(
        "--labels",
        nargs="+",
        required=True,
        help="Epoch labels, one fewer than breakpoints.",
    )
    parser.add_argument("--subject", required=True, help="Subject identifier.")
    parser.add_argument(
        "--correct",
        type=_parse_bool,
        required=True,
        help="Trial correctness (0/1 or true/false).",
    )
    parser.add_argument("--output", required=False, help="Optional output path (TSV/CSV).")
    parser.add_argument("--config", required=False, help="JSON config; CLI options override it.")

    # Raw columns
    parser.add_argument(
        "--aoi",
        action="append",
        default=None,
        metavar="NAME=COLUMN",
        help="AOI name and its hit column, in coalesce order (repeatable).",
    )
    parser.add_argument("--timestamp-col", default=None, help="Timestamp column.")
    parser.add_argument("--left-col", default=None, help="Left pupil diameter column.")
    parser.add_argument("--right-col", default=None, help="Right pupil diameter column.")
    parser.add_argument("--segment-start-col", default=None, help="Segment start column.")

    # Algorithm parameters
    parser.add_argument(
        "--baseline-window",
        type=int,
        default=None,
        help="Trailing calibration samples for the baseline (default: 24).",
    )
    parser.add_argument(
        "--short-calibration",
        choices=["raise", "use_available"],
        default=None,
        help="Calibration shorter than the window (default: raise).",
    )
    parser.add_argument(
        "--smooth-window",
        type=int,
        default=None,
        help="Rolling mean width in samples, odd (default: 3).",
    )
    parser.add_argument(
        "--mad-multiplier",
        type=float,
        default=None,
        help="Velocity bounds = median +/- k * MAD (default: 3.0).",
    )
    parser.add_argument(
        "--undefined-velocity",
        choices=["keep", "drop"],
        default=None,
        help="Rows without velocity, e.g. the first row (default: keep).",
    )
    parser.add_argument(
        "--on-degenerate",
        choices=["keep_all", "raise"],
        default=None,
        help="Zero MAD handling (default: keep_all).",
    )
    parser.add_argument(
        "--on-aoi-conflict",
        choices=["warn", "raise", "ignore"],
        default=None,
        help="Rows hitting more than one AOI (default: warn).",
    )

    parser.add_argument("--plot", action="store_true", help="Plot dilation and velocity.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO).",
    )
    return parser


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """PipelineConfig from --config (if any) with CLI overrides applied."""
    cfg = load_config(args.config) if args.config else PipelineConfig()

    column_overrides = {
        "timestamp": args.timestamp_col,
        "pupil_left": args.left_col,
        "pupil_right": args.right_col,
        "segment_start": args.segment_start_col,
    }
    columns = replace(cfg.columns, **{k: v for k, v in column_overrides.items() if v is not None})

    aoi = cfg.aoi
    if args.aoi:
        aoi = AOIConfig(
            aoi_columns=_parse_aoi(args.aoi),
            other_label=aoi.other_label,
            on_conflict=aoi.on_conflict,
        )
    if args.on_aoi_conflict is not None:
        aoi = replace(aoi, on_conflict=args.on_aoi_conflict)

    baseline = cfg.baseline
    if args.baseline_window is not None:
        baseline = replace(baseline, window_samples=args.baseline_window)
    if args.short_calibration is not None:
        baseline = replace(baseline, short_calibration=args.short_calibration)

    smoothing = cfg.smoothing
    if args.smooth_window is not None:
        smoothing = replace(smoothing, window_samples=args.smooth_window)

    blink = cfg.blink_filter
    if args.mad_multiplier is not None:
        blink = replace(blink, mad_multiplier=args.mad_multiplier)
    if args.undefined_velocity is not None:
        blink = replace(blink, undefined_velocity=args.undefined_velocity)
    if args.on_degenerate is not None:
        blink = replace(blink, on_degenerate=args.on_degenerate)

    return PipelineConfig(
        columns=columns,
        aoi=aoi,
        baseline=baseline,
        smoothing=smoothing,
        blink_filter=blink,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Runs the complete pipeline:

      1) load calibration and trial recordings
      2) build the configuration
      3) run the engine
      4) optional: write the processed table
      5) optional: plotting
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = build_config(args)
    except (ConfigurationError, argparse.ArgumentTypeError) as e:
        parser.error(str(e))

    calibration = read_table(args.calibration)
    trial = read_table(args.trial)

    try:
        result = PupilFilterEngine().run(
            calibration,
            trial,
            EpochSpec(breakpoints=args.breakpoints, labels=args.labels),
            SessionMetadata(subject=args.subject, correct=args.correct),
            cfg,
        )
    except PupilFilterError as e:
        print(f"[Error] {e}")
        return 1

    print(
        f"[PupilFilter] baseline={result.baseline:.4f} mm, "
        f"samples={result.n_input_samples}, "
        f"removed={result.n_removed_samples}"
    )

    if args.output is not None:
        write_table(result.table, args.output)

    if args.plot:
        # matplotlib is an optional extra
        from .plotting import plot_dilation, plot_velocity
        from .processing.blinks import VelocityBounds

        blink_stats = result.stage_stats.get("blink_filter")
        bounds = VelocityBounds.from_stats(blink_stats) if blink_stats is not None else None
        plot_dilation(result.table)
        plot_velocity(result.table, bounds)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3
"""
Main script for running DTA tangent analysis.
"""

# Pipeline overview:
# 1) Load a Time/Temperature/DTA CSV (or generate the bundled Al-Si sample),
#    skip malformed and non-monotonic rows, and compute dDTA/dt and dT/dt.
# 2) Optionally zoom both charts to a temperature window.
# 3) Place the two tangents at requested temperatures, or run the guided
#    walkthrough, which picks the baseline point and the derivative minimum.
# 4) Report the tangent intersection as the transition temperature and export
#    CSV tables plus a two-panel figure.

import argparse
import logging
import os
import sys
import time

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dtakit.config import HINTS
from dtakit.demo import run_demo
from dtakit.output import save_results_csv
from dtakit.plotting import plot_session
from dtakit.reporting import hint_index_for_session, summarize_session
from dtakit.samples import DEFAULT_SAMPLE, SAMPLES, sample_rows
from dtakit.session import (
    Session,
    build_tangent_at_derivative_point,
    derivative_point_near,
    load_csv,
    load_rows,
    sync_zoom,
)


def configure_logging(log_file="dta_analysis.log"):
    """Send log records to stdout and, when given, to a log file."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w"))
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )


def build_parser():
    parser = argparse.ArgumentParser(
        description="Estimate a DTA phase transition temperature by tangent intersection."
    )
    parser.add_argument(
        "csv", nargs="?", help="CSV with Time, Temperature and DTA columns"
    )
    parser.add_argument(
        "--sample",
        choices=sorted(SAMPLES),
        default=None,
        help=f"use a bundled sample instead of a CSV (default: {DEFAULT_SAMPLE})",
    )
    parser.add_argument("--tangent1", type=float, help="temperature for tangent 1")
    parser.add_argument("--tangent2", type=float, help="temperature for tangent 2")
    parser.add_argument(
        "--demo", action="store_true", help="run the guided walkthrough"
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="keep the walkthrough's pauses instead of skipping them",
    )
    parser.add_argument(
        "--zoom",
        nargs=2,
        type=float,
        metavar=("T_MIN", "T_MAX"),
        help="temperature window shown on both charts",
    )
    parser.add_argument(
        "--x-convention",
        choices=("midpoint", "left"),
        default=None,
        help="temperature assigned to each derivative point",
    )
    parser.add_argument(
        "--smooth", action="store_true", help="smooth the signal before differentiating"
    )
    parser.add_argument("--output-dir", default="output")
    parser.add_argument("--no-plot", action="store_true", help="skip the figure")
    parser.add_argument(
        "--log-file", default="dta_analysis.log", help="empty string disables it"
    )
    return parser


def main(argv=None):
    """Run the pipeline; returns a process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file)

    start_time = time.time()
    logging.info("Initializing DTA tangent analysis")

    session = Session()
    if args.csv:
        result = load_csv(
            session, args.csv, x_convention=args.x_convention, smooth=args.smooth
        )
    else:
        key = args.sample or DEFAULT_SAMPLE
        result = load_rows(
            session,
            sample_rows(key),
            source_name=SAMPLES[key].name,
            x_convention=args.x_convention,
            smooth=args.smooth,
        )

    if not result.ok:
        logging.error("Could not load data: %s", result.reason)
        return 1
    for message in result.warnings:
        logging.warning(message)
    logging.info(
        "Loaded %d samples and %d derivative points",
        result.valid_count,
        result.derivative_count,
    )

    if args.zoom:
        sync_zoom(session, *args.zoom)

    highlights = []
    if args.demo:
        sleep = time.sleep if args.realtime else (lambda seconds: None)
        report = run_demo(session, sleep=sleep)
        highlights = report.highlights
        if args.zoom:
            sync_zoom(session, *args.zoom)
    else:
        for index, temperature in enumerate((args.tangent1, args.tangent2)):
            if temperature is None:
                continue
            point = derivative_point_near(session, temperature)
            if build_tangent_at_derivative_point(session, point, index=index) is None:
                logging.warning("No tangent could be built near %.2f °C", temperature)

    summary = summarize_session(session)
    for entry in summary["tangents"]:
        if entry is not None:
            logging.info("%s: %s", entry["name"], entry["equation"])
    if summary["intersection"] is None:
        logging.info("Transition temperature: not determined")
    else:
        logging.info(
            "Transition temperature: %s °C", summary["transition_temperature_text"]
        )

    logging.info("Hint: %s", HINTS[hint_index_for_session(session)])

    paths = save_results_csv(session, args.output_dir)
    if not args.no_plot:
        paths["figure"] = plot_session(
            session, args.output_dir, highlights=highlights
        )

    logging.info("Total execution time: %.2f seconds", time.time() - start_time)
    logging.info("Generated output files:")
    for key, path in paths.items():
        logging.info("  - %s: %s", key, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())

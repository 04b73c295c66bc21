"""
Command-line entry point for comparing the linear and nonlinear temperature models.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from thermosim.export import save_results_to_csv
from thermosim.report import format_summary, print_results
from thermosim.response_metrics import compute_summary
from thermosim.signals import generate_control_signal
from thermosim.simulate_system import (
    COUPLED,
    MAX_STEPS,
    load_system_module,
    run_simulation,
    validate_step_count,
)

logger = logging.getLogger(__name__)

# Presets live inside the package so they are installed with it
SYSTEMS_DIR = Path(__file__).resolve().parent / "systems"
DEFAULT_SYSTEM_FILE = SYSTEMS_DIR / "sinusoidal.py"
DEFAULT_OUTPUT_CSV = "output/simulation_results.csv"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Simulate a controlled object with a linear and a nonlinear temperature model."
    )
    p.add_argument(
        "--system",
        type=Path,
        default=DEFAULT_SYSTEM_FILE,
        help="python file defining params, initial_condition and optionally mode/control_source/steps",
    )
    p.add_argument("--steps", default=None, help="number of simulation steps (prompted if not set)")
    p.add_argument("--output", type=Path, default=None, help="CSV file to write the results to")
    p.add_argument("--no-export", action="store_true", help="do not write the CSV file")
    p.add_argument("--quiet", action="store_true", help="print only the summary, not the step table")
    p.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return p


def parse_step_count(raw: str) -> int:
    """Convert command-line or prompted text to a step count."""
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"Step count must be an integer, got {raw.strip()!r}") from None


def prompt_step_count() -> int:
    """Ask for the step count on stdin."""
    try:
        raw = input("Enter the number of simulation steps: ")
    except EOFError:
        raise ValueError("No step count given") from None
    return parse_step_count(raw)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        system_module = load_system_module(args.system)
    except (OSError, ImportError, SyntaxError, AttributeError, TypeError, ValueError) as exc:
        print(f"Error: invalid system file {args.system}: {exc}", file=sys.stderr)
        return 1

    params = system_module.params
    initial_condition = system_module.initial_condition
    mode = getattr(system_module, "mode", COUPLED)
    control_source = getattr(system_module, "control_source", None) or generate_control_signal
    max_steps = getattr(system_module, "max_steps", MAX_STEPS)

    try:
        if args.steps is not None:
            steps = parse_step_count(args.steps)
        else:
            steps = getattr(system_module, "steps", None)
        if steps is None:
            steps = prompt_step_count()
        steps = validate_step_count(steps, max_steps=max_steps)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.info("Running %s mode simulation for %d steps (%s)", mode, steps, args.system.name)
    results = run_simulation(steps, params, initial_condition, control_source=control_source, mode=mode)
    summary = compute_summary(results, ambient=initial_condition.ambient)

    if args.quiet:
        for line in format_summary(summary):
            print(line)
    else:
        print_results(results, summary)

    if not args.no_export:
        output_path = args.output or getattr(system_module, "output_csv", DEFAULT_OUTPUT_CSV)
        saved = save_results_to_csv(results, output_path)
        if saved is not None:
            print(f"\nResults saved to: {saved}")

    return 0


if __name__ == "__main__":
    sys.exit(main())

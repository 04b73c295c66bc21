"""
Console formatting for simulation results.
"""

from __future__ import annotations

from typing import Dict, Iterator

import numpy as np

RULE = "=" * 52
THIN_RULE = "-" * 52

SUMMARY_LABELS = {
    "ambient": "Room temperature",
    "initial_state": "Initial temperature",
    "final_linear": "Final temperature (linear model)",
    "final_nonlinear": "Final temperature (nonlinear model)",
    "model_difference": "Difference between models",
}


def control_at(control_trace: np.ndarray, k: int) -> float:
    """Control value applied at step k; the final state has none, reported as 0."""
    return float(control_trace[k]) if k < len(control_trace) else 0.0


def format_table(results: tuple[np.ndarray, ...]) -> Iterator[str]:
    """
    Yield the lines of the step-by-step results table.

    Parameters
    ----------
    results : tuple of np.ndarray
        (linear, nonlinear, control_trace) from run_simulation

    Yields
    ------
    str
        Title, header and one row per step index 0..N
    """
    linear, nonlinear, control_trace = results[:3]

    yield RULE
    yield "Temperature model simulation results"
    yield RULE
    yield f"{'Step':>6}{'u(tau)':>12}{'Linear':>16}{'Nonlinear':>16}"
    yield THIN_RULE
    for k in range(len(linear)):
        yield (
            f"{k:>6}{control_at(control_trace, k):>12.2f}"
            f"{linear[k]:>16.2f}{nonlinear[k]:>16.2f}"
        )


def format_summary(summary: Dict[str, float]) -> Iterator[str]:
    """Yield the lines of the end-of-run summary block."""
    yield ""
    yield RULE
    yield "Simulation summary"
    yield RULE
    for key, label in SUMMARY_LABELS.items():
        if key in summary:
            yield f"{label + ':':<38}{summary[key]:.4f}"


def print_results(results: tuple[np.ndarray, ...], summary: Dict[str, float] | None = None) -> None:
    """Print the results table and, if given, the summary to stdout."""
    for line in format_table(results):
        print(line)
    if summary is not None:
        for line in format_summary(summary):
            print(line)

"""
End-of-run summary of a linear vs. nonlinear model comparison.
"""

from __future__ import annotations

from typing import Dict

import numpy as np


def compute_summary(
    results: tuple[np.ndarray, ...],
    ambient: float | None = None,
) -> Dict[str, float]:
    """
    Extract initial state, final states and the gap between the two models.

    Parameters
    ----------
    results : tuple of np.ndarray
        Tuple from run_simulation, (linear, nonlinear, control_trace).
        Only the two trajectories are used.
    ambient : float | None, optional
        Room temperature to carry into the summary. Default: None

    Returns
    -------
    dict
        initial_state, final_linear, final_nonlinear and model_difference
        (|final_linear - final_nonlinear|), plus ambient when given.
        Non-finite values are passed through unchanged.
    """
    if len(results) < 2:
        raise ValueError(
            f"Results must contain at least 2 arrays (linear, nonlinear). Got {len(results)} arrays."
        )

    linear = results[0]
    nonlinear = results[1]

    if len(linear) == 0 or len(nonlinear) == 0:
        raise ValueError("Trajectories must be non-empty.")

    if len(linear) != len(nonlinear):
        raise ValueError(
            f"Trajectories must have same length. Got: linear={len(linear)}, nonlinear={len(nonlinear)}"
        )

    final_linear = float(linear[-1])
    final_nonlinear = float(nonlinear[-1])

    # inf - inf gives nan, which is a legitimate report for a diverged run
    with np.errstate(invalid="ignore"):
        model_difference = float(np.abs(final_linear - final_nonlinear))

    summary = {
        "initial_state": float(linear[0]),
        "final_linear": final_linear,
        "final_nonlinear": final_nonlinear,
        "model_difference": model_difference,
    }
    if ambient is not None:
        summary["ambient"] = float(ambient)

    return summary

"""
CSV export of simulation results.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

logger = logging.getLogger(__name__)

CSV_HEADER = "Step,u(tau),Linear_Model,Nonlinear_Model"
CSV_FORMAT = ["%d", "%.10g", "%.10g", "%.10g"]


def results_table(results: tuple[np.ndarray, ...]) -> np.ndarray:
    """
    Stack the run into an (N + 1, 4) array of step, control, linear, nonlinear.

    The control trace is one shorter than the trajectories; its missing last
    entry is filled with 0.
    """
    linear, nonlinear, control_trace = results[:3]
    n_rows = len(linear)

    control = np.zeros(n_rows)
    control[: len(control_trace)] = control_trace

    return np.column_stack((np.arange(n_rows), control, linear, nonlinear))


def save_results_to_csv(results: tuple[np.ndarray, ...], output_path: str | Path) -> Path | None:
    """
    Write the run to a comma-separated file with a header row.

    Parameters
    ----------
    results : tuple of np.ndarray
        (linear, nonlinear, control_trace) from run_simulation
    output_path : str or Path
        Destination file. Missing parent directories are created.

    Returns
    -------
    Path | None
        The written path, or None if the destination could not be written.
        A failed export is logged as a warning and leaves results untouched.
    """
    output_path = Path(output_path)
    table = results_table(results)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        np.savetxt(
            output_path,
            table,
            delimiter=",",
            fmt=CSV_FORMAT,
            header=CSV_HEADER,
            comments="",
        )
    except OSError as exc:
        logger.warning("Could not write results to %s: %s", output_path, exc)
        return None

    logger.info("Saved %d rows to CSV: %s", len(table), output_path)
    return output_path

from __future__ import annotations

import importlib.util
import logging
from pathlib import Path
from types import ModuleType
from typing import Callable

import numpy as np

from thermosim.models import InitialCondition, ModelParameters, step_linear, step_nonlinear
from thermosim.signals import generate_control_signal

logger = logging.getLogger(__name__)

COUPLED = "coupled"
INDEPENDENT_CONSTANT = "independent-constant"
CONTROL_MODES = (COUPLED, INDEPENDENT_CONSTANT)

# Largest step count accepted at the command-line boundary
MAX_STEPS = 1_000_000


def validate_step_count(step_count, max_steps: int | None = MAX_STEPS) -> int:
    """
    Check a requested step count before any simulation work is done.

    Parameters
    ----------
    step_count
        Requested number of recurrence steps.
    max_steps : int | None, optional
        Upper bound on step_count. None disables the bound. Default: MAX_STEPS

    Returns
    -------
    int
        The validated step count.

    Raises
    ------
    ValueError
        If step_count is not an integer, is not positive, or exceeds max_steps.
    """
    if isinstance(step_count, bool) or not isinstance(step_count, (int, np.integer)):
        raise ValueError(f"Step count must be an integer, got {step_count!r}")
    if step_count <= 0:
        raise ValueError(f"Step count must be positive, got {step_count}")
    if max_steps is not None and step_count > max_steps:
        raise ValueError(f"Step count must not exceed {max_steps:,}, got {step_count:,}")
    return int(step_count)


def run_simulation(
    step_count: int,
    params: ModelParameters,
    initial_condition: InitialCondition,
    control_source: Callable[[int], float] = generate_control_signal,
    mode: str = COUPLED,
):
    """
    Simulate the linear and nonlinear temperature models side by side.

    Parameters
    ----------
    step_count : int
        Number of recurrence steps N (must be positive).
    params : ModelParameters
        Model coefficients.
    initial_condition : InitialCondition
        Initial temperature y0 and, for the constant mode, the control value u0.
    control_source : callable, optional
        Function of the step index returning the control value u(k). Used by
        the "coupled" mode. Default: generate_control_signal
    mode : str, optional
        How the control values are sourced:
        "coupled" drives the linear model with control_source(k) and feeds the
        nonlinear model from the same trace, with u[k-1] = 0 at the first step.
        "independent-constant" uses u0 for every u[k] and u[k-1] in both models.
        Default: "coupled"

    Returns
    -------
    tuple of np.ndarray
        (linear, nonlinear, control_trace). Both trajectories have N + 1
        entries with index 0 equal to y0; control_trace has N entries, the
        control value applied on each linear transition. The arrays are
        read-only.
    """
    step_count = validate_step_count(step_count, max_steps=None)
    if mode not in CONTROL_MODES:
        raise ValueError(f"Unknown control mode {mode!r}. Expected one of {CONTROL_MODES}")
    if mode == INDEPENDENT_CONSTANT and initial_condition.u0 is None:
        raise ValueError(f"Mode {mode!r} requires a constant control value u0")

    if mode == INDEPENDENT_CONSTANT:
        u0 = initial_condition.u0

        def linear_control(k):
            return u0

    else:
        linear_control = control_source

    logger.debug("Simulating %d steps in %s mode with %s", step_count, mode, params)

    # Overflow and nan propagation are valid outcomes for unstable coefficients
    with np.errstate(over="ignore", invalid="ignore"):
        linear, control_trace = _simulate_linear(step_count, params, initial_condition.y0, linear_control)
        if mode == INDEPENDENT_CONSTANT:
            nonlinear = _simulate_nonlinear_constant(step_count, params, initial_condition)
        else:
            nonlinear = _simulate_nonlinear_coupled(
                step_count, params, initial_condition.y0, control_trace, control_source
            )

    for arr in (linear, nonlinear, control_trace):
        arr.flags.writeable = False

    return linear, nonlinear, control_trace


def _simulate_linear(n, params, y0, control):
    y = np.zeros(n + 1)
    u = np.zeros(n)
    y[0] = y_current = y0

    for k in range(n):
        u_k = control(k)
        u[k] = u_k
        y_current = step_linear(y_current, u_k, params)
        y[k + 1] = y_current

    return y, u


def _simulate_nonlinear_coupled(n, params, y0, control_trace, control_source):
    """
    Nonlinear run fed from a recorded control trace.

    Indices the trace does not cover are evaluated with control_source.
    run_simulation always passes a full trace of n entries, so the fallback
    only applies when a shorter trace is given.
    """
    y = np.zeros(n + 1)
    y[0] = y0

    # No state exists before index 0, so y0 stands in for y[-1]
    y_previous = y_current = y0
    u_previous = 0.0

    for k in range(n):
        u_current = float(control_trace[k]) if k < len(control_trace) else control_source(k)
        y_next = step_nonlinear(y_current, y_previous, u_current, u_previous, params)
        y[k + 1] = y_next

        y_previous, y_current = y_current, y_next
        u_previous = u_current

    return y


def _simulate_nonlinear_constant(n, params, initial_condition):
    u0 = initial_condition.u0
    y = np.zeros(n + 1)
    y[0] = initial_condition.y0

    y_previous = y_current = initial_condition.y0
    for k in range(n):
        y_next = step_nonlinear(y_current, y_previous, u0, u0, params)
        y[k + 1] = y_next
        y_previous, y_current = y_current, y_next

    return y


def load_system_module(system_file: str | Path) -> ModuleType:
    """
    Import a system configuration module from a file path.

    The module is expected to define ``params`` (ModelParameters) and
    ``initial_condition`` (InitialCondition), and may define ``mode``,
    ``control_source``, ``steps``, ``max_steps`` and ``output_csv``.

    Parameters
    ----------
    system_file : str or Path
        Path to the Python file defining the system.

    Returns
    -------
    ModuleType
        The executed module.
    """
    path = Path(system_file)
    if not path.is_file():
        raise FileNotFoundError(f"System file not found: {path}")

    spec = importlib.util.spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load system module from {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    for name, expected in (("params", ModelParameters), ("initial_condition", InitialCondition)):
        if not hasattr(module, name):
            raise AttributeError(
                f"{path.name} must define a '{name}' variable of type {expected.__name__}"
            )
        value = getattr(module, name)
        if not isinstance(value, expected):
            raise TypeError(f"{name} must be a {expected.__name__} instance, got {type(value)}")

    mode = getattr(module, "mode", COUPLED)
    if mode not in CONTROL_MODES:
        raise ValueError(f"{path.name}: unknown control mode {mode!r}. Expected one of {CONTROL_MODES}")

    control_source = getattr(module, "control_source", None)
    if control_source is not None and not callable(control_source):
        raise TypeError(f"control_source must be callable, got {type(control_source)}")

    logger.debug("Loaded system module %s", path)
    return module

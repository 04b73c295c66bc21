"""
Temperature Model Blocks

This module provides the one-step update rules for the two plant models:
- step_linear: first-order linear recurrence y[k+1] = a*y[k] + b*u[k]
- step_nonlinear: second-order recurrence with quadratic feedback and a
  sinusoidal disturbance, y[k+1] = a*y[k] - b*y[k-1]^2 + c*u[k] + d*sin(u[k-1])

Both functions are pure. No range checks are applied to the coefficients:
an unstable choice simply produces a diverging (possibly inf/nan) trajectory.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ModelParameters:
    """
    Model coefficients shared by the linear and nonlinear models.

    Attributes
    ----------
    a : float
        Retained-state (feedback) gain, used by both models.
    b : float
        Control gain of the linear model.
    c : float, optional
        Control gain of the nonlinear model. Default: 0.0
    d : float, optional
        Gain of the sin(u[k-1]) disturbance term. Default: 0.0
    b_nl : float | None, optional
        Quadratic self-feedback gain of the nonlinear model. When None, the
        nonlinear model reuses b. Default: None
    """

    a: float
    b: float
    c: float = 0.0
    d: float = 0.0
    b_nl: float | None = None

    @property
    def nonlinear_b(self) -> float:
        """Coefficient of the y[k-1]^2 term."""
        return self.b if self.b_nl is None else self.b_nl


@dataclass(frozen=True)
class InitialCondition:
    """
    Starting point of a simulation run.

    Attributes
    ----------
    y0 : float
        Initial temperature, index 0 of both trajectories.
    u0 : float | None, optional
        Constant control value. Required by the "independent-constant" mode.
    ambient : float | None, optional
        Room temperature, reported in the run summary only.
    """

    y0: float
    u0: float | None = None
    ambient: float | None = None


def step_linear(y: float, u: float, params: ModelParameters) -> float:
    """
    Advance the linear model by one step.

    Parameters
    ----------
    y : float
        Current state y[k]
    u : float
        Control value u[k]
    params : ModelParameters
        Model coefficients (uses a and b)

    Returns
    -------
    float
        Next state y[k+1] = a*y + b*u
    """
    # Python floats overflow to inf silently, numpy scalars warn
    return float(params.a) * float(y) + float(params.b) * float(u)


def step_nonlinear(
    y_current: float,
    y_previous: float,
    u_current: float,
    u_previous: float,
    params: ModelParameters,
) -> float:
    """
    Advance the nonlinear model by one step.

    Parameters
    ----------
    y_current : float
        Most recent state y[k]
    y_previous : float
        State before that, y[k-1]
    u_current : float
        Control value u[k]
    u_previous : float
        Previous control value u[k-1]
    params : ModelParameters
        Model coefficients (uses a, nonlinear_b, c and d)

    Returns
    -------
    float
        Next state a*y[k] - b*y[k-1]^2 + c*u[k] + d*sin(u[k-1])
    """
    y_current, y_previous = float(y_current), float(y_previous)
    # sin(inf) is nan; np.sin would also warn about it
    disturbance = float(np.sin(u_previous)) if math.isfinite(u_previous) else math.nan

    return (
        float(params.a) * y_current
        # y*y rather than y**2: float ** raises OverflowError instead of giving inf
        - float(params.nonlinear_b) * (y_previous * y_previous)
        + float(params.c) * float(u_current)
        + float(params.d) * disturbance
    )

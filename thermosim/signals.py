"""
Control signal sources for the temperature model simulation.

A control source is anything callable as ``source(k)`` that returns the control
value applied at step index ``k``. The classes below extend the Signal abstract
base class; plain functions such as generate_control_signal work just as well.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

BASE_SIGNAL = 10.0
AMPLITUDE = 5.0
FREQUENCY = 0.1


class Signal(ABC):
    """
    Abstract base class for control signal sources.

    All signal classes must implement __call__(k) to return the control value
    at step index k.
    """

    @abstractmethod
    def __call__(self, k: int) -> float:
        """
        Get the control value at step index k.

        Parameters
        ----------
        k : int
            Step index (0, 1, 2, ...)

        Returns
        -------
        float
            Control value u(k)
        """
        pass


class SinusoidalControl(Signal):
    """
    Sinusoidal control signal: base + amplitude * sin(frequency * k).

    Parameters
    ----------
    base : float
        Offset the signal oscillates around (default: 10.0)
    amplitude : float
        Oscillation amplitude (default: 5.0)
    frequency : float
        Angular frequency in radians per step (default: 0.1)
    """

    def __init__(
        self,
        base: float = BASE_SIGNAL,
        amplitude: float = AMPLITUDE,
        frequency: float = FREQUENCY,
    ):
        self.base = base
        self.amplitude = amplitude
        self.frequency = frequency

    def __call__(self, k: int) -> float:
        return self.base + self.amplitude * float(np.sin(self.frequency * k))

    def __repr__(self) -> str:
        return (
            f"SinusoidalControl(base={self.base}, amplitude={self.amplitude}, "
            f"frequency={self.frequency})"
        )


class Constant(Signal):
    """
    Constant signal: always returns the same value.

    Parameters
    ----------
    value : float
        Constant value (default: 0.0)
    """

    def __init__(self, value: float = 0.0):
        self.value = value

    def __call__(self, k: int) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"Constant(value={self.value})"


_DEFAULT_CONTROL = SinusoidalControl()


def generate_control_signal(k: int) -> float:
    """Default control signal, 10 + 5 * sin(0.1 * k)."""
    return _DEFAULT_CONTROL(k)

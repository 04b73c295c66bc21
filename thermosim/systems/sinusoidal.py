"""
Room heating driven by a sinusoidal control signal.

Both models share the control trace u(k) = 10 + 5 * sin(0.1 * k); the
nonlinear model starts with u[-1] = 0.
"""

from thermosim.models import InitialCondition, ModelParameters
from thermosim.signals import SinusoidalControl

params = ModelParameters(
    a=0.98,  # Retained heat per step
    b=0.05,  # Heater gain (linear model) and quadratic loss (nonlinear model)
    c=0.03,  # Heater gain (nonlinear model)
    d=0.02,  # Disturbance gain
)

initial_condition = InitialCondition(
    y0=20.0,  # Initial object temperature
    ambient=25.0,  # Room temperature, reported only
)

mode = "coupled"
control_source = SinusoidalControl(base=10.0, amplitude=5.0, frequency=0.1)

steps = 100
output_csv = "output/simulation_results.csv"

"""
Object driven by a constant control input u0.

The linear and nonlinear models use separate quadratic/control gains
(b = 0.1 and b_nl = 0.12). No default step count: it is asked for at runtime.
"""

from thermosim.models import InitialCondition, ModelParameters

params = ModelParameters(
    a=0.8,
    b=0.1,
    b_nl=0.12,
    c=0.05,
    d=0.02,
)

initial_condition = InitialCondition(y0=20.0, u0=5.0)

mode = "independent-constant"

max_steps = 1_000_000
output_csv = "output/constant_results.csv"

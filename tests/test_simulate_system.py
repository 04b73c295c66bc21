"""
Tests for the recurrence engine and system module loading.
"""

import numpy as np
import pytest

from thermosim.models import InitialCondition, ModelParameters, step_linear, step_nonlinear
from thermosim.signals import Constant, generate_control_signal
from thermosim.simulate_system import (
    COUPLED,
    INDEPENDENT_CONSTANT,
    MAX_STEPS,
    _simulate_nonlinear_coupled,
    load_system_module,
    run_simulation,
    validate_step_count,
)

PARAMS = ModelParameters(a=0.8, b=0.1, b_nl=0.12, c=0.05, d=0.02)
IC = InitialCondition(y0=20.0, u0=5.0)


@pytest.mark.parametrize("mode", [COUPLED, INDEPENDENT_CONSTANT])
@pytest.mark.parametrize("n", [1, 2, 10, 250])
def test_trajectory_lengths_and_initial_state(mode, n):
    linear, nonlinear, control = run_simulation(n, PARAMS, IC, mode=mode)
    assert len(linear) == n + 1
    assert len(nonlinear) == n + 1
    assert len(control) == n
    assert linear[0] == 20.0
    assert nonlinear[0] == 20.0


@pytest.mark.parametrize("mode", [COUPLED, INDEPENDENT_CONSTANT])
def test_linear_follows_control_trace(mode):
    linear, _, control = run_simulation(40, PARAMS, IC, mode=mode)
    for t in range(1, 41):
        assert linear[t] == step_linear(linear[t - 1], control[t - 1], PARAMS)


def test_coupled_mode_uses_control_source():
    _, _, control = run_simulation(30, PARAMS, IC, mode=COUPLED)
    assert list(control) == [generate_control_signal(k) for k in range(30)]


def test_coupled_mode_nonlinear_recurrence():
    n = 25
    _, nonlinear, control = run_simulation(n, PARAMS, IC, mode=COUPLED)
    for t in range(1, n + 1):
        y_prev = 20.0 if t == 1 else nonlinear[t - 2]
        u_prev = 0.0 if t == 1 else control[t - 2]
        expected = step_nonlinear(nonlinear[t - 1], y_prev, control[t - 1], u_prev, PARAMS)
        assert nonlinear[t] == expected


def test_coupled_first_step_has_zero_previous_control():
    params = ModelParameters(a=0.0, b=0.0, c=0.0, d=1.0)
    _, nonlinear, _ = run_simulation(2, params, IC, mode=COUPLED)
    # sin(u[-1]) = sin(0) on the first step, sin(u[0]) on the second
    assert nonlinear[1] == 0.0
    assert nonlinear[2] == pytest.approx(np.sin(generate_control_signal(0)))


def test_independent_constant_nonlinear_recurrence():
    n = 30
    _, nonlinear, _ = run_simulation(n, PARAMS, IC, mode=INDEPENDENT_CONSTANT)
    for t in range(1, n + 1):
        y_prev = 20.0 if t == 1 else nonlinear[t - 2]
        assert nonlinear[t] == step_nonlinear(nonlinear[t - 1], y_prev, 5.0, 5.0, PARAMS)


def test_independent_constant_ignores_control_source():
    linear, _, control = run_simulation(
        5, PARAMS, IC, control_source=generate_control_signal, mode=INDEPENDENT_CONSTANT
    )
    assert list(control) == [5.0] * 5


def test_single_step_linear_scenario():
    params = ModelParameters(a=0.8, b=0.1)
    linear, _, _ = run_simulation(1, params, InitialCondition(y0=20.0, u0=5.0), mode=INDEPENDENT_CONSTANT)
    assert len(linear) == 2
    assert linear[0] == 20.0
    assert linear[1] == pytest.approx(16.5)


def test_single_step_nonlinear_scenario():
    linear, nonlinear, _ = run_simulation(1, PARAMS, IC, mode=INDEPENDENT_CONSTANT)
    expected = 0.8 * 20.0 - 0.12 * 400.0 + 0.05 * 5.0 + 0.02 * np.sin(5.0)
    assert nonlinear[1] == pytest.approx(expected, rel=1e-15)


def test_constant_source_in_coupled_mode_differs_only_in_first_disturbance():
    _, coupled, _ = run_simulation(1, PARAMS, IC, control_source=Constant(5.0), mode=COUPLED)
    _, constant, _ = run_simulation(1, PARAMS, IC, mode=INDEPENDENT_CONSTANT)
    assert constant[1] - coupled[1] == pytest.approx(0.02 * np.sin(5.0))


def test_runs_are_independent():
    first = run_simulation(20, PARAMS, IC)
    second = run_simulation(20, PARAMS, IC)
    for a, b in zip(first, second):
        assert a is not b
        np.testing.assert_array_equal(a, b)


def test_results_are_read_only():
    linear, nonlinear, control = run_simulation(3, PARAMS, IC)
    for arr in (linear, nonlinear, control):
        with pytest.raises(ValueError):
            arr[0] = 1.0


def test_unstable_coefficients_propagate_without_error():
    params = ModelParameters(a=2.0, b=1.0, c=1.0, d=1.0)
    linear, nonlinear, _ = run_simulation(2000, params, IC)
    assert np.isinf(linear[-1])
    assert not np.isfinite(nonlinear[-1])


def test_constant_mode_requires_u0():
    with pytest.raises(ValueError, match="u0"):
        run_simulation(5, PARAMS, InitialCondition(y0=20.0), mode=INDEPENDENT_CONSTANT)


def test_unknown_mode_rejected():
    with pytest.raises(ValueError, match="Unknown control mode"):
        run_simulation(5, PARAMS, IC, mode="feedforward")


@pytest.mark.parametrize("n", [0, -1, -100, 2.5, "10", True, None])
def test_run_simulation_rejects_invalid_step_count(n):
    with pytest.raises(ValueError):
        run_simulation(n, PARAMS, IC)


def test_run_simulation_has_no_ceiling():
    linear, _, _ = run_simulation(MAX_STEPS + 1, ModelParameters(a=0.5, b=0.0), IC, mode=INDEPENDENT_CONSTANT)
    assert len(linear) == MAX_STEPS + 2


@pytest.mark.parametrize("n", [0, -5, MAX_STEPS + 1])
def test_validate_step_count_rejects_out_of_range(n):
    with pytest.raises(ValueError):
        validate_step_count(n)


def test_validate_step_count_custom_ceiling():
    assert validate_step_count(100, max_steps=100) == 100
    with pytest.raises(ValueError, match="must not exceed"):
        validate_step_count(101, max_steps=100)


def test_validate_step_count_accepts_numpy_integers():
    assert validate_step_count(np.int64(12)) == 12


SYSTEM_SOURCE = """
from thermosim.models import InitialCondition, ModelParameters

params = ModelParameters(a=0.9, b=0.2)
initial_condition = InitialCondition(y0=1.0, u0=2.0)
mode = "independent-constant"
steps = 7
"""


def test_load_system_module(tmp_path):
    path = tmp_path / "my_system.py"
    path.write_text(SYSTEM_SOURCE)
    module = load_system_module(path)
    assert module.params == ModelParameters(a=0.9, b=0.2)
    assert module.mode == INDEPENDENT_CONSTANT
    assert module.steps == 7


def test_load_system_module_missing_params(tmp_path):
    path = tmp_path / "broken.py"
    path.write_text("initial_condition = None\n")
    with pytest.raises(AttributeError, match="params"):
        load_system_module(path)


def test_load_system_module_wrong_type(tmp_path):
    path = tmp_path / "broken.py"
    path.write_text(
        "from thermosim.models import InitialCondition\n"
        "params = (0.8, 0.1)\n"
        "initial_condition = InitialCondition(y0=1.0)\n"
    )
    with pytest.raises(TypeError, match="ModelParameters"):
        load_system_module(path)


def test_load_system_module_bad_mode(tmp_path):
    path = tmp_path / "broken.py"
    path.write_text(SYSTEM_SOURCE.replace('"independent-constant"', '"sometimes"'))
    with pytest.raises(ValueError, match="unknown control mode"):
        load_system_module(path)


def test_load_system_module_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_system_module(tmp_path / "nope.py")


def test_coupled_nonlinear_falls_back_to_control_source_past_trace():
    n = 8
    _, full_nonlinear, control = run_simulation(n, PARAMS, IC, mode=COUPLED)
    short_trace = control[:3]

    nonlinear = _simulate_nonlinear_coupled(n, PARAMS, IC.y0, short_trace, generate_control_signal)
    np.testing.assert_array_equal(nonlinear, full_nonlinear)


def test_coupled_nonlinear_with_empty_trace_uses_control_source():
    calls = []

    def source(k):
        calls.append(k)
        return 5.0

    nonlinear = _simulate_nonlinear_coupled(3, PARAMS, IC.y0, np.zeros(0), source)
    assert calls == [0, 1, 2]
    assert nonlinear[1] == step_nonlinear(20.0, 20.0, 5.0, 0.0, PARAMS)

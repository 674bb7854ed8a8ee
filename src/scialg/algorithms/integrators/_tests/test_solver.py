import time

import numpy as np
import pytest

from scialg.algorithms.integrators.configs import (_AdaptiveStepConfig,
                                                   _SolverConfig)
from scialg.algorithms.integrators.dormand_prince import _DormandPrince54
from scialg.algorithms.integrators.rk import _RK4, _Euler, _Midpoint
from scialg.algorithms.integrators.solver import ODESolver
from scialg.algorithms.integrators.types import StepperMethod, Trajectory
from scialg.algorithms.utils.exceptions import (IntegrationTimeoutError,
                                                InvalidConfigurationError,
                                                NonConvergentError)
from scialg.algorithms.vector import Vector

P0 = [0.0, 1.5, 1.0, 1.0]


def gravity(t, s):
    return Vector([s[2], s[3], 0.0, -9.81])


def _analytic_height(t):
    return 1.5 + t - 4.905 * t ** 2


@pytest.mark.parametrize("method, expected", [
    (StepperMethod.EULER, _Euler),
    (StepperMethod.MIDPOINT, _Midpoint),
    (StepperMethod.RUNGE_KUTTA, _RK4),
    (StepperMethod.DORMAND_PRINCE, _DormandPrince54),
    ("runge_kutta", _RK4),
    ("Dormand_Prince", _DormandPrince54),
])
def test_method_selection(method, expected):
    solver = ODESolver(1, 0.01, P0, gravity, method)
    assert isinstance(solver.stepper, expected)


def test_unknown_method():
    with pytest.raises(ValueError):
        ODESolver(1, 0.01, P0, gravity, "leapfrog")


@pytest.mark.parametrize("steps, step_size", [(-1, 0.01), (10, 0.0), (10, -0.5), (10, np.nan)])
def test_invalid_driver_configuration(steps, step_size):
    with pytest.raises(InvalidConfigurationError):
        ODESolver(steps, step_size, P0, gravity, StepperMethod.EULER)


def test_projectile_euler_300_steps():
    solver = ODESolver(300, 0.001, P0, gravity, StepperMethod.EULER)
    trajectory = solver.run()

    assert isinstance(trajectory, Trajectory)
    assert len(solver.data) == 300
    assert len(trajectory) == 300
    assert trajectory.states.shape == (300, 4)
    assert trajectory.times[-1] == pytest.approx(0.3)
    np.testing.assert_allclose(trajectory.step_sizes, 0.001)

    final = solver.data[-1]
    assert final[0] == pytest.approx(0.3, abs=1e-12)
    # Euler height: 1.5 + n h - 9.81 h^2 n (n - 1) / 2
    assert final[1] == pytest.approx(1.3600215, abs=1e-9)
    assert final[2] == 1.0
    assert final[3] == pytest.approx(1.0 - 9.81 * 0.3, abs=1e-12)
    assert final[1] == pytest.approx(_analytic_height(0.3), abs=5e-3)


def test_projectile_rk4_matches_parabola():
    solver = ODESolver(300, 0.001, P0, gravity, StepperMethod.RUNGE_KUTTA)
    trajectory = solver.run()
    np.testing.assert_allclose(trajectory.states[:, 1], _analytic_height(trajectory.times), atol=1e-12)


def test_projectile_dormand_prince_matches_parabola():
    solver = ODESolver(5, 0.001, P0, gravity, StepperMethod.DORMAND_PRINCE)
    trajectory = solver.run()
    assert np.all(np.diff(trajectory.times) > 0.0)
    np.testing.assert_allclose(np.diff(np.concatenate(([0.0], trajectory.times))),
                               trajectory.step_sizes, rtol=1e-12)
    np.testing.assert_allclose(trajectory.states[:, 1], _analytic_height(trajectory.times), rtol=1e-9, atol=1e-9)


def test_run_continues_from_last_state():
    solver = ODESolver(100, 0.001, P0, gravity, StepperMethod.MIDPOINT)
    solver.run()
    trajectory = solver.run()
    assert len(trajectory) == 200
    assert trajectory.times[-1] == pytest.approx(0.2)
    assert np.all(np.diff(trajectory.times) > 0.0)


def test_zero_steps_gives_empty_trajectory():
    solver = ODESolver(0, 0.001, P0, gravity, StepperMethod.EULER)
    trajectory = solver.run()
    assert len(trajectory) == 0
    assert trajectory.states.shape == (0, 4)
    times, states = trajectory.with_initial()
    assert times.tolist() == [0.0]
    assert states.tolist() == [P0]


def test_initial_time_offsets_the_clock():
    solver = ODESolver(10, 0.1, [1.0], lambda t, y: Vector([1.0]), StepperMethod.EULER, t0=5.0)
    trajectory = solver.run()
    assert trajectory.initial_time == 5.0
    assert trajectory.times[-1] == pytest.approx(6.0)
    assert trajectory.states[-1, 0] == pytest.approx(2.0)


def test_adaptive_settings_are_forwarded():
    cfg = _SolverConfig(adaptive=_AdaptiveStepConfig(atol=1e-9, rtol=1e-9, max_step=0.01))
    solver = ODESolver(20, 0.1, [1.0, 0.0], lambda t, s: Vector([s[1], -s[0]]),
                       StepperMethod.DORMAND_PRINCE, config=cfg)
    assert solver.stepper.config.atol == 1e-9
    trajectory = solver.run()
    assert np.all(trajectory.step_sizes <= 0.01)
    np.testing.assert_allclose(trajectory.states[:, 0], np.cos(trajectory.times), atol=1e-8)


def test_non_convergence_propagates():
    cfg = _SolverConfig(adaptive=_AdaptiveStepConfig(max_rejections=3))
    solver = ODESolver(5, 0.1, [1.0], lambda t, y: Vector([np.nan]),
                       StepperMethod.DORMAND_PRINCE, config=cfg)
    with pytest.raises(NonConvergentError):
        solver.run()
    assert solver.data == []


def test_deadline_interrupts_run():
    def slow(t, y):
        time.sleep(0.01)
        return Vector([1.0])

    solver = ODESolver(50, 0.1, [0.0], slow, StepperMethod.EULER,
                       config=_SolverConfig(deadline=0.005))
    with pytest.raises(IntegrationTimeoutError):
        solver.run()
    # states accepted before the deadline stay available
    assert 1 <= len(solver.data) < 50
    assert len(solver.times) == len(solver.data)


def test_invalid_deadline():
    with pytest.raises(InvalidConfigurationError):
        _SolverConfig(deadline=0.0)

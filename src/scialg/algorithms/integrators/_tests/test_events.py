import numpy as np
import pytest

from scialg.algorithms.integrators.configs import _EventConfig
from scialg.algorithms.integrators.events import (_direction_allows,
                                                  first_crossing)
from scialg.algorithms.integrators.solver import ODESolver
from scialg.algorithms.integrators.types import StepperMethod
from scialg.algorithms.utils.exceptions import (DimensionMismatchError,
                                                InvalidConfigurationError)
from scialg.algorithms.vector import Vector


def gravity(t, s):
    return Vector([s[2], s[3], 0.0, -9.81])


# root of 1.5 + t - 4.905 t^2 = 0
T_GROUND = (1.0 + np.sqrt(1.0 + 4.0 * 4.905 * 1.5)) / (2.0 * 4.905)


@pytest.mark.parametrize("g0, g1, direction, expected", [
    (-1.0, 1.0, 0, True),
    (-1.0, 1.0, 1, True),
    (-1.0, 1.0, -1, False),
    (1.0, -1.0, -1, True),
    (1.0, -1.0, 1, False),
    (1.0, 2.0, 0, False),
    (1.0, 0.0, -1, True),
    (1.0, 0.0, 1, False),
    (0.0, 1.0, 0, False),
])
def test_direction_rules(g0, g1, direction, expected):
    assert _direction_allows(g0, g1, direction) is expected


def test_projectile_does_not_land_within_300_steps():
    trajectory = ODESolver(300, 0.001, [0.0, 1.5, 1.0, 1.0], gravity, StepperMethod.EULER).run()
    result = first_crossing(trajectory, component=1)
    assert result.hit is False
    assert result.index is None


def test_projectile_lands_near_analytic_time():
    trajectory = ODESolver(1000, 0.001, [0.0, 1.5, 1.0, 1.0], gravity, StepperMethod.EULER).run()
    result = first_crossing(trajectory, component=1, config=_EventConfig(direction=-1))

    assert result.hit is True
    assert T_GROUND == pytest.approx(0.6643, abs=1e-4)
    assert result.t_before < result.t_after
    assert result.t_after - result.t_before == pytest.approx(0.001)
    assert result.t_after == pytest.approx(T_GROUND, abs=2e-3)
    assert result.y_before[1] > 0.0 >= result.y_after[1]
    assert trajectory.times[result.index] == result.t_after


def test_crossing_during_first_step_reports_initial_time():
    trajectory = ODESolver(3, 0.5, [-0.1], lambda t, y: Vector([1.0]), StepperMethod.EULER).run()
    result = first_crossing(trajectory, component=0)
    assert result.hit is True
    assert result.index == 0
    assert result.t_before == 0.0
    assert result.y_before == Vector([-0.1])


def test_crossing_level_and_direction():
    # y(t) = sin(t): rises through 0.5 first, falls through it later
    traj = ODESolver(400, 0.01, [0.0, 1.0], lambda t, s: Vector([s[1], -s[0]]),
                     StepperMethod.RUNGE_KUTTA).run()
    rising = first_crossing(traj, 0, level=0.5, config=_EventConfig(direction=1))
    falling = first_crossing(traj, 0, level=0.5, config=_EventConfig(direction=-1))
    assert rising.t_after == pytest.approx(np.pi / 6.0, abs=0.011)
    assert falling.t_after == pytest.approx(5.0 * np.pi / 6.0, abs=0.011)


def test_start_on_level_moving_away_no_hit():
    traj = ODESolver(10, 0.1, [0.0], lambda t, y: Vector([1.0]), StepperMethod.EULER).run()
    assert first_crossing(traj, 0).hit is False


def test_component_out_of_range():
    traj = ODESolver(2, 0.1, [0.0], lambda t, y: Vector([1.0]), StepperMethod.EULER).run()
    with pytest.raises(DimensionMismatchError):
        first_crossing(traj, 1)


def test_invalid_direction():
    with pytest.raises(InvalidConfigurationError):
        _EventConfig(direction=2)

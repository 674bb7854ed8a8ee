import numpy as np
import pytest

from scialg.algorithms.integrators.controller import _PIController


@pytest.fixture
def controller():
    return _PIController()


def test_initial_state(controller):
    assert controller.h_next == 0.0
    assert controller.err_old == 1e-4
    assert controller.rejected is False
    assert controller.alpha == pytest.approx(0.2)


def test_accept_keeps_current_step(controller):
    accepted, h = controller.success(0.5, 0.1)
    assert accepted is True
    assert h == 0.1
    assert controller.h_next == pytest.approx(0.1 * 0.9 * 0.5 ** -0.2)
    assert controller.err_old == 0.5
    assert controller.rejected is False


def test_reject_shrinks_step(controller):
    accepted, h = controller.success(2.0, 0.1)
    assert accepted is False
    assert h < 0.1
    assert h == pytest.approx(0.1 * 0.9 * 2.0 ** -0.2)
    assert controller.rejected is True


def test_zero_error_grows_by_max_scale(controller):
    accepted, h = controller.success(0.0, 0.1)
    assert accepted is True
    assert h == 0.1
    assert controller.h_next == pytest.approx(1.0)


def test_boundary_error_is_accepted(controller):
    accepted, _ = controller.success(1.0, 0.1)
    assert accepted is True


def test_err_old_is_floor_clamped(controller):
    controller.success(1e-9, 1.0)
    assert controller.err_old == 1e-4


def test_no_growth_right_after_rejection(controller):
    controller.success(3.0, 1.0)
    accepted, h = controller.success(0.01, 0.5)
    assert accepted is True
    assert h == 0.5
    # scale would be > 1 but growth is suppressed once
    assert controller.h_next == pytest.approx(0.5)
    assert controller.rejected is False

    controller.success(0.01, 0.5)
    assert controller.h_next == pytest.approx(0.5 * 0.9 * 0.01 ** -0.2)


def test_shrink_is_allowed_right_after_rejection(controller):
    controller.success(3.0, 1.0)
    # err close to 1 gives scale 0.9 < 1, which is kept
    controller.success(1.0, 0.5)
    assert controller.h_next == pytest.approx(0.45)


def test_rejected_scale_strictly_decreases_with_error():
    errs = [1.01, 1.5, 2.0, 5.0, 10.0, 100.0, 1000.0]
    new_h = []
    for err in errs:
        ctrl = _PIController()
        _, h = ctrl.success(err, 1.0)
        new_h.append(h)
    assert all(a > b for a, b in zip(new_h[:-1], new_h[1:]))


@pytest.mark.parametrize("err", np.logspace(-12, 12, 49))
def test_scale_is_clamped(err):
    ctrl = _PIController()
    h = 0.3
    accepted, h_new = ctrl.success(float(err), h)
    if accepted:
        scale = ctrl.h_next / h
    else:
        scale = h_new / h
    assert 0.2 - 1e-12 <= scale <= 10.0 + 1e-12


def test_large_error_uses_min_scale(controller):
    _, h = controller.success(1e12, 1.0)
    assert h == pytest.approx(0.2)


def test_infinite_error_is_rejected_with_min_scale(controller):
    accepted, h = controller.success(np.inf, 1.0)
    assert accepted is False
    assert h == pytest.approx(0.2)


def test_reset(controller):
    controller.success(5.0, 1.0)
    controller.reset()
    assert controller.rejected is False
    assert controller.h_next == 0.0
    assert controller.err_old == 1e-4


def test_beta_enters_alpha():
    ctrl = _PIController(beta=0.08)
    assert ctrl.alpha == pytest.approx(0.2 - 0.06)
    ctrl.success(0.5, 1.0)
    ctrl.success(0.5, 1.0)
    expected = 0.9 * 0.5 ** -(0.2 - 0.06) * 0.5 ** 0.08
    assert ctrl.h_next == pytest.approx(expected)

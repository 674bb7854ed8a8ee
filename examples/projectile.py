"""Example script: projectile under constant gravity integrated with every
stepping strategy, reporting when the trajectory reaches the ground.

Run with
    python examples/projectile.py
"""

import os
import sys

import numpy as np

sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from scialg import EventConfig, ODESolver, StepperMethod, Vector, first_crossing
from scialg.utils.log_config import logger

G = 9.81


def gravity(t: float, s: Vector) -> Vector:
    """State [x, y, vx, vy] under uniform gravity."""
    return Vector([s[2], s[3], 0.0, -G])


def main() -> None:
    p0 = [0.0, 1.5, 1.0, 1.0]
    t_ground = (1.0 + np.sqrt(1.0 + 2.0 * G * 1.5)) / G
    logger.info(f"Analytic landing time: {t_ground:.6f} s")

    for method in StepperMethod:
        solver = ODESolver(1000, 1e-3, p0, gravity, method)
        trajectory = solver.run()
        hit = first_crossing(trajectory, component=1, config=EventConfig(direction=-1))
        if hit.hit:
            logger.info(f"{method.name:<15} lands between t={hit.t_before:.6f} and "
                        f"t={hit.t_after:.6f} (x={hit.y_after[0]:.4f})")
        else:
            logger.info(f"{method.name:<15} still airborne at t={trajectory.times[-1]:.6f}")


if __name__ == "__main__":
    main()

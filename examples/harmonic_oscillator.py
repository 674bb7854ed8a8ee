"""Example script: energy drift of the fixed-step and adaptive steppers on
the harmonic oscillator x'' = -x over ten periods.

Run with
    python examples/harmonic_oscillator.py
"""

import os
import sys

import numpy as np

sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from scialg import AdaptiveStepConfig, ODESolver, SolverConfig, StepperMethod, Vector
from scialg.utils.log_config import logger


def oscillator(t: float, s: Vector) -> Vector:
    return Vector([s[1], -s[0]])


def main() -> None:
    h = 0.01
    n_steps = int(round(10 * 2.0 * np.pi / h))
    config = SolverConfig(adaptive=AdaptiveStepConfig(atol=1e-8, rtol=1e-8))

    for method in StepperMethod:
        # the adaptive stepper needs far fewer steps to cover the same span
        steps = n_steps if method is not StepperMethod.DORMAND_PRINCE else 500
        solver = ODESolver(steps, h, [1.0, 0.0], oscillator, method, config=config)
        trajectory = solver.run()
        energy = np.sum(trajectory.states ** 2, axis=1)
        drift = np.max(np.abs(energy - 1.0))
        logger.info(f"{method.name:<15} t_end={trajectory.times[-1]:8.3f}  max |E - 1| = {drift:.3e}  "
                    f"evaluations={solver.stepper.n_evaluations}")


if __name__ == "__main__":
    main()

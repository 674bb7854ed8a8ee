import numpy as np

A = np.array([
    [0.0, 0.0],
    [0.5, 0.0],
], dtype=np.float64)

B = np.array([0.0, 1.0], dtype=np.float64)

import numpy as np

A = np.array([[0.0]], dtype=np.float64)

B = np.array([1.0], dtype=np.float64)

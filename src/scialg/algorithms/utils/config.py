# Numerical defaults shared by the integrators

FASTMATH = False  # Global flag for Numba's fastmath option

# Error tolerances of the adaptive stepper
ATOL = 1e-2
RTOL = 1e-2

# Consecutive rejections allowed inside one adaptive step
MAX_REJECTIONS = 100

# Lower clamp of the controller's remembered error
ERR_FLOOR = 1e-4

# config.py

import torch

# Dtype for integer tensor points when they are seeded
DTYPE = torch.float64


# ==========================
#  Iterative routines
# ==========================

# Heron iteration cap and relative step tolerance
BABYLONIAN_ITERATIONS = 100
BABYLONIAN_TOLERANCE = 1e-15

ODE_NUM_STEPS = 100
ODE_METHOD = "rk4"

NEWTON_TOLERANCE = 1e-12
NEWTON_MAX_ITER = 50

"""
dualdiff: forward-mode automatic differentiation with dual numbers.
"""
from .dual import Dual, DivisionByZero, DomainError
from .functions import FUNCTIONS, sin, cos, tan, exp, log, sqrt, sinh, cosh, tanh, sigmoid
from .engine import derivative, value_and_derivative, derivative_fn, seed
from .algorithms import babylonian_sqrt, solve_ode, newton

__version__ = "0.1.0"

"""
Forward-mode differentiation entry points.

derivative(f, x) seeds Dual(x, 1), evaluates f once and reads the tangent of
the result. Nothing is cached between calls.
"""
import logging
import torch

from . import config
from .dual import Dual, _is_number

logger = logging.getLogger(__name__)


def seed(x):
    """Dual(x, 1): the variable being differentiated, with dx/dx = 1."""
    if isinstance(x, Dual):
        raise TypeError("Cannot differentiate at a Dual point, nested derivatives are not supported")
    if isinstance(x, (int, float)):
        return Dual(float(x), 1.0)
    if torch.is_tensor(x):
        if not torch.is_floating_point(x):
            x = x.to(config.DTYPE)
        return Dual(x, torch.ones_like(x))
    raise TypeError(f"Unsupported type for differentiation point: {type(x)}")


def value_and_derivative(f, x):
    """
    Evaluate f at x and its derivative in a single pass.

    Args:
        f: callable of one argument built from Dual-compatible operations.
        x: float, int or tensor. Tensors are differentiated element-wise.
    Returns:
        Tuple (f(x), f'(x)).
    """
    point = seed(x)
    logger.debug(f"Differentiating {getattr(f, '__name__', f)} at {x}")
    result = f(point)

    if isinstance(result, Dual):
        return result.primal, result.tangent

    if not _is_number(result):
        raise TypeError(f"f must return a number, tensor or Dual, got {type(result)}")

    # f never touched its argument
    if torch.is_tensor(point.primal):
        return result, torch.zeros_like(point.primal)
    return result, 0.0


def derivative(f, x):
    """Derivative of f at x. Errors raised while evaluating f propagate as-is."""
    _, tangent = value_and_derivative(f, x)
    return tangent


def derivative_fn(f):
    """Return the function x -> f'(x)."""
    def df(x):
        return derivative(f, x)
    df.__name__ = f"d_{getattr(f, '__name__', 'f')}"
    return df

"""
Iterative numeric routines written only with generic arithmetic.

Because every step is built from +, -, *, / they accept floats, tensors or
Dual values, so `derivative` differentiates straight through the iteration
without any change to the routine.
"""
import logging
import torch

from . import config
from .dual import Dual, DivisionByZero, DomainError, _all, _any
from .engine import value_and_derivative

logger = logging.getLogger(__name__)


def babylonian_sqrt(x, iterations=config.BABYLONIAN_ITERATIONS, rtol=config.BABYLONIAN_TOLERANCE):
    """
    Square root by Heron's iteration t <- (t + x/t) / 2, starting at (1 + x) / 2.

    Stops once the update is within rtol of the iterate, or after `iterations`
    steps with a warning. Zero maps to zero; a Dual at zero raises DomainError
    since the derivative is unbounded there.
    """
    if _any(x < 0):
        raise DomainError(f"babylonian_sqrt(x) requires x >= 0, got x={x}")
    # primal comparison, x >= 0 already holds
    at_zero = x <= 0
    if isinstance(x, Dual) and _any(at_zero):
        raise DomainError(f"babylonian_sqrt(x) has no derivative at x=0, got x={x}")
    if not torch.is_tensor(at_zero) and at_zero:
        return 0.0

    t = (1 + x) / 2
    for i in range(iterations):
        t_next = (t + x / t) / 2
        done = abs(t_next - t) <= rtol * t_next
        t = t_next
        if torch.is_tensor(at_zero):
            done = done | at_zero
        if _all(done):
            logger.debug(f"babylonian_sqrt converged in {i + 1} iterations")
            break
    else:
        logger.warning(f"babylonian_sqrt did not converge after {iterations} iterations.")

    if torch.is_tensor(x):
        t = torch.where(at_zero, torch.zeros_like(t), t)
    return t


def _euler_step(rhs, u, p, t, dt):
    return u + dt * rhs(u, p, t)


def _rk4_step(rhs, u, p, t, dt):
    k1 = rhs(u, p, t)
    k2 = rhs(u + 0.5 * dt * k1, p, t + 0.5 * dt)
    k3 = rhs(u + 0.5 * dt * k2, p, t + 0.5 * dt)
    k4 = rhs(u + dt * k3, p, t + dt)
    return u + dt / 6 * (k1 + 2 * k2 + 2 * k3 + k4)


_STEPPERS = {
    'euler': _euler_step,
    'rk4': _rk4_step,
}


def solve_ode(rhs, u0, t_span, p=None, num_steps=config.ODE_NUM_STEPS, method=config.ODE_METHOD):
    """
    Fixed-step integration of du/dt = rhs(u, p, t).

    The state may be a number, an element-wise tensor or a Dual; so may p and
    the end points of t_span. Differentiating the final state with respect to
    p (or u0) yields the forward sensitivity of the solution.

    Args:
        rhs: right-hand side, called as rhs(u, p, t)
        u0: initial condition u(t0)
        t_span: tuple (t0, t1)
        p: parameters passed through to rhs
        num_steps: number of equal time steps
        method: 'euler' or 'rk4'
    Returns:
        Tuple (ts, us) of lists with num_steps + 1 entries each
    """
    if num_steps < 1:
        raise ValueError(f"num_steps must be at least 1, got {num_steps}")
    if method not in _STEPPERS:
        raise ValueError(f"Unknown ODE method: {method}")
    step = _STEPPERS[method]

    t0, t1 = t_span
    dt = (t1 - t0) / num_steps

    ts = [t0]
    us = [u0]
    u = u0
    for i in range(num_steps):
        t = t0 + i * dt
        u = step(rhs, u, p, t, dt)
        ts.append(t0 + (i + 1) * dt)
        us.append(u)
    return ts, us


def newton(f, x0, tol=config.NEWTON_TOLERANCE, max_iter=config.NEWTON_MAX_ITER):
    """
    Root of f near x0 by Newton's method, with f' from forward-mode differentiation.

    Raises DivisionByZero when an iterate has a zero derivative. If the step
    never falls below tol the last iterate is returned and a warning logged.
    """
    x = x0
    step = None
    for i in range(max_iter):
        fx, dfx = value_and_derivative(f, x)
        if _any(dfx == 0):
            raise DivisionByZero(f"newton: zero derivative at x={x}")
        step = fx / dfx
        x = x - step
        if _all(abs(step) <= tol):
            logger.debug(f"newton converged in {i + 1} iterations")
            return x
    logger.warning(f"newton did not converge after {max_iter} iterations (last step {step}).")
    return x

"""
Elementary functions over numbers, tensors and duals.

Plain numbers are evaluated with `math`, tensors with `torch`. A Dual applies
the function to its primal with the matching backend and multiplies the
tangent by the derivative of the outer function (chain rule).
"""
import math
import torch

from .dual import Dual, DomainError, _all


def _scalar_sigmoid(x):
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    e = math.exp(x)
    return e / (1.0 + e)


def _check_domain(name, x, inside, requirement):
    if not _all(inside(x)):
        raise DomainError(f"{name}(x) requires {requirement}, got x={x}")


def _elementary(name, rule, scalar_fn=None, tensor_fn=None, domain=None, dual_domain=None):
    """
    Build `name` so that it dispatches on its argument.

    Args:
        rule: tangent of the result as rule(x, fx, t) with x the primal,
              fx the primal result and t the incoming tangent.
        domain: (predicate, description) checked on every argument.
        dual_domain: stricter check for duals, where the derivative must exist.
    """
    scalar_fn = scalar_fn or getattr(math, name)
    tensor_fn = tensor_fn or getattr(torch, name)

    def evaluate(x):
        if torch.is_tensor(x):
            return tensor_fn(x)
        return scalar_fn(x)

    def wrapper(u):
        if isinstance(u, Dual):
            x = u.primal
            check = dual_domain or domain
            if check:
                _check_domain(name, x, *check)
            fx = evaluate(x)
            return Dual(fx, rule(x, fx, u.tangent))

        if isinstance(u, (int, float)) or torch.is_tensor(u):
            if domain:
                _check_domain(name, u, *domain)
            return evaluate(u)

        raise TypeError(f"Unsupported type for {name}: {type(u)}")

    wrapper.__name__ = name
    wrapper.__qualname__ = name
    wrapper.__doc__ = f"{name}(u) for numbers, tensors and Dual values."
    return wrapper


def _cos(x):
    return torch.cos(x) if torch.is_tensor(x) else math.cos(x)


def _sin(x):
    return torch.sin(x) if torch.is_tensor(x) else math.sin(x)


def _cosh(x):
    return torch.cosh(x) if torch.is_tensor(x) else math.cosh(x)


def _sinh(x):
    return torch.sinh(x) if torch.is_tensor(x) else math.sinh(x)


_POSITIVE = (lambda x: x > 0, "x > 0")
_NON_NEGATIVE = (lambda x: x >= 0, "x >= 0")

sin = _elementary('sin', lambda x, fx, t: _cos(x) * t)
cos = _elementary('cos', lambda x, fx, t: -_sin(x) * t)
# tan'(x) = 1 + tan^2(x)
tan = _elementary('tan', lambda x, fx, t: (1 + fx * fx) * t)
exp = _elementary('exp', lambda x, fx, t: fx * t)
log = _elementary('log', lambda x, fx, t: t / x, domain=_POSITIVE)
# sqrt is finite at 0 but its derivative is not
sqrt = _elementary('sqrt', lambda x, fx, t: t / (2 * fx), domain=_NON_NEGATIVE, dual_domain=_POSITIVE)
sinh = _elementary('sinh', lambda x, fx, t: _cosh(x) * t)
cosh = _elementary('cosh', lambda x, fx, t: _sinh(x) * t)
# tanh'(x) = 1 - tanh^2(x)
tanh = _elementary('tanh', lambda x, fx, t: (1 - fx * fx) * t)
# s'(x) = s(x) * (1 - s(x))
sigmoid = _elementary('sigmoid', lambda x, fx, t: fx * (1 - fx) * t, scalar_fn=_scalar_sigmoid)

FUNCTIONS = {
    'sin': sin, 'cos': cos, 'tan': tan,
    'exp': exp, 'log': log, 'sqrt': sqrt,
    'sinh': sinh, 'cosh': cosh, 'tanh': tanh,
    'sigmoid': sigmoid,
}

# Method form: Dual(x, 1).sin() == sin(Dual(x, 1))
for _name, _fn in FUNCTIONS.items():
    setattr(Dual, _name, _fn)

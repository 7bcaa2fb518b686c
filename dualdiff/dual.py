"""
Dual numbers for forward-mode differentiation.

A Dual carries a primal value and a tangent, the derivative of that value
with respect to the seeded variable. Every operator returns a new Dual whose
tangent follows the chain rule. Plain numbers and tensors combined with a
Dual are lifted to Dual(c, 0), from either side of the operator.
"""
import math
import torch


class DivisionByZero(ZeroDivisionError):
    """Raised when a divisor's primal is exactly zero."""


class DomainError(ValueError):
    """Raised when a function is evaluated outside its real domain."""


def _is_number(x):
    return isinstance(x, (int, float)) or torch.is_tensor(x)


def _backend(x):
    """Module providing elementwise math for x (torch for tensors, math otherwise)."""
    return torch if torch.is_tensor(x) else math


def _any(cond):
    if torch.is_tensor(cond):
        return bool(cond.any())
    return bool(cond)


def _all(cond):
    if torch.is_tensor(cond):
        return bool(cond.all())
    return bool(cond)


def _sign(x):
    if torch.is_tensor(x):
        return torch.sign(x)
    return float((x > 0) - (x < 0))


def _same(a, b):
    if torch.is_tensor(a) or torch.is_tensor(b):
        return bool(torch.all(torch.as_tensor(a) == torch.as_tensor(b)))
    return a == b


class Dual:
    """
    Immutable pair (primal, tangent) with value semantics.

    Ordering comparisons look at the primal only, so differentiable code may
    branch on the value of its argument. Equality compares both fields.
    """
    __slots__ = ("_primal", "_tangent")

    def __init__(self, primal, tangent=0.0):
        if isinstance(primal, Dual) or isinstance(tangent, Dual):
            raise TypeError("Dual components must be numbers or tensors, nested duals are not supported")
        if not _is_number(primal) or not _is_number(tangent):
            raise TypeError(f"Unsupported Dual components: {type(primal)}, {type(tangent)}")
        self._primal = primal
        self._tangent = tangent

    @property
    def primal(self):
        return self._primal

    @property
    def tangent(self):
        return self._tangent

    @classmethod
    def lift(cls, value):
        """Treat a constant as Dual(value, 0); duals pass through unchanged."""
        wrapped = cls._wrap(value)
        if wrapped is None:
            raise TypeError(f"Cannot lift {type(value)} to a Dual")
        return wrapped

    @staticmethod
    def _wrap(other):
        if isinstance(other, Dual):
            return other
        if _is_number(other):
            return Dual(other, 0.0)
        return None

    # Arithmetic

    def __add__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        return Dual(self.primal + other.primal, self.tangent + other.tangent)

    def __radd__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        return other.__add__(self)

    def __sub__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        return Dual(self.primal - other.primal, self.tangent - other.tangent)

    def __rsub__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        return other.__sub__(self)

    def __mul__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        # (uv)' = uv' + u'v
        return Dual(self.primal * other.primal,
                    self.primal * other.tangent + self.tangent * other.primal)

    def __rmul__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        return other.__mul__(self)

    def __truediv__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        ax, bx = self.primal, other.primal
        if _any(bx == 0):
            raise DivisionByZero(f"division by a Dual with zero primal: {other!r}")
        # (u/v)' = (vu' - uv') / v^2
        return Dual(ax / bx, (bx * self.tangent - ax * other.tangent) / (bx * bx))

    def __rtruediv__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        return other.__truediv__(self)

    def __pow__(self, other):
        x = self.primal
        if isinstance(other, (int, float)):
            n = other
            if n == 0:
                return Dual(x ** 0, self.tangent * 0.0)
            if not float(n).is_integer() and _any(x < 0):
                raise DomainError(f"x**{n} requires x >= 0, got x={x}")
            if n < 1 and _any(x == 0):
                raise DivisionByZero(f"x**{n} has no finite derivative at x=0")
            # (u^n)' = n * u^(n-1) * u'
            return Dual(x ** n, n * x ** (n - 1) * self.tangent)
        other = self._wrap(other)
        if other is None: return NotImplemented
        return _general_pow(self, other)

    def __rpow__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        return _general_pow(other, self)

    def __neg__(self):
        return Dual(-self.primal, -self.tangent)

    def __pos__(self):
        return self

    def __abs__(self):
        return Dual(abs(self.primal), _sign(self.primal) * self.tangent)

    # Comparisons

    def __lt__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        return self.primal < other.primal

    def __le__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        return self.primal <= other.primal

    def __gt__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        return self.primal > other.primal

    def __ge__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        return self.primal >= other.primal

    def __eq__(self, other):
        other = self._wrap(other)
        if other is None: return NotImplemented
        return _same(self.primal, other.primal) and _same(self.tangent, other.tangent)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented: return result
        return not result

    def __hash__(self):
        # tensors hash by identity, which would disagree with __eq__
        if torch.is_tensor(self.primal) or torch.is_tensor(self.tangent):
            raise TypeError("unhashable Dual: tensor fields")
        # equal to its primal when the tangent is zero
        if self.tangent == 0:
            return hash(self.primal)
        return hash((self.primal, self.tangent))

    def __repr__(self):
        return f"Dual({self.primal!r}, {self.tangent!r})"


def _general_pow(base, exp):
    """u^v with both sides possibly carrying a tangent: (u^v)' = u^v * (v' log u + v u'/u)."""
    ax, bx = base.primal, exp.primal
    if not _all(ax > 0):
        raise DomainError(f"x**y with a non-constant exponent requires x > 0, got x={ax}")
    value = ax ** bx
    log_ax = _backend(ax).log(ax)
    return Dual(value, value * (exp.tangent * log_ax + bx * base.tangent / ax))

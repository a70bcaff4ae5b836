from __future__ import annotations

import jax

from . import continued_fraction as cf


class OutOfRangeError(ValueError):
    def __init__(self, name: str, value, lo: float, hi: float) -> None:
        super().__init__(f"{name}: {value} out of [{lo}, {hi}] range")
        self.name = name
        self.value = value
        self.lo = lo
        self.hi = hi


class NumberIsTooSmallError(ValueError):
    def __init__(self, name: str, value, minimum: float) -> None:
        super().__init__(f"{name}: {value} is smaller than the minimum ({minimum})")
        self.name = name
        self.value = value
        self.minimum = minimum


class ConvergenceError(ArithmeticError):
    pass


class MaxCountExceededError(ConvergenceError):
    def __init__(self, max_count: int, x) -> None:
        super().__init__(f"continued fraction did not converge in {max_count} iterations for x = {x}")
        self.max_count = max_count
        self.x = x


def _concrete(cond) -> bool | None:
    # Traced values carry no data; guards only fire on the eager path.
    try:
        return bool(cond)
    except jax.errors.ConcretizationTypeError:
        return None


def check_in_range(value, lo: float, hi: float, name: str) -> None:
    if _concrete((value >= lo) & (value <= hi)) is False:
        raise OutOfRangeError(name, value, lo, hi)


def check_not_too_small(value, minimum: float, name: str) -> None:
    if _concrete(value >= minimum) is False:
        raise NumberIsTooSmallError(name, value, minimum)


def check_convergence(status, max_iterations: int, x) -> None:
    if _concrete(status == cf.CONVERGED) in (None, True):
        return
    code = int(status)
    if code == cf.MAX_COUNT_EXCEEDED:
        raise MaxCountExceededError(max_iterations, x)
    if code == cf.INFINITE_DIVERGENCE:
        raise ConvergenceError(f"continued fraction diverged to infinity for x = {x}")
    if code == cf.NAN_DIVERGENCE:
        raise ConvergenceError(f"continued fraction diverged to NaN for x = {x}")


__all__ = [
    "OutOfRangeError",
    "NumberIsTooSmallError",
    "ConvergenceError",
    "MaxCountExceededError",
    "check_in_range",
    "check_not_too_small",
    "check_convergence",
]

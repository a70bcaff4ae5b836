from __future__ import annotations

from contextlib import contextmanager

_EPSILON = 1.0e-14
_MAX_ITERATIONS = 2147483647


def dps_to_epsilon(dps: int) -> float:
    return 10.0 ** (-int(dps))


def set_epsilon(epsilon: float) -> None:
    global _EPSILON
    epsilon = float(epsilon)
    if not epsilon > 0.0:
        raise ValueError(f"epsilon must be positive, got {epsilon}")
    _EPSILON = epsilon


def set_dps(dps: int) -> None:
    set_epsilon(dps_to_epsilon(dps))


def set_max_iterations(max_iterations: int) -> None:
    global _MAX_ITERATIONS
    max_iterations = int(max_iterations)
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
    _MAX_ITERATIONS = max_iterations


def get_epsilon() -> float:
    return _EPSILON


def get_max_iterations() -> int:
    return _MAX_ITERATIONS


@contextmanager
def workeps(epsilon: float):
    old = _EPSILON
    set_epsilon(epsilon)
    try:
        yield
    finally:
        set_epsilon(old)


@contextmanager
def workdps(dps: int):
    with workeps(dps_to_epsilon(dps)):
        yield


@contextmanager
def workiterations(max_iterations: int):
    old = _MAX_ITERATIONS
    set_max_iterations(max_iterations)
    try:
        yield
    finally:
        set_max_iterations(old)


def resolve(epsilon: float | None, max_iterations: int | None) -> tuple[float, int]:
    """Fill unset convergence parameters from the current defaults."""
    eps = _EPSILON if epsilon is None else float(epsilon)
    n = _MAX_ITERATIONS if max_iterations is None else int(max_iterations)
    return eps, n


__all__ = [
    "dps_to_epsilon",
    "set_epsilon",
    "set_dps",
    "set_max_iterations",
    "get_epsilon",
    "get_max_iterations",
    "workeps",
    "workdps",
    "workiterations",
    "resolve",
]

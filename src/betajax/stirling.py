"""Stirling-correction helpers for log Beta.

delta(x) is the residual of Stirling's formula,

    log Gamma(x) = (x - 1/2) log x - x + log(2 pi) / 2 + delta(x),

and is small and smooth for x >= 10. The helpers below combine delta terms
(and short log Gamma sums) without subtracting large, nearly equal log Gamma
values. Each public helper checks its argument domain; the ``_``-prefixed
kernels do not and are what :mod:`betajax.log_beta` calls.
"""

from __future__ import annotations

import jax
from jax import lax
import jax.numpy as jnp

from . import checks
from .gamma1p import _log_gamma1p

jax.config.update("jax_enable_x64", True)

# D_k = B_{2k+2} / ((2k+2)(2k+1)), delta(x) = sum_k D_k x^-(2k+1).
_DELTA = jnp.asarray(
    [
        1.0 / 12.0,  # B2 / (2 * 1)
        -1.0 / 360.0,  # B4 / (4 * 3)
        1.0 / 1260.0,  # B6 / (6 * 5)
        -1.0 / 1680.0,  # B8 / (8 * 7)
        1.0 / 1188.0,  # B10 / (10 * 9)
        -691.0 / 360360.0,  # B12 / (12 * 11)
        1.0 / 156.0,  # B14 / (14 * 13)
        -3617.0 / 122400.0,  # B16 / (16 * 15)
        43867.0 / 244188.0,  # B18 / (18 * 17)
        -174611.0 / 125400.0,  # B20 / (20 * 19)
        854513.0 / 63756.0,  # B22 / (22 * 21)
        -236364091.0 / 1506960.0,  # B24 / (24 * 23)
        8553103.0 / 3900.0,  # B26 / (26 * 25)
        -23749461029.0 / 657720.0,  # B28 / (28 * 27)
        8615841276005.0 / 12460140.0,  # B30 / (30 * 29)
    ],
    dtype=jnp.float64,
)
_DELTA_POLY = _DELTA[::-1]
_N_DELTA = _DELTA.shape[0]


@jax.jit
def _stirling_delta(x: jax.Array) -> jax.Array:
    x = jnp.asarray(x, dtype=jnp.float64)
    t = 1.0 / (x * x)
    return jnp.polyval(_DELTA_POLY, t) / x


@jax.jit
def _delta_minus_delta_sum(a: jax.Array, b: jax.Array) -> jax.Array:
    a = jnp.asarray(a, dtype=jnp.float64)
    b = jnp.asarray(b, dtype=jnp.float64)
    h = a / b
    p = h / (1.0 + h)
    q = 1.0 / (1.0 + h)
    q2 = q * q

    # s_k = 1 + q + ... + q^(2k), so that p * s_k = 1 - q^(2k+1)
    def step(s_prev, _):
        s = 1.0 + (q + q2 * s_prev)
        return s, s

    _, tail = lax.scan(step, jnp.float64(1.0), None, length=_N_DELTA - 1)
    s = jnp.concatenate([jnp.ones((1,), dtype=jnp.float64), tail])

    t = 1.0 / (b * b)
    w = jnp.polyval((_DELTA * s)[::-1], t)
    return w * p / b


@jax.jit
def _log_gamma_sum(a: jax.Array, b: jax.Array) -> jax.Array:
    a = jnp.asarray(a, dtype=jnp.float64)
    b = jnp.asarray(b, dtype=jnp.float64)
    x = (a - 1.0) + (b - 1.0)
    near = _log_gamma1p(1.0 + x)
    mid = _log_gamma1p(x) + jnp.log1p(x)
    far = _log_gamma1p(x - 1.0) + jnp.log(x * (1.0 + x))
    return jnp.where(x <= 0.5, near, jnp.where(x <= 1.5, mid, far))


@jax.jit
def _log_gamma_minus_log_gamma_sum(a: jax.Array, b: jax.Array) -> jax.Array:
    a = jnp.asarray(a, dtype=jnp.float64)
    b = jnp.asarray(b, dtype=jnp.float64)
    ordered = a <= b
    d = jnp.where(ordered, b + (a - 0.5), a + (b - 0.5))
    # with a > b, a + b > 2b and delta(b) - delta(a + b) does not cancel
    w = jnp.where(
        ordered,
        _delta_minus_delta_sum(jnp.minimum(a, b), b),
        _stirling_delta(b) - _stirling_delta(a + b),
    )
    u = d * jnp.log1p(a / b)
    v = a * (jnp.log(b) - 1.0)
    return jnp.where(u <= v, (w - u) - v, (w - v) - u)


@jax.jit
def _sum_delta_minus_delta_sum(p: jax.Array, q: jax.Array) -> jax.Array:
    p = jnp.asarray(p, dtype=jnp.float64)
    q = jnp.asarray(q, dtype=jnp.float64)
    a = jnp.minimum(p, q)
    b = jnp.maximum(p, q)
    return _stirling_delta(a) + _delta_minus_delta_sum(a, b)


def stirling_delta(x: jax.Array) -> jax.Array:
    """Return delta(x) for ``x >= 10``."""
    checks.check_not_too_small(x, 10.0, "x")
    return _stirling_delta(x)


def delta_minus_delta_sum(a: jax.Array, b: jax.Array) -> jax.Array:
    """Return ``delta(b) - delta(a + b)`` for ``0 <= a <= b`` and ``b >= 10``."""
    checks.check_in_range(a, 0.0, b, "a")
    checks.check_not_too_small(b, 10.0, "b")
    return _delta_minus_delta_sum(a, b)


def log_gamma_sum(a: jax.Array, b: jax.Array) -> jax.Array:
    """Return ``log Gamma(a + b)`` for ``1 <= a <= 2`` and ``1 <= b <= 2``.

    Raises:
        OutOfRangeError: if either argument lies outside ``[1, 2]``.
    """
    checks.check_in_range(a, 1.0, 2.0, "a")
    checks.check_in_range(b, 1.0, 2.0, "b")
    return _log_gamma_sum(a, b)


def log_gamma_minus_log_gamma_sum(a: jax.Array, b: jax.Array) -> jax.Array:
    """Return ``log Gamma(b) - log Gamma(a + b)`` for ``a >= 0`` and ``b >= 10``.

    The difference is formed from the Stirling expansion in ``1 / b`` so that
    no large log Gamma values are subtracted.

    Raises:
        NumberIsTooSmallError: if ``a < 0`` or ``b < 10``.
    """
    checks.check_not_too_small(a, 0.0, "a")
    checks.check_not_too_small(b, 10.0, "b")
    return _log_gamma_minus_log_gamma_sum(a, b)


def sum_delta_minus_delta_sum(p: jax.Array, q: jax.Array) -> jax.Array:
    """Return ``delta(p) + delta(q) - delta(p + q)`` for ``p, q >= 10``.

    Raises:
        NumberIsTooSmallError: if either argument is below 10.
    """
    checks.check_not_too_small(p, 10.0, "p")
    checks.check_not_too_small(q, 10.0, "q")
    return _sum_delta_minus_delta_sum(p, q)


__all__ = [
    "stirling_delta",
    "delta_minus_delta_sum",
    "log_gamma_sum",
    "log_gamma_minus_log_gamma_sum",
    "sum_delta_minus_delta_sum",
]

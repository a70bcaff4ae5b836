"""log B(a, b) with a regime-specific evaluation for every positive (a, b).

With a = min(p, q) and b = max(p, q), the quadrant is split into the
:class:`BetaRegime` bands. Each band has its own branch function and exactly
one of them runs, selected by :func:`classify_regime` through ``lax.switch``.
The branches call the unchecked Stirling kernels and only inside their
domains.
"""

from __future__ import annotations

import enum

import jax
from jax import lax
import jax.numpy as jnp
import jax.scipy.special as jsp

from .gamma1p import _log_gamma1p
from .stirling import _log_gamma_minus_log_gamma_sum
from .stirling import _log_gamma_sum
from .stirling import _sum_delta_minus_delta_sum

jax.config.update("jax_enable_x64", True)

_HALF_LOG_TWO_PI = jnp.float64(0.91893853320467274178)
# a < 10 and b < 10 wherever arguments are shifted, so (x - 1) is
# peeled off at most 8 times before x lands in [1, 2].
_MAX_SHIFT = 8


class BetaRegime(enum.IntEnum):
    LARGE = 0
    MEDIUM_HUGE = 1
    MEDIUM_SMALL = 2
    MEDIUM_LARGE = 3
    UNIT_MEDIUM = 4
    UNIT_LARGE = 5
    UNIT_PAIR = 6
    SMALL_LARGE = 7
    DIRECT = 8


def classify_regime(p: jax.Array, q: jax.Array) -> jax.Array:
    p = jnp.asarray(p, dtype=jnp.float64)
    q = jnp.asarray(q, dtype=jnp.float64)
    a = jnp.minimum(p, q)
    b = jnp.maximum(p, q)
    medium = a > 2.0
    unit = a >= 1.0
    return jnp.select(
        [
            a >= 10.0,
            medium & (b > 1000.0),
            medium & (b < 10.0),
            medium,
            unit & (b > 2.0) & (b < 10.0),
            unit & (b >= 10.0),
            unit,
            b >= 10.0,
        ],
        [
            int(BetaRegime.LARGE),
            int(BetaRegime.MEDIUM_HUGE),
            int(BetaRegime.MEDIUM_SMALL),
            int(BetaRegime.MEDIUM_LARGE),
            int(BetaRegime.UNIT_MEDIUM),
            int(BetaRegime.UNIT_LARGE),
            int(BetaRegime.UNIT_PAIR),
            int(BetaRegime.SMALL_LARGE),
        ],
        default=int(BetaRegime.DIRECT),
    ).astype(jnp.int32)


def _shift_down(x: jax.Array, factor) -> tuple[jax.Array, jax.Array]:
    """Apply Gamma(x + 1) = x Gamma(x) until x <= 2, collecting factor(x)."""

    def body(_, state):
        xc, prod = state
        do = xc > 2.0
        xn = jnp.where(do, xc - 1.0, xc)
        prod = jnp.where(do, prod * factor(xn), prod)
        return xn, prod

    return lax.fori_loop(0, _MAX_SHIFT, body, (x, jnp.float64(1.0)))


def _large(a: jax.Array, b: jax.Array) -> jax.Array:
    w = _sum_delta_minus_delta_sum(a, b)
    h = a / b
    c = h / (1.0 + h)
    u = -(a - 0.5) * jnp.log(c)
    v = b * jnp.log1p(h)
    base = (-0.5 * jnp.log(b) + _HALF_LOG_TWO_PI) + w
    return jnp.where(u <= v, (base - u) - v, (base - v) - u)


def _medium_huge(a: jax.Array, b: jax.Array) -> jax.Array:
    n = jnp.floor(a - 1.0)

    def body(i, state):
        ared, prod = state
        do = jnp.float64(i) < n
        ared = jnp.where(do, ared - 1.0, ared)
        prod = jnp.where(do, prod * (ared / (1.0 + ared / b)), prod)
        return ared, prod

    ared, prod = lax.fori_loop(0, _MAX_SHIFT, body, (a, jnp.float64(1.0)))
    return (jnp.log(prod) - n * jnp.log(b)) + (jsp.gammaln(ared) + _log_gamma_minus_log_gamma_sum(ared, b))


def _shift_a(a: jax.Array, b: jax.Array) -> tuple[jax.Array, jax.Array]:
    def factor(ared):
        h = ared / b
        return h / (1.0 + h)

    return _shift_down(a, factor)


def _medium_small(a: jax.Array, b: jax.Array) -> jax.Array:
    ared, prod1 = _shift_a(a, b)
    bred, prod2 = _shift_down(b, lambda bred: bred / (ared + bred))
    return jnp.log(prod1) + jnp.log(prod2) + (jsp.gammaln(ared) + (jsp.gammaln(bred) - _log_gamma_sum(ared, bred)))


def _medium_large(a: jax.Array, b: jax.Array) -> jax.Array:
    ared, prod1 = _shift_a(a, b)
    return jnp.log(prod1) + jsp.gammaln(ared) + _log_gamma_minus_log_gamma_sum(ared, b)


def _unit_medium(a: jax.Array, b: jax.Array) -> jax.Array:
    bred, prod = _shift_down(b, lambda bred: bred / (a + bred))
    return jnp.log(prod) + (jsp.gammaln(a) + (jsp.gammaln(bred) - _log_gamma_sum(a, bred)))


def _unit_large(a: jax.Array, b: jax.Array) -> jax.Array:
    return jsp.gammaln(a) + _log_gamma_minus_log_gamma_sum(a, b)


def _unit_pair(a: jax.Array, b: jax.Array) -> jax.Array:
    return jsp.gammaln(a) + jsp.gammaln(b) - _log_gamma_sum(a, b)


def _log_gamma_small(x: jax.Array) -> jax.Array:
    """log Gamma(x) for 0 < x < 3, always through log Gamma(1 + t) with -0.5 <= t <= 1.5."""
    low = _log_gamma1p(jnp.minimum(x, 0.5)) - jnp.log(x)
    mid = _log_gamma1p(jnp.clip(x - 1.0, -0.5, 1.5))
    high = jnp.log(jnp.maximum(x - 1.0, 1.0)) + _log_gamma1p(jnp.clip(x - 2.0, -0.5, 1.5))
    return jnp.where(x < 0.5, low, jnp.where(x <= 2.5, mid, high))


def _small_large(a: jax.Array, b: jax.Array) -> jax.Array:
    return _log_gamma_small(a) + _log_gamma_minus_log_gamma_sum(a, b)


def _direct(a: jax.Array, b: jax.Array) -> jax.Array:
    # b is left alone below 2, so bred <= 2 and a + bred < 3
    bred, prod = _shift_down(b, lambda bred: bred / (a + bred))
    return jnp.log(prod) + (_log_gamma_small(a) + (_log_gamma_small(bred) - _log_gamma_small(a + bred)))


_BRANCHES = {
    BetaRegime.LARGE: _large,
    BetaRegime.MEDIUM_HUGE: _medium_huge,
    BetaRegime.MEDIUM_SMALL: _medium_small,
    BetaRegime.MEDIUM_LARGE: _medium_large,
    BetaRegime.UNIT_MEDIUM: _unit_medium,
    BetaRegime.UNIT_LARGE: _unit_large,
    BetaRegime.UNIT_PAIR: _unit_pair,
    BetaRegime.SMALL_LARGE: _small_large,
    BetaRegime.DIRECT: _direct,
}


@jax.jit
def log_beta(p: jax.Array, q: jax.Array) -> jax.Array:
    """Return log B(p, q), or NaN if either argument is NaN or not positive."""
    p = jnp.asarray(p, dtype=jnp.float64)
    q = jnp.asarray(q, dtype=jnp.float64)
    valid = (p > 0.0) & (q > 0.0)
    a = jnp.where(valid, jnp.minimum(p, q), 1.0)
    b = jnp.where(valid, jnp.maximum(p, q), 1.0)
    regime = classify_regime(a, b)
    out = lax.switch(regime, [_BRANCHES[r] for r in BetaRegime], a, b)
    return jnp.where(valid, out, jnp.nan)


__all__ = [
    "BetaRegime",
    "classify_regime",
    "log_beta",
]

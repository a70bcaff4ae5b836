from __future__ import annotations

import jax
import jax.numpy as jnp

from . import checks

jax.config.update("jax_enable_x64", True)

# Taylor coefficients c_k of 1/Gamma(z) = sum_k c_k z^k, k = 2..22 (c_1 = 1).
_RGAMMA_SERIES = jnp.asarray(
    [
        0.5772156649015328606065120900824024,  # c2 (Euler gamma)
        -0.6558780715202538810770195151453904,  # c3
        -0.0420026350340952355290039348754298,  # c4
        0.1665386113822914895017007951021052,  # c5
        -0.0421977345555443367482083012891874,  # c6
        -0.0096219715278769735621149216723481,  # c7
        0.0072189432466630995423950103404465,  # c8
        -0.0011651675918590651121139710840183,  # c9
        -0.0002152416741149509728157299630536,  # c10
        0.0001280502823881161861531986263281,  # c11
        -0.0000201348547807882386556893914210,  # c12
        -0.0000012504934821426706573453594738,  # c13
        0.0000011330272319816958823741296203,  # c14
        -0.0000002056338416977607103450154130,  # c15
        0.0000000061160951044814158178624986,  # c16
        0.0000000050020076444692229300556650,  # c17
        -0.0000000011812745704870201445881265,  # c18
        0.0000000001043426711691100510491540,  # c19
        0.0000000000077822634399050712540499,  # c20
        -0.0000000000036968056186422057081878,  # c21
        0.0000000000005100370287454475979015,  # c22
    ],
    dtype=jnp.float64,
)
_RGAMMA_POLY = _RGAMMA_SERIES[::-1]


def _rgamma1pm1_small(t: jax.Array) -> jax.Array:
    # 1/Gamma(1+t) - 1 = sum_{k>=2} c_k t^(k-1), |t| <= 1/2
    return t * jnp.polyval(_RGAMMA_POLY, t)


@jax.jit
def _inv_gamma1pm1(x: jax.Array) -> jax.Array:
    x = jnp.asarray(x, dtype=jnp.float64)
    low = x <= 0.5
    t = jnp.where(low, x, x - 1.0)
    g = _rgamma1pm1_small(t)
    # 1/Gamma(2+t) = (1 + g(t)) / (1 + t)
    return jnp.where(low, g, (g - t) / jnp.where(low, 1.0, x))


@jax.jit
def _log_gamma1p(x: jax.Array) -> jax.Array:
    return -jnp.log1p(_inv_gamma1pm1(x))


def inv_gamma1pm1(x: jax.Array) -> jax.Array:
    """Return ``1 / Gamma(1 + x) - 1`` for ``-0.5 <= x <= 1.5``."""
    checks.check_in_range(x, -0.5, 1.5, "x")
    return _inv_gamma1pm1(x)


def log_gamma1p(x: jax.Array) -> jax.Array:
    """Return ``log Gamma(1 + x)`` for ``-0.5 <= x <= 1.5``.

    Accurate to a few ulps relative, including near the zeros of
    ``log Gamma`` at ``x = 0`` and ``x = 1`` where ``gammaln(1 + x)`` only
    reaches absolute accuracy.
    """
    checks.check_in_range(x, -0.5, 1.5, "x")
    return _log_gamma1p(x)


__all__ = [
    "inv_gamma1pm1",
    "log_gamma1p",
]

from __future__ import annotations

from typing import Callable, NamedTuple

import jax
from jax import lax
import jax.numpy as jnp

jax.config.update("jax_enable_x64", True)

CONVERGED = 0
MAX_COUNT_EXCEEDED = 1
INFINITE_DIVERGENCE = 2
NAN_DIVERGENCE = 3

_TINY = jnp.float64(1e-50)

Coefficient = Callable[[jax.Array, jax.Array], jax.Array]


class ContinuedFractionResult(NamedTuple):
    value: jax.Array
    iterations: jax.Array
    status: jax.Array


def _nudge(v: jax.Array) -> jax.Array:
    return jnp.where(jnp.abs(v) <= _TINY, _TINY, v)


def evaluate(
    a_fn: Coefficient,
    b_fn: Coefficient,
    x: jax.Array,
    epsilon: jax.Array,
    max_iterations: jax.Array,
) -> ContinuedFractionResult:
    """Evaluate a0 + b1/(a1 + b2/(a2 + ...)) with the modified Lentz method.

    ``a_fn(n, x)`` and ``b_fn(n, x)`` give the n-th partial denominator and
    numerator. The loop runs while ``n < max_iterations`` and stops as soon as
    the relative change of the estimate drops below ``epsilon`` or the
    estimate stops being finite. Nothing is raised here; the outcome is
    reported through ``status``.
    """
    x = jnp.asarray(x, dtype=jnp.float64)
    epsilon = jnp.asarray(epsilon, dtype=jnp.float64)
    max_iterations = jnp.asarray(max_iterations, dtype=jnp.int64)

    h0 = _nudge(jnp.asarray(a_fn(jnp.int64(0), x), dtype=jnp.float64))
    init = (jnp.int64(1), h0, jnp.float64(0.0), h0, jnp.bool_(False), jnp.bool_(False))

    def cond(state):
        n, _, _, _, converged, diverged = state
        return (n < max_iterations) & ~converged & ~diverged

    def body(state):
        n, c_prev, d_prev, h_prev, _, _ = state
        an = a_fn(n, x)
        bn = b_fn(n, x)
        d = 1.0 / _nudge(an + bn * d_prev)
        c = _nudge(an + bn / c_prev)
        delta = c * d
        h = h_prev * delta
        diverged = ~jnp.isfinite(h)
        converged = jnp.abs(delta - 1.0) < epsilon
        stop = converged | diverged
        return jnp.where(stop, n, n + 1), c, d, h, converged, diverged

    n, _, _, h, converged, diverged = lax.while_loop(cond, body, init)
    status = jnp.where(
        diverged,
        jnp.where(jnp.isnan(h), NAN_DIVERGENCE, INFINITE_DIVERGENCE),
        jnp.where(converged, CONVERGED, MAX_COUNT_EXCEEDED),
    ).astype(jnp.int32)
    return ContinuedFractionResult(h, n, status)


__all__ = [
    "CONVERGED",
    "MAX_COUNT_EXCEEDED",
    "INFINITE_DIVERGENCE",
    "NAN_DIVERGENCE",
    "ContinuedFractionResult",
    "evaluate",
]

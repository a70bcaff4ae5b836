from __future__ import annotations

import jax
import jax.numpy as jnp

from . import checks
from . import continued_fraction as cf
from . import precision
from .log_beta import log_beta

jax.config.update("jax_enable_x64", True)


def _beta_fraction_b(a: jax.Array, b: jax.Array):
    def b_fn(n, x):
        n = jnp.asarray(n, dtype=jnp.float64)
        even = jnp.mod(n, 2.0) == 0.0
        m_even = 0.5 * n
        m_odd = 0.5 * (n - 1.0)
        b_even = (m_even * (b - m_even) * x) / ((a + 2.0 * m_even - 1.0) * (a + 2.0 * m_even))
        b_odd = -((a + m_odd) * (a + b + m_odd) * x) / ((a + 2.0 * m_odd) * (a + 2.0 * m_odd + 1.0))
        return jnp.where(even, b_even, b_odd)

    return b_fn


def _unit(n, x):
    return jnp.float64(1.0)


@jax.jit
def _regularized_beta(x, a, b, epsilon, max_iterations) -> cf.ContinuedFractionResult:
    x = jnp.asarray(x, dtype=jnp.float64)
    a = jnp.asarray(a, dtype=jnp.float64)
    b = jnp.asarray(b, dtype=jnp.float64)
    valid = (x >= 0.0) & (x <= 1.0) & (a > 0.0) & (b > 0.0) & jnp.isfinite(a) & jnp.isfinite(b)
    interior = valid & (x > 0.0) & (x < 1.0)

    # The fraction converges fast only below this threshold. The swap is taken
    # once, so 1 - I_{1-x}(b, a) is never swapped back.
    swap = x > (a + 1.0) / (a + b + 2.0)
    xs = jnp.where(interior, jnp.where(swap, 1.0 - x, x), 0.5)
    aa = jnp.where(interior, jnp.where(swap, b, a), 1.0)
    bb = jnp.where(interior, jnp.where(swap, a, b), 1.0)

    frac = cf.evaluate(_unit, _beta_fraction_b(aa, bb), xs, epsilon, max_iterations)
    log_front = aa * jnp.log(xs) + bb * jnp.log1p(-xs) - jnp.log(aa) - log_beta(aa, bb)
    body = jnp.exp(log_front) / frac.value
    value = jnp.where(swap, 1.0 - body, body)

    value = jnp.where(x == 0.0, 0.0, jnp.where(x == 1.0, 1.0, value))
    value = jnp.where(valid, value, jnp.nan)
    iterations = jnp.where(interior, frac.iterations, 0)
    status = jnp.where(interior, frac.status, cf.CONVERGED).astype(jnp.int32)
    return cf.ContinuedFractionResult(value, iterations, status)


def regularized_beta_result(
    x: jax.Array,
    a: jax.Array,
    b: jax.Array,
    epsilon: float | None = None,
    max_iterations: int | None = None,
) -> cf.ContinuedFractionResult:
    """Evaluate I_x(a, b) and report how the continued fraction ended.

    Unlike :func:`regularized_beta` this never raises, so it can be used
    inside ``jax.jit``; inspect ``status`` against the
    :mod:`betajax.continued_fraction` codes.
    """
    eps, n = precision.resolve(epsilon, max_iterations)
    return _regularized_beta(x, a, b, eps, n)


def regularized_beta(
    x: jax.Array,
    a: jax.Array,
    b: jax.Array,
    epsilon: float | None = None,
    max_iterations: int | None = None,
) -> jax.Array:
    """Regularized incomplete Beta function I_x(a, b).

    Returns NaN when ``x`` is outside ``[0, 1]`` or when ``a`` or ``b`` is NaN,
    infinite or not positive. ``x = 0`` and ``x = 1`` give exactly 0 and 1.
    ``epsilon`` is the relative convergence tolerance of the continued
    fraction and ``max_iterations`` a hard cap on its length; both default to
    the values in :mod:`betajax.precision`.

    Raises:
        MaxCountExceededError: if the fraction has not converged after
            ``max_iterations`` steps.
        ConvergenceError: if the fraction diverged to infinity or NaN.
    """
    eps, n = precision.resolve(epsilon, max_iterations)
    result = _regularized_beta(x, a, b, eps, n)
    checks.check_convergence(result.status, n, x)
    return result.value


__all__ = [
    "regularized_beta",
    "regularized_beta_result",
]

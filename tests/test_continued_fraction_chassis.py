import jax.numpy as jnp
import numpy as np
import pytest

from betajax import checks
from betajax import continued_fraction as cf

from tests._test_checks import _check


def _one(n, x):
    return jnp.float64(1.0)


def test_golden_ratio():
    res = cf.evaluate(_one, _one, 0.0, 1e-15, 1000)
    np.testing.assert_allclose(float(res.value), (1.0 + np.sqrt(5.0)) / 2.0, rtol=1e-14)
    _check(int(res.status) == cf.CONVERGED)
    _check(0 < int(res.iterations) < 1000)


def test_exp_fraction():
    # e^x = 1 + x / (1 - x / (2 + x / (3 - x / (2 + x / (5 - ...)))))
    def a_fn(n, x):
        n = jnp.asarray(n, dtype=jnp.float64)
        odd = jnp.mod(n, 2.0) == 1.0
        return jnp.where(n == 0.0, 1.0, jnp.where(odd, n, 2.0))

    def b_fn(n, x):
        n = jnp.asarray(n, dtype=jnp.float64)
        return jnp.where(n == 1.0, x, jnp.where(jnp.mod(n, 2.0) == 0.0, -x, x))

    res = cf.evaluate(a_fn, b_fn, 0.5, 1e-15, 1000)
    np.testing.assert_allclose(float(res.value), np.exp(0.5), rtol=1e-14)


def test_iteration_cap():
    res = cf.evaluate(_one, _one, 0.0, 1e-15, 3)
    _check(int(res.status) == cf.MAX_COUNT_EXCEEDED)
    _check(int(res.iterations) == 3)


def test_nan_divergence():
    res = cf.evaluate(_one, lambda n, x: jnp.float64(jnp.inf), 0.0, 1e-15, 100)
    _check(int(res.status) == cf.NAN_DIVERGENCE)


def test_infinite_divergence():
    def a_fn(n, x):
        return jnp.where(n == 0, 1e308, 1.0)

    res = cf.evaluate(a_fn, lambda n, x: jnp.float64(1e308), 0.0, 1e-15, 100)
    _check(int(res.status) == cf.INFINITE_DIVERGENCE)


@pytest.mark.parametrize("status", [cf.INFINITE_DIVERGENCE, cf.NAN_DIVERGENCE])
def test_divergence_is_reported(status):
    with pytest.raises(checks.ConvergenceError) as info:
        checks.check_convergence(jnp.int32(status), 100, 0.5)
    _check(not isinstance(info.value, checks.MaxCountExceededError))


def test_converged_status_is_silent():
    checks.check_convergence(jnp.int32(cf.CONVERGED), 100, 0.5)

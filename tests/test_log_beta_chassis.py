import math

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from betajax import log_beta as lb
from betajax.log_beta import BetaRegime

from tests._reference_tables import LOG_BETA_REF
from tests._test_checks import _check
from tests._test_checks import _check_table

_REGIME_POINTS = [
    (10.0, 20.0, BetaRegime.LARGE),
    (3.0, 2000.0, BetaRegime.MEDIUM_HUGE),
    (3.0, 5.0, BetaRegime.MEDIUM_SMALL),
    (3.0, 50.0, BetaRegime.MEDIUM_LARGE),
    (1.5, 5.0, BetaRegime.UNIT_MEDIUM),
    (1.5, 20.0, BetaRegime.UNIT_LARGE),
    (1.5, 2.0, BetaRegime.UNIT_PAIR),
    (0.5, 20.0, BetaRegime.SMALL_LARGE),
    (0.5, 5.0, BetaRegime.DIRECT),
]


def _lbeta(p: float, q: float) -> float:
    return math.lgamma(p) + math.lgamma(q) - math.lgamma(p + q)


def _rows_in_direct(table, direct: bool):
    return [row for row in table if (int(lb.classify_regime(row[0], row[1])) == BetaRegime.DIRECT) == direct]


def test_log_beta_table():
    _check_table(lb.log_beta, _rows_in_direct(LOG_BETA_REF, False), ulps=3)


def test_log_beta_table_direct_band():
    # log B is a short sum of terms near 1 here, so ulps are counted at that size
    _check_table(lb.log_beta, _rows_in_direct(LOG_BETA_REF, True), ulps=8, floor=2.0)


@pytest.mark.parametrize("a, b", [(1e-200, 1e-200), (1e-160, 1e-160), (1e-300, 0.75)])
def test_tiny_pair_stays_finite(a, b):
    # log B(a, b) = log(a + b) - log(a) - log(b) + O(a)
    expected = math.log(a + b) - math.log(a) - math.log(b)
    out = float(lb.log_beta(a, b))
    _check(math.isfinite(out))
    np.testing.assert_allclose(out, expected, rtol=1e-14)


@pytest.mark.parametrize("a, b", [(1e-307, 5.0), (1e-250, 1.0), (1e-300, 20.0), (1e-300, 3000.0)])
def test_tiny_against_moderate(a, b):
    # log B(a, b) = -log(a) + O(a) when b is not small
    out = float(lb.log_beta(a, b))
    _check(math.isfinite(out))
    np.testing.assert_allclose(out, -math.log(a), rtol=1e-14)


def test_known_value():
    np.testing.assert_allclose(float(lb.log_beta(1.0, 2.0)), -0.693147180559945, atol=1e-14)


@pytest.mark.parametrize(
    "p, q",
    [(math.nan, 2.0), (1.0, math.nan), (-1.0, 2.0), (1.0, -2.0), (0.0, 2.0), (1.0, 0.0)],
)
def test_invalid_arguments_give_nan(p, q):
    _check(bool(jnp.isnan(lb.log_beta(p, q))))


@pytest.mark.parametrize("p, q, regime", _REGIME_POINTS)
def test_classify_regime(p, q, regime):
    _check(int(lb.classify_regime(p, q)) == regime)
    _check(int(lb.classify_regime(q, p)) == regime)


def test_regime_boundaries():
    _check(int(lb.classify_regime(2.0, 10.0)) == BetaRegime.UNIT_LARGE)
    _check(int(lb.classify_regime(2.0, 2.0)) == BetaRegime.UNIT_PAIR)
    _check(int(lb.classify_regime(1.0, 9.0)) == BetaRegime.UNIT_MEDIUM)
    _check(int(lb.classify_regime(2.5, 1000.0)) == BetaRegime.MEDIUM_LARGE)
    _check(int(lb.classify_regime(2.5, 10.0)) == BetaRegime.MEDIUM_LARGE)
    _check(int(lb.classify_regime(9.99, 1e6)) == BetaRegime.MEDIUM_HUGE)
    _check(int(lb.classify_regime(10.0, 1e6)) == BetaRegime.LARGE)
    _check(int(lb.classify_regime(0.99, 10.0)) == BetaRegime.SMALL_LARGE)


@pytest.mark.parametrize("p, q, regime", _REGIME_POINTS)
def test_each_regime_matches_lgamma(p, q, regime):
    np.testing.assert_allclose(float(lb.log_beta(p, q)), _lbeta(p, q), rtol=1e-10)


def test_symmetry():
    for p, q, _ in _REGIME_POINTS:
        _check(float(lb.log_beta(p, q)) == float(lb.log_beta(q, p)))


def test_large_arguments_stay_finite():
    out = lb.log_beta(1e10, 1e12)
    _check(bool(jnp.isfinite(out)))
    _check(float(out) < 0.0)


def test_vmap_matches_scalar_calls():
    p = jnp.array([p for p, _, _ in _REGIME_POINTS], dtype=jnp.float64)
    q = jnp.array([q for _, q, _ in _REGIME_POINTS], dtype=jnp.float64)
    batched = jax.vmap(lb.log_beta)(p, q)
    _check(batched.shape == (len(_REGIME_POINTS),))
    for i, (pi, qi, _) in enumerate(_REGIME_POINTS):
        np.testing.assert_allclose(float(batched[i]), float(lb.log_beta(pi, qi)), rtol=1e-14)

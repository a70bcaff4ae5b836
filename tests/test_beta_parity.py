import mpmath as mp
import numpy as np
import pytest

from betajax import incomplete_beta as ib
from betajax import log_beta as lb
from betajax import stirling
from betajax import validation

pytestmark = pytest.mark.parity
if not validation.parity_enabled():
    pytest.skip("Parity tests disabled. Set BETAJAX_RUN_PARITY=1 to enable.", allow_module_level=True)

_AB = [0.1, 0.5, 0.9, 1.0, 1.7, 2.0, 3.3, 7.9, 10.0, 55.0, 999.0, 1500.0, 1e5]
_X = [1e-6, 0.05, 0.3, 0.5, 0.77, 0.999]


def test_log_beta_parity():
    with mp.workdps(validation.parity_dps()):
        for p in _AB:
            for q in _AB:
                expected = float(mp.log(mp.beta(p, q)))
                np.testing.assert_allclose(float(lb.log_beta(p, q)), expected, rtol=1e-12, atol=1e-13, err_msg=f"{p}, {q}")


def test_regularized_beta_parity():
    with mp.workdps(validation.parity_dps()):
        for a in _AB[:9]:
            for b in _AB[:9]:
                for x in _X:
                    expected = float(mp.betainc(a, b, 0, x, regularized=True))
                    actual = float(ib.regularized_beta(x, a, b))
                    np.testing.assert_allclose(actual, expected, rtol=1e-11, atol=1e-14, err_msg=f"{x}, {a}, {b}")


def test_log_gamma_minus_log_gamma_sum_parity():
    with mp.workdps(validation.parity_dps()):
        for a in [0.0, 0.3, 1.0, 2.0, 9.0, 30.0, 400.0]:
            for b in [10.0, 17.5, 1e3, 1e8]:
                expected = float(mp.loggamma(mp.mpf(b)) - mp.loggamma(mp.mpf(a) + mp.mpf(b)))
                actual = float(stirling.log_gamma_minus_log_gamma_sum(a, b))
                np.testing.assert_allclose(actual, expected, rtol=1e-13, atol=1e-16, err_msg=f"{a}, {b}")

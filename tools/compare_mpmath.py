from __future__ import annotations

import argparse

import jax
import jax.numpy as jnp
import numpy as np

import mpmath as mp

from betajax import incomplete_beta as ib
from betajax import log_beta as lb
from betajax.log_beta import BetaRegime


def _sample_pairs(rng: np.random.Generator, n: int, lo: float, hi: float) -> np.ndarray:
    # log-uniform so every regime band gets samples
    return np.exp(rng.uniform(np.log(lo), np.log(hi), size=(n, 2)))


def _rel_err(got: np.ndarray, want: np.ndarray) -> np.ndarray:
    scale = np.maximum(np.abs(want), 1e-300)
    return np.abs(got - want) / scale


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--samples", type=int, default=2000)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--dps", type=int, default=50)
    parser.add_argument("--range-lo", type=float, default=0.05)
    parser.add_argument("--range-hi", type=float, default=5000.0)
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    mp.mp.dps = args.dps

    ab = _sample_pairs(rng, args.samples, args.range_lo, args.range_hi)
    xs = rng.uniform(0.0, 1.0, size=args.samples)

    p = jnp.asarray(ab[:, 0], dtype=jnp.float64)
    q = jnp.asarray(ab[:, 1], dtype=jnp.float64)
    regimes = np.asarray(jax.vmap(lb.classify_regime)(p, q))
    got = np.asarray(jax.jit(jax.vmap(lb.log_beta))(p, q))
    want = np.array([float(mp.log(mp.beta(a, b))) for a, b in ab])
    err = _rel_err(got, want)

    print("log_beta vs mpmath (samples={}, dps={}):".format(args.samples, args.dps))
    for regime in BetaRegime:
        mask = regimes == int(regime)
        if not np.any(mask):
            print(f"{regime.name:13s} n=0")
            continue
        print(f"{regime.name:13s} n={int(mask.sum()):5d} mean_rel={np.mean(err[mask]):.3e} max_rel={np.max(err[mask]):.3e}")

    # the incomplete Beta grid is capped so mpmath stays quick
    small = ab[:, 0] * ab[:, 1] < 1e6
    ab_i = ab[small]
    xs_i = xs[small]
    got_i = np.asarray(
        jax.vmap(lambda x, a, b: ib.regularized_beta_result(x, a, b).value)(
            jnp.asarray(xs_i), jnp.asarray(ab_i[:, 0]), jnp.asarray(ab_i[:, 1])
        )
    )
    want_i = np.array([float(mp.betainc(a, b, 0, x, regularized=True)) for x, (a, b) in zip(xs_i, ab_i)])
    abs_err = np.abs(got_i - want_i)
    print(f"regularized_beta n={len(xs_i)} mean_abs={np.mean(abs_err):.3e} max_abs={np.max(abs_err):.3e}")


if __name__ == "__main__":
    main()

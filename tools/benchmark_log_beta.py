from __future__ import annotations

import argparse
import time

import jax
import jax.numpy as jnp
import numpy as np

import mpmath as mp

from betajax import incomplete_beta as ib
from betajax import log_beta as lb


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--iters", type=int, default=2000)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--range-lo", type=float, default=0.1)
    parser.add_argument("--range-hi", type=float, default=100.0)
    parser.add_argument("--mp-dps", type=int, default=50)
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    ab = rng.uniform(args.range_lo, args.range_hi, size=(args.iters, 2))
    xs = rng.uniform(0.0, 1.0, size=args.iters)
    p = jnp.asarray(ab[:, 0], dtype=jnp.float64)
    q = jnp.asarray(ab[:, 1], dtype=jnp.float64)
    x = jnp.asarray(xs, dtype=jnp.float64)

    # mpmath (truth)
    mp.mp.dps = args.mp_dps
    t0 = time.perf_counter()
    truth = np.array([float(mp.log(mp.beta(a, b))) for a, b in ab])
    t_mp = time.perf_counter() - t0

    lbeta_fn = jax.jit(jax.vmap(lb.log_beta))
    betaln_fn = jax.jit(jax.vmap(jax.scipy.special.betaln))
    ibeta_fn = jax.jit(jax.vmap(lambda x, a, b: ib.regularized_beta_result(x, a, b).value))
    js_ibeta_fn = jax.jit(jax.vmap(jax.scipy.special.betainc))

    # warmup
    lbeta_fn(p, q).block_until_ready()
    betaln_fn(p, q).block_until_ready()
    ibeta_fn(x, p, q).block_until_ready()
    js_ibeta_fn(p, q, x).block_until_ready()

    t0 = time.perf_counter()
    lbeta_vals = np.array(lbeta_fn(p, q).block_until_ready())
    t_lbeta = time.perf_counter() - t0

    t0 = time.perf_counter()
    betaln_vals = np.array(betaln_fn(p, q).block_until_ready())
    t_betaln = time.perf_counter() - t0

    t0 = time.perf_counter()
    ibeta_fn(x, p, q).block_until_ready()
    t_ibeta = time.perf_counter() - t0

    t0 = time.perf_counter()
    js_ibeta_fn(p, q, x).block_until_ready()
    t_js_ibeta = time.perf_counter() - t0

    def err_stats(vals):
        err = np.abs(vals - truth) / np.maximum(np.abs(truth), 1e-300)
        return float(np.mean(err)), float(np.max(err))

    print("log Beta benchmark (iters={}, vectorized JAX):".format(args.iters))
    print(f"{'mpmath':18s} time={t_mp:.3f}s (truth)")
    for name, vals, t in [("betajax.log_beta", lbeta_vals, t_lbeta), ("jax.special", betaln_vals, t_betaln)]:
        mean_err, max_err = err_stats(vals)
        print(f"{name:18s} time={t:.3f}s mean_rel={mean_err:.3e} max_rel={max_err:.3e}")
    print(f"{'betajax.ibeta':18s} time={t_ibeta:.3f}s")
    print(f"{'jax.special.ibeta':18s} time={t_js_ibeta:.3f}s")


if __name__ == "__main__":
    main()

"""
Benchmark memoized vs reference evaluation.

Builds a shared-ancestry chain (v_{k+1} = v_k + v_k) where the reference
evaluation revisits every shared node, then compares:
1. Variable.get_value / get_gradient (reference, no caching)
2. CachedEvaluator (memoized by handle)
"""

import argparse
import sys
import time
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent))

from lazy_aad import CachedEvaluator, Variable, use_tape
from lazy_aad.core.graph_utils import print_graph_summary


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Reference vs memoized evaluation benchmark',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--depths', type=str, default='8,12,16',
                        help='Comma-separated chain depths (reference cost grows as 2^depth)')
    parser.add_argument('--repeats', type=int, default=3,
                        help='Timed repetitions per mode (best is reported)')
    parser.add_argument('--seed', type=int, default=0,
                        help='Random seed for the leaf value')
    parser.add_argument('--summary', action='store_true',
                        help='Print a graph summary for each depth')
    return parser.parse_args()


def build_chain(depth, x0):
    """Return (leaf, output) for v_{k+1} = v_k + v_k."""
    x = Variable(x0, name="x")
    v = x
    for k in range(depth):
        v = v + v
        v.name = f"v{k + 1}"
    return x, v


def time_best(fn, repeats):
    best, result = np.inf, None
    for _ in range(repeats):
        t0 = time.perf_counter()
        result = fn()
        best = min(best, time.perf_counter() - t0)
    return result, best


def run_depth(depth, x0, repeats, summary):
    with use_tape() as tape:
        x, out = build_chain(depth, x0)
        if summary:
            print_graph_summary(tape)

        def reference():
            return out.get_value(), out.get_gradient(x)

        def memoized():
            ev = CachedEvaluator()
            return ev.value(out), ev.gradient(out, x)

        ref, t_ref = time_best(reference, repeats)
        memo, t_memo = time_best(memoized, repeats)

    if not np.allclose(ref, memo, rtol=1e-12, atol=0.0):
        print(f"    WARNING: results differ at depth {depth}: {ref} vs {memo}")
    return ref, t_ref, t_memo


def main():
    """Run the comparison."""
    args = parse_args()
    rng = np.random.default_rng(args.seed)
    x0 = float(rng.uniform(0.5, 1.5))
    depths = [int(d) for d in args.depths.split(',') if d.strip()]

    print("=" * 70)
    print("Memoized Evaluation Speedup")
    print("=" * 70)
    print(f"x = {x0:.6f}\n")
    print(f"  {'Depth':>6} | {'Value':>14} | {'dv/dx':>10} | {'Ref (s)':>10} | {'Memo (s)':>10} | {'Speedup':>9}")
    print(f"  {'-'*72}")
    for depth in depths:
        (val, dvdx), t_ref, t_memo = run_depth(depth, x0, args.repeats, args.summary)
        speedup = t_ref / t_memo if t_memo > 0 else np.inf
        print(f"  {depth:>6} | {val:>14.6f} | {dvdx:>10.1f} | {t_ref:>10.4f} | {t_memo:>10.4f} | {speedup:>8.1f}x")

    print("\n" + "=" * 70)
    print("Benchmark completed!")
    print("=" * 70)


if __name__ == "__main__":
    main()

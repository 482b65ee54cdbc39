#!/usr/bin/env python
"""Compare empirical MinHash LSH collision rates with the theoretical S-curve.

For each target similarity ``s`` on a grid, builds pairs of synthetic token
sets with Jaccard similarity ``s``, indexes one side and queries with the
other. The fraction of queries that retrieve their partner is printed next
to ``1 - (1 - s**r)**b``.

Usage
-----
$ python scripts/eval_scurve.py --num-hash 128 --threshold 0.6 --pairs 200
"""
from __future__ import annotations

import argparse
import logging
from typing import List, Tuple

import numpy as np
from tqdm import tqdm

from minhashlsh import Minhash, MinhashLSH
from minhashlsh.core.params import collision_probability

logger = logging.getLogger("eval_scurve")


def _pair_with_jaccard(rng: np.random.Generator, s: float, size: int) -> Tuple[List[str], List[str]]:
    """Two token lists of *size* tokens each whose Jaccard similarity is close to *s*."""
    # |A ∩ B| = k, |A ∪ B| = 2 * size - k  =>  k = 2 * size * s / (1 + s)
    shared = int(round(2 * size * s / (1 + s)))
    base = rng.integers(0, 2**62, size=2 * size - shared)
    tokens = [f"t{v}" for v in base]
    common = tokens[:shared]
    left = common + tokens[shared:size]
    right = common + tokens[size:]
    return left, right


def evaluate(num_hash: int, threshold: float, pairs: int, size: int, seed: int) -> None:
    rng = np.random.default_rng(seed)
    grid = np.linspace(0.05, 0.95, 10)

    probe = MinhashLSH(num_hash, threshold)
    r, b = probe.params()
    print(f"num_hash={num_hash} threshold={threshold} -> r={r} b={b}")
    print(f"{'similarity':>10}  {'empirical':>9}  {'s-curve':>7}")

    for s in tqdm(grid, desc="Similarity grid"):
        lsh = MinhashLSH(num_hash, threshold, capacity=pairs)
        queries = []
        for i in range(pairs):
            left, right = _pair_with_jaccard(rng, float(s), size)
            mh = Minhash(seed, num_hash)
            mh.push_many(left)
            lsh.add(i, mh.signature())
            mh = Minhash(seed, num_hash)
            mh.push_many(right)
            queries.append(mh.signature())
        lsh.index()
        hits = sum(i in found for i, found in enumerate(lsh.query_many(queries)))
        print(f"{s:>10.2f}  {hits / pairs:>9.3f}  {collision_probability(s, r, b):>7.3f}")


def _parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Empirical vs. theoretical LSH collision rate")
    p.add_argument("--num-hash", type=int, default=128)
    p.add_argument("--threshold", type=float, default=0.6)
    p.add_argument("--pairs", type=int, default=200)
    p.add_argument("--size", type=int, default=100, help="Tokens per synthetic set")
    p.add_argument("--seed", type=int, default=1)
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args(argv)


def main(argv: List[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    evaluate(args.num_hash, args.threshold, args.pairs, args.size, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()

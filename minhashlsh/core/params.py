"""Band / row selection for MinHash LSH.

Two items of Jaccard similarity ``s`` share at least one band with
probability ``f(s) = 1 - (1 - s**r)**b`` (the LSH S-curve). For a threshold
``t`` the false-positive mass is the area under ``f`` on ``[0, t]`` and the
false-negative mass the area above it on ``[t, 1]``. :func:`optimal_params`
picks the ``(r, b)`` with ``r * b <= num_hash`` minimising their weighted sum.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Tuple

import numpy as np

from .errors import InvalidConfiguration

logger = logging.getLogger(__name__)

INTEGRATION_STEP = 0.001

_TIE_EPS = 1e-12


def collision_probability(s, r, b):
    """Probability that items of similarity *s* collide in at least one of *b* bands of *r* rows."""
    return 1.0 - (1.0 - np.power(s, r)) ** b


def _midpoints(lo: float, hi: float) -> Tuple[np.ndarray, float]:
    n = max(int(np.ceil((hi - lo) / INTEGRATION_STEP)), 1)
    step = (hi - lo) / n
    return lo + (np.arange(n) + 0.5) * step, step


def false_positive_mass(threshold: float, r: int, b: int) -> float:
    """Integral of the S-curve over ``[0, threshold]``."""
    xs, step = _midpoints(0.0, threshold)
    return float(np.sum(collision_probability(xs, r, b)) * step)


def false_negative_mass(threshold: float, r: int, b: int) -> float:
    """Integral of ``1 - S-curve`` over ``[threshold, 1]``."""
    xs, step = _midpoints(threshold, 1.0)
    return float(np.sum(1.0 - collision_probability(xs, r, b)) * step)


def validate_threshold(threshold: float) -> None:
    if not 0.0 < threshold <= 1.0:
        raise InvalidConfiguration(f"threshold must be in (0, 1], got {threshold}")


@lru_cache(maxsize=128)
def optimal_params(
    num_hash: int,
    threshold: float,
    false_positive_weight: float = 0.5,
    false_negative_weight: float = 0.5,
) -> Tuple[int, int]:
    """Return ``(r, b)`` minimising the weighted LSH error for *threshold*.

    Every feasible pair with ``r * b <= num_hash`` is scored. Scores within
    ``1e-12`` of each other count as a tie, resolved in favour of fewer
    bands and then of more rows per band.
    """
    if num_hash <= 0:
        raise InvalidConfiguration(f"num_hash must be positive, got {num_hash}")
    validate_threshold(threshold)
    if false_positive_weight <= 0 or false_negative_weight <= 0:
        raise InvalidConfiguration("false positive / negative weights must be positive")

    fp_x, fp_step = _midpoints(0.0, threshold)
    fn_x, fn_step = _midpoints(threshold, 1.0)

    best_err = np.inf
    best: Tuple[int, int] | None = None
    for b in range(1, num_hash + 1):
        # Descending r: the first index within _TIE_EPS of the minimum is the largest tied r.
        rs = np.arange(num_hash // b, 0, -1)[:, np.newaxis]
        fp = collision_probability(fp_x, rs, b).sum(axis=1) * fp_step
        fn = (1.0 - collision_probability(fn_x, rs, b)).sum(axis=1) * fn_step
        err = false_positive_weight * fp + false_negative_weight * fn
        i = int(np.flatnonzero(err <= err.min() + _TIE_EPS)[0])
        if err[i] < best_err - _TIE_EPS:
            best_err = float(err[i])
            best = (int(rs[i, 0]), b)

    if best is None:  # pragma: no cover - num_hash >= 1 always admits (1, 1)
        raise InvalidConfiguration(f"No feasible (r, b) for num_hash={num_hash}")
    logger.debug(
        "optimal_params(num_hash=%d, threshold=%.3f) -> r=%d b=%d (error %.5f)",
        num_hash, threshold, best[0], best[1], best_err,
    )
    return best

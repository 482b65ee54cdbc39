"""MinHash signature generation for minhashlsh."""
from __future__ import annotations

from typing import Iterable, List, Union

import numpy as np
import xxhash

from .errors import InvalidConfiguration

Element = Union[bytes, bytearray, memoryview, str]

_MASK64 = 0xFFFFFFFFFFFFFFFF
_MAX_HASH = np.uint64(_MASK64)

# Rows per vectorised batch in push_many; bounds the (batch, num_hash) scratch matrix.
_BATCH_ROWS = 1024

# -----------------------------------------------------------
# xxHash helpers
# -----------------------------------------------------------


def hash_xx64(value: Element) -> int:
    """64-bit xxHash of *value* (``str`` is hashed as UTF-8)."""
    if isinstance(value, str):
        value = value.encode("utf-8")
    elif isinstance(value, memoryview):
        value = value.tobytes()
    return xxhash.xxh64_intdigest(value)


def batch_xxhash64(values: Iterable[Element]) -> List[int]:
    """64-bit xxHash of every item in *values*."""
    return [hash_xx64(v) for v in values]


# -----------------------------------------------------------
# Signature coercion
# -----------------------------------------------------------


def coerce_uint64(obj) -> np.ndarray:
    """Fresh ``uint64`` array from *obj*, of whatever dimensionality it has."""
    if isinstance(obj, Minhash):
        return obj.signature()
    if hasattr(obj, "hashvalues"):
        obj = obj.hashvalues
    return np.array(obj, dtype=np.uint64)


def as_signature(obj) -> np.ndarray:
    """Return *obj* as a fresh 1-D ``uint64`` array.

    Accepts sequences of ints, NumPy arrays, :class:`Minhash` instances and
    ``datasketch.MinHash`` / ``LeanMinHash`` objects (via ``hashvalues``).
    """
    sig = coerce_uint64(obj)
    if sig.ndim != 1:
        raise ValueError(f"Signature must be one-dimensional, got shape {sig.shape}")
    return sig


# -----------------------------------------------------------
# MinHash generator
# -----------------------------------------------------------


class Minhash:
    """Streaming MinHash over ``num_hash`` affine permutations of 64-bit xxHash.

    Permutation *i* maps a base hash ``h`` to ``a[i] * h + b[i] (mod 2**64)``.
    Every ``a[i]`` is odd, so each map is a bijection on 64-bit integers. The
    parameters are drawn from a NumPy generator seeded with *seed*, which makes
    two instances with the same ``(seed, num_hash)`` produce comparable
    signatures.

    A single instance must not be fed from several threads at once.
    """

    def __init__(self, seed: int, num_hash: int) -> None:
        if num_hash <= 0:
            raise InvalidConfiguration(f"num_hash must be positive, got {num_hash}")
        self._seed = int(seed)
        rng = np.random.default_rng(self._seed & _MASK64)
        self._a = rng.integers(0, _MASK64, size=num_hash, dtype=np.uint64, endpoint=True) | np.uint64(1)
        self._b = rng.integers(0, _MASK64, size=num_hash, dtype=np.uint64, endpoint=True)
        self._hashvalues = np.full(num_hash, _MAX_HASH, dtype=np.uint64)

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def num_hash(self) -> int:
        return len(self._hashvalues)

    def __len__(self) -> int:
        return len(self._hashvalues)

    # --------------------------------------------------
    # Mutation
    # --------------------------------------------------

    def push(self, element: Element) -> None:
        """Fold one element into the signature."""
        h = np.uint64(hash_xx64(element))
        candidates = self._a * h + self._b
        np.minimum(self._hashvalues, candidates, out=self._hashvalues)

    def push_many(self, elements: Iterable[Element]) -> None:
        """Fold every element of *elements*; same result as repeated :meth:`push`."""
        hashes = np.array(batch_xxhash64(elements), dtype=np.uint64)
        for start in range(0, len(hashes), _BATCH_ROWS):
            chunk = hashes[start : start + _BATCH_ROWS, np.newaxis]  # noqa: E203
            candidates = chunk * self._a + self._b
            np.minimum(self._hashvalues, candidates.min(axis=0), out=self._hashvalues)

    def merge(self, other: "Minhash") -> None:
        """Update in place to the signature of the union of both sets."""
        self._check_compatible(other)
        np.minimum(self._hashvalues, other._hashvalues, out=self._hashvalues)

    def clear(self) -> None:
        self._hashvalues.fill(_MAX_HASH)

    # --------------------------------------------------
    # Queries
    # --------------------------------------------------

    def signature(self) -> np.ndarray:
        """Return a copy of the current minimum-hash vector."""
        return self._hashvalues.copy()

    def is_empty(self) -> bool:
        """True while nothing has been pushed since construction or :meth:`clear`."""
        return bool(np.all(self._hashvalues == _MAX_HASH))

    def jaccard(self, other: "Minhash") -> float:
        """Estimated Jaccard similarity: fraction of agreeing slots."""
        self._check_compatible(other)
        agree = np.count_nonzero(self._hashvalues == other._hashvalues)
        return float(agree) / len(self._hashvalues)

    def copy(self) -> "Minhash":
        clone = Minhash.__new__(Minhash)
        clone._seed = self._seed
        clone._a = self._a
        clone._b = self._b
        clone._hashvalues = self._hashvalues.copy()
        return clone

    def _check_compatible(self, other: "Minhash") -> None:
        if other._seed != self._seed:
            raise ValueError("Cannot compare MinHash signatures built with different seeds")
        if len(other) != len(self):
            raise ValueError("Cannot compare MinHash signatures of different lengths")

    def __repr__(self) -> str:
        return f"Minhash(seed={self._seed}, num_hash={self.num_hash})"


def compute_signature(elements: Iterable[Element], seed: int = 1, num_hash: int = 128) -> np.ndarray:
    """Signature of *elements* under a fresh ``Minhash(seed, num_hash)``."""
    mh = Minhash(seed, num_hash)
    mh.push_many(elements)
    return mh.signature()

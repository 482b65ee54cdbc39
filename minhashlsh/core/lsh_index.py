"""Banded MinHash LSH index with stage / rebuild / query semantics.

``add`` and ``remove`` only touch a staging area. ``index`` turns the live
staged signatures into one sorted key table per band and publishes them as a
new snapshot; ``query`` binary-searches the most recently published snapshot
and never sees staged changes.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Dict, Generic, Hashable, Iterable, List, NamedTuple, Set, Tuple, TypeVar

import numpy as np
from tqdm import tqdm

from .errors import InvalidConfiguration, ShapeMismatch, UnknownKey
from .keys import MEDIUM, NARROW, WIDE, band_keys, check_width
from .minhash import coerce_uint64
from .params import optimal_params
from .stats import IndexStats

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


class BandTable:
    """Keys of one band sorted ascending, with the snapshot row of each key."""

    __slots__ = ("keys", "rows")

    def __init__(self, keys: np.ndarray, rows: np.ndarray) -> None:
        keys.setflags(write=False)
        rows.setflags(write=False)
        self.keys = keys
        self.rows = rows

    @classmethod
    def build(cls, keys: np.ndarray) -> "BandTable":
        order = np.argsort(keys, kind="stable")
        return cls(keys[order], order)

    @classmethod
    def empty(cls, key_len: int) -> "BandTable":
        return cls(np.empty(0, dtype=f"S{key_len}"), np.empty(0, dtype=np.intp))

    def lookup(self, key) -> np.ndarray:
        """Snapshot rows whose key equals *key* (the contiguous run of equal keys)."""
        key = np.asarray(key, dtype=self.keys.dtype)
        lo = np.searchsorted(self.keys, key, side="left")
        hi = np.searchsorted(self.keys, key, side="right")
        return self.rows[lo:hi]

    def __len__(self) -> int:
        return len(self.keys)


class _Snapshot(NamedTuple):
    generation: int
    ids: Tuple
    members: frozenset
    tables: Tuple[BandTable, ...]


class MinhashLSH(Generic[K]):
    """MinHash LSH over ``num_hash``-long signatures.

    ``(r, b)`` are derived from *threshold* by :func:`optimal_params`.
    *capacity* only sizes the initial staging buffer. *key_width* is the
    number of bytes kept per signature value in band keys (2, 4 or 8).
    """

    def __init__(
        self,
        num_hash: int,
        threshold: float,
        capacity: int = 1,
        *,
        key_width: int = WIDE,
        weights: Tuple[float, float] = (0.5, 0.5),
        strict_remove: bool = False,
        verbose: bool = False,
    ) -> None:
        check_width(key_width)
        if capacity < 0:
            raise InvalidConfiguration(f"capacity must be non-negative, got {capacity}")
        self._r, self._b = optimal_params(num_hash, threshold, *weights)
        self._num_hash = num_hash
        self._threshold = threshold
        self._key_width = key_width
        self._capacity = max(capacity, 1)
        self.strict_remove = strict_remove
        self.verbose = verbose
        self.stats = IndexStats()

        # Staging area: one signature row per known id, live flag per row.
        self._staging_lock = threading.Lock()
        self._sigs = np.empty((self._capacity, num_hash), dtype=np.uint64)
        self._live = np.zeros(self._capacity, dtype=bool)
        self._ids: List[K] = []
        self._rows: Dict[K, int] = {}
        self._pending = 0
        self._generation = 0

        self._swap_lock = threading.Lock()
        key_len = self._r * key_width
        self._snapshot = _Snapshot(0, (), frozenset(), tuple(BandTable.empty(key_len) for _ in range(self._b)))

        logger.debug(
            "MinhashLSH(num_hash=%d, threshold=%.3f, key_width=%d): r=%d b=%d",
            num_hash, threshold, key_width, self._r, self._b,
        )

    # --------------------------------------------------
    # Constructors
    # --------------------------------------------------

    @classmethod
    def lsh16(cls, num_hash: int, threshold: float, capacity: int = 1, **kwargs) -> "MinhashLSH":
        """Index with narrow (2 bytes per value) band keys."""
        return cls(num_hash, threshold, capacity, key_width=NARROW, **kwargs)

    @classmethod
    def lsh32(cls, num_hash: int, threshold: float, capacity: int = 1, **kwargs) -> "MinhashLSH":
        """Index with 4 bytes per value band keys."""
        return cls(num_hash, threshold, capacity, key_width=MEDIUM, **kwargs)

    @classmethod
    def lsh64(cls, num_hash: int, threshold: float, capacity: int = 1, **kwargs) -> "MinhashLSH":
        """Index with wide (8 bytes per value) band keys."""
        return cls(num_hash, threshold, capacity, key_width=WIDE, **kwargs)

    @classmethod
    def from_config(cls, cfg) -> "MinhashLSH":
        """Build from an :class:`minhashlsh.config.LSHConfig`."""
        return cls(
            cfg.num_hash,
            cfg.threshold,
            cfg.capacity,
            key_width=cfg.key_width,
            weights=(cfg.false_positive_weight, cfg.false_negative_weight),
            strict_remove=cfg.strict_remove,
            verbose=cfg.verbose,
        )

    # --------------------------------------------------
    # Properties
    # --------------------------------------------------

    @property
    def num_hash(self) -> int:
        return self._num_hash

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def key_width(self) -> int:
        return self._key_width

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def pending(self) -> int:
        """Staged ``add``/``remove`` calls not yet picked up by :meth:`index`."""
        return self._pending

    @property
    def hash_tables(self) -> Tuple[BandTable, ...]:
        """Band tables of the current snapshot."""
        return self._snapshot.tables

    def params(self) -> Tuple[int, int]:
        """Return ``(r, b)``: rows per band and number of bands."""
        return self._r, self._b

    # --------------------------------------------------
    # Mutation
    # --------------------------------------------------

    def _check_shape(self, signature) -> np.ndarray:
        sig = coerce_uint64(signature)
        if sig.ndim != 1:
            raise ShapeMismatch(self._num_hash, sig.shape)
        if len(sig) != self._num_hash:
            raise ShapeMismatch(self._num_hash, len(sig))
        return sig

    def add(self, key: K, signature) -> None:
        """Stage *signature* under *key*, replacing any earlier one."""
        sig = self._check_shape(signature)
        self._stage(key, sig)

    def add_many(self, items: Iterable[Tuple[K, object]]) -> None:
        """Stage several ``(key, signature)`` pairs; nothing is staged if any shape is wrong."""
        checked = [(key, self._check_shape(sig)) for key, sig in items]
        for key, sig in checked:
            self._stage(key, sig)

    def _stage(self, key: K, sig: np.ndarray) -> None:
        with self._staging_lock:
            row = self._rows.get(key)
            overwrite = row is not None
            if row is None:
                row = len(self._ids)
                if row == len(self._sigs):
                    self._grow()
                self._ids.append(key)
                self._rows[key] = row
            self._sigs[row] = sig
            self._live[row] = True
            self._pending += 1
        self.stats.add_staged(overwrite)

    def _grow(self) -> None:
        new_cap = 2 * len(self._sigs)
        sigs = np.empty((new_cap, self._num_hash), dtype=np.uint64)
        sigs[: len(self._sigs)] = self._sigs
        live = np.zeros(new_cap, dtype=bool)
        live[: len(self._live)] = self._live
        self._sigs, self._live = sigs, live

    def remove(self, key: K) -> None:
        """Stage the removal of *key*.

        Unknown keys are ignored unless the index was built with
        ``strict_remove=True``, in which case :class:`UnknownKey` is raised.
        """
        with self._staging_lock:
            row = self._rows.get(key)
            if row is not None:
                self._live[row] = False
                self._pending += 1
        if row is None:
            self.stats.add_removed(known=False)
            if self.strict_remove:
                raise UnknownKey(key)
            logger.debug("remove(%r): unknown key ignored", key)
            return
        self.stats.add_removed(known=True)

    # --------------------------------------------------
    # Rebuild
    # --------------------------------------------------

    def _take_staged(self) -> Tuple[int, Tuple, np.ndarray]:
        """Copy the live staged rows and drop tombstoned ones from staging."""
        with self._staging_lock:
            n = len(self._ids)
            live = np.flatnonzero(self._live[:n])
            ids = tuple(self._ids[i] for i in live)
            sigs = self._sigs[live]
            if len(live) < n:
                cap = max(self._capacity, len(live))
                self._sigs = np.empty((cap, self._num_hash), dtype=np.uint64)
                self._sigs[: len(live)] = sigs
                self._live = np.zeros(cap, dtype=bool)
                self._live[: len(live)] = True
                self._ids = list(ids)
                self._rows = {key: i for i, key in enumerate(ids)}
            self._pending = 0
            self._generation += 1
            return self._generation, ids, sigs

    def index(self) -> None:
        """Rebuild every band table from the live staged signatures and publish them."""
        t0 = time.time()
        generation, ids, sigs = self._take_staged()

        bands = range(self._b)
        if self.verbose:
            bands = tqdm(bands, desc="Indexing bands", unit="band")
        tables = []
        for i in bands:
            keys = band_keys(sigs, i * self._r, (i + 1) * self._r, self._key_width)
            tables.append(BandTable.build(keys))
        snapshot = _Snapshot(generation, ids, frozenset(ids), tuple(tables))

        with self._swap_lock:
            # A slower concurrent rebuild of older staging must not replace a newer one.
            if snapshot.generation > self._snapshot.generation:
                self._snapshot = snapshot

        elapsed = time.time() - t0
        self.stats.add_rebuild(len(ids), elapsed)
        logger.debug("Indexed %d items into %d bands in %.3fs", len(ids), self._b, elapsed)

    # --------------------------------------------------
    # Queries
    # --------------------------------------------------

    def query(self, signature) -> Set[K]:
        """Return the ids sharing at least one band key with *signature*."""
        sig = self._check_shape(signature)
        snapshot = self._snapshot
        result: Set[K] = set()
        if snapshot.ids:
            qkeys = [
                band_keys(sig[np.newaxis, :], i * self._r, (i + 1) * self._r, self._key_width)[0]
                for i in range(self._b)
            ]
            hits = [table.lookup(key) for table, key in zip(snapshot.tables, qkeys)]
            rows = np.unique(np.concatenate(hits))
            result = {snapshot.ids[row] for row in rows}
        self.stats.add_query(len(result))
        return result

    def query_many(self, signatures: Iterable) -> List[Set[K]]:
        """Query each signature in turn; results are positionally aligned."""
        return [self.query(sig) for sig in signatures]

    def keys(self) -> Tuple[K, ...]:
        """Ids in the current snapshot."""
        return self._snapshot.ids

    def __contains__(self, key) -> bool:
        return key in self._snapshot.members

    def __len__(self) -> int:
        return len(self._snapshot.ids)

    def __repr__(self) -> str:
        return (
            f"MinhashLSH(num_hash={self._num_hash}, threshold={self._threshold}, "
            f"r={self._r}, b={self._b}, key_width={self._key_width}, indexed={len(self)})"
        )

"""minhashlsh core package.

Core public API lives here so external users can::

    from minhashlsh.core import Minhash, MinhashLSH

    mh = Minhash(seed=1, num_hash=128)
    mh.push_many(["hello", "world"])
    lsh = MinhashLSH.lsh16(128, threshold=0.5)
    lsh.add("doc-1", mh.signature())
    lsh.index()
    lsh.query(mh.signature())
"""

from importlib.metadata import PackageNotFoundError, version as _pkg_version


# Semantic version of the installed package
try:
    __version__: str = _pkg_version("minhashlsh")
except PackageNotFoundError:  # pragma: no cover – local dev path
    __version__ = "0.1.0"

from .errors import InvalidConfiguration, MinhashLSHError, ShapeMismatch, UnknownKey
from .keys import KEY_WIDTHS, MEDIUM, NARROW, WIDE, band_keys, hash_key_func
from .lsh_index import BandTable, MinhashLSH
from .minhash import Minhash, as_signature, batch_xxhash64, compute_signature, hash_xx64
from .params import collision_probability, false_negative_mass, false_positive_mass, optimal_params
from .stats import IndexStats

__all__ = [
    "__version__",
    # Signatures
    "Minhash",
    "as_signature",
    "compute_signature",
    "hash_xx64",
    "batch_xxhash64",
    # Parameters
    "optimal_params",
    "collision_probability",
    "false_positive_mass",
    "false_negative_mass",
    # Index
    "MinhashLSH",
    "BandTable",
    "IndexStats",
    "hash_key_func",
    "band_keys",
    "KEY_WIDTHS",
    "NARROW",
    "MEDIUM",
    "WIDE",
    # Errors
    "MinhashLSHError",
    "InvalidConfiguration",
    "ShapeMismatch",
    "UnknownKey",
]

"""minhashlsh - approximate Jaccard similarity search with MinHash LSH.

- MinHash signatures over 64-bit xxHash (``Minhash``)
- Band / row selection from a similarity threshold (``optimal_params``)
- Banded index with stage, rebuild and query steps (``MinhashLSH``)

Quick Start:
    from minhashlsh import Minhash, MinhashLSH

    lsh = MinhashLSH(num_hash=128, threshold=0.8)
    lsh.add("doc-1", signature)
    lsh.index()
    candidates = lsh.query(signature)
"""

from .core import __version__

# Re-export main API
from .core import (
    Minhash,
    MinhashLSH,
    BandTable,
    IndexStats,
    as_signature,
    compute_signature,
    optimal_params,
    hash_key_func,
    MinhashLSHError,
    InvalidConfiguration,
    ShapeMismatch,
    UnknownKey,
)
from .config import LSHConfig, load_config

__all__ = [
    "__version__",
    "Minhash",
    "MinhashLSH",
    "BandTable",
    "IndexStats",
    "as_signature",
    "compute_signature",
    "optimal_params",
    "hash_key_func",
    "LSHConfig",
    "load_config",
    "MinhashLSHError",
    "InvalidConfiguration",
    "ShapeMismatch",
    "UnknownKey",
]

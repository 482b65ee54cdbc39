"""YAML configuration for minhashlsh indexes.

Example ``lsh.yml``::

    num_hash: 256
    threshold: 0.6
    capacity: 1000
    key_width: 2
    seed: 42

Every key is optional; omitted keys fall back to the defaults below.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

import yaml  # type: ignore

from .core.errors import InvalidConfiguration
from .core.keys import WIDE, check_width
from .core.minhash import Minhash
from .core.params import validate_threshold


@dataclass(frozen=True)
class LSHConfig:
    num_hash: int = 128
    threshold: float = 0.8
    capacity: int = 1
    key_width: int = WIDE
    seed: int = 1
    false_positive_weight: float = 0.5
    false_negative_weight: float = 0.5
    strict_remove: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.num_hash <= 0:
            raise InvalidConfiguration(f"num_hash must be positive, got {self.num_hash}")
        validate_threshold(self.threshold)
        check_width(self.key_width)
        if self.capacity < 0:
            raise InvalidConfiguration(f"capacity must be non-negative, got {self.capacity}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LSHConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfiguration(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    def new_minhash(self) -> Minhash:
        """A signature generator whose output matches this index configuration."""
        return Minhash(self.seed, self.num_hash)


def load_config(path: Union[str, Path]) -> LSHConfig:
    """Read an :class:`LSHConfig` from a YAML file."""
    cfg_path = Path(path).expanduser().resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(cfg_path)
    with cfg_path.open() as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"{cfg_path}: expected a mapping at the top level")
    return LSHConfig.from_dict(data)

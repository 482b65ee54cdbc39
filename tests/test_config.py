"""YAML configuration tests."""
from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from minhashlsh import LSHConfig, MinhashLSH, load_config
from minhashlsh.core.errors import InvalidConfiguration


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "lsh.yml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_config_with_defaults(tmp_path: Path) -> None:
    cfg = load_config(_write(tmp_path, "num_hash: 256\nthreshold: 0.6\nkey_width: 2\n"))
    assert cfg.num_hash == 256
    assert cfg.threshold == 0.6
    assert cfg.key_width == 2
    assert cfg.capacity == LSHConfig().capacity
    assert cfg.strict_remove is False


def test_empty_file_is_default(tmp_path: Path) -> None:
    assert load_config(_write(tmp_path, "")) == LSHConfig()


def test_index_from_config(tmp_path: Path, words) -> None:
    cfg = load_config(_write(tmp_path, "num_hash: 128\nthreshold: 0.5\nseed: 42\nstrict_remove: true\n"))
    lsh = MinhashLSH.from_config(cfg)
    assert lsh.params() == MinhashLSH(128, 0.5).params()
    assert lsh.strict_remove

    mh = cfg.new_minhash()
    assert mh.seed == 42
    mh.push_many(words)
    lsh.add("doc", mh.signature())
    lsh.index()
    assert lsh.query(mh.signature()) == {"doc"}


def test_unknown_key_rejected(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfiguration):
        load_config(_write(tmp_path, "num_hash: 64\nbands: 8\n"))


def test_invalid_values_rejected(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfiguration):
        load_config(_write(tmp_path, "threshold: 1.5\n"))
    with pytest.raises(InvalidConfiguration):
        load_config(_write(tmp_path, "- 1\n- 2\n"))


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yml")


def test_config_signature_matches_generator(words) -> None:
    cfg = LSHConfig(num_hash=32, seed=5)
    a = cfg.new_minhash()
    b = cfg.new_minhash()
    a.push_many(words)
    b.push_many(words)
    assert np.array_equal(a.signature(), b.signature())

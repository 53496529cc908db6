# tests/core/config/test_config_hashing.py
"""Testes do hash canônico de configuração e de opções."""

import pytest

from batchforge.core.config.hashing import compute_config_hash, compute_options_hash
from batchforge.core.pipeline.options import PipelineOptions


def test_hash_is_independent_of_key_order():
    assert compute_config_hash({"a": 1, "b": {"c": 2}}) == compute_config_hash({"b": {"c": 2}, "a": 1})


def test_hash_is_sha256_hex():
    value = compute_config_hash({"a": 1})
    assert len(value) == 64
    int(value, 16)


def test_hash_rejects_non_dict():
    with pytest.raises(TypeError):
        compute_config_hash(["a"])  # type: ignore[arg-type]


def test_options_hash_tracks_changes():
    a = PipelineOptions(input_path="/in", max_parallelism=2)
    b = PipelineOptions(input_path="/in", max_parallelism=2)
    c = PipelineOptions(input_path="/in", max_parallelism=3)
    assert compute_options_hash(a) == compute_options_hash(b)
    assert compute_options_hash(a) != compute_options_hash(c)
    assert compute_options_hash(a) == compute_config_hash(a.to_dict())

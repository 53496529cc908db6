# tests/core/config/test_config_merge.py
"""Testes da política de deep-merge."""

import pytest

from batchforge.core.config.errors import ConfigTypeConflictError
from batchforge.core.config.merge import deep_merge


def test_nested_dicts_merge_recursively():
    base = {"parameters": {"a": 1, "b": 2}, "overwrite": False}
    override = {"parameters": {"b": 3}}
    assert deep_merge(base, override) == {"parameters": {"a": 1, "b": 3}, "overwrite": False}


def test_lists_are_replaced():
    assert deep_merge({"exts": [".a", ".b"]}, {"exts": [".c"]}) == {"exts": [".c"]}


def test_none_is_replaceable_both_ways():
    assert deep_merge({"output_dir": None}, {"output_dir": "/out"}) == {"output_dir": "/out"}
    assert deep_merge({"output_dir": "/out"}, {"output_dir": None}) == {"output_dir": None}


def test_type_conflict_raises():
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"max_parallelism": 4}, {"max_parallelism": "4"})


def test_inputs_are_not_mutated():
    base = {"parameters": {"a": 1}}
    override = {"parameters": {"a": 2}}
    deep_merge(base, override)
    assert base == {"parameters": {"a": 1}}
    assert override == {"parameters": {"a": 2}}

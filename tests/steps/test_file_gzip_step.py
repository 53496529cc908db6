# tests/steps/test_file_gzip_step.py
"""Testes do step de referência file.gzip."""

import gzip

import pytest

from batchforge.core.pipeline.cancellation import CancellationToken
from batchforge.core.pipeline.options import StepOptions
from batchforge.core.pipeline.types import StepOutcome
from batchforge.steps.file.gzip_compress import GzipStep


def test_output_path_appends_gz(tmp_path):
    step = GzipStep()
    assert step.derive_output_path(str(tmp_path / "a.log"), StepOptions()) == str(tmp_path / "a.log.gz")
    options = StepOptions(output_dir=str(tmp_path / "out"))
    assert step.derive_output_path(str(tmp_path / "a.log"), options) == str(tmp_path / "out" / "a.log.gz")


@pytest.mark.parametrize("level", [0, 10, "9", True])
def test_invalid_compression_level(level):
    result = GzipStep().validate(StepOptions(parameters={"compression_level": level}))
    assert not result.is_valid
    assert result.errors == ("compression_level must be an integer between 1 and 9",)


def test_valid_compression_level():
    assert GzipStep().validate(StepOptions(parameters={"compression_level": 9})).is_valid
    assert GzipStep().validate(StepOptions()).is_valid


def test_execute_compresses(tmp_path):
    src = tmp_path / "a.txt"
    src.write_text("abc" * 10000)
    dst = tmp_path / "a.txt.gz"

    result = GzipStep().execute(
        str(src), str(dst), StepOptions(parameters={"compression_level": 9}), None, CancellationToken()
    )

    assert result.outcome == StepOutcome.SUCCEEDED
    assert result.output_bytes < result.input_bytes
    with gzip.open(str(dst), "rt") as f:
        assert f.read() == "abc" * 10000


def test_execute_observes_cancellation(tmp_path):
    src = tmp_path / "a.txt"
    src.write_text("abc")
    token = CancellationToken()
    token.cancel()
    result = GzipStep().execute(str(src), str(tmp_path / "a.txt.gz"), StepOptions(), None, token)
    assert result.outcome == StepOutcome.CANCELLED

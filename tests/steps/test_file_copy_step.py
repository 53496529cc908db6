# tests/steps/test_file_copy_step.py
"""Testes do step de referência file.copy."""

import os

from batchforge.core.pipeline.cancellation import CancellationToken
from batchforge.core.pipeline.options import StepOptions
from batchforge.core.pipeline.types import StepOutcome
from batchforge.steps.file.copy import CopyStep


def test_output_path_beside_input_gets_suffix(tmp_path):
    step = CopyStep()
    path = str(tmp_path / "a.txt")
    assert step.derive_output_path(path, StepOptions()) == str(tmp_path / "a_copy.txt")
    assert step.derive_output_path(path, StepOptions(parameters={"copy_suffix": "_bak"})) == str(tmp_path / "a_bak.txt")


def test_output_path_in_output_dir_keeps_name(tmp_path):
    step = CopyStep()
    options = StepOptions(output_dir=str(tmp_path / "out"))
    assert step.derive_output_path(str(tmp_path / "a.txt"), options) == str(tmp_path / "out" / "a.txt")


def test_empty_suffix_without_output_dir_is_invalid():
    step = CopyStep()
    assert not step.validate(StepOptions(parameters={"copy_suffix": ""})).is_valid
    assert step.validate(StepOptions(output_dir="/out", parameters={"copy_suffix": ""})).is_valid


def test_execute_copies_bytes_and_reports_progress(tmp_path):
    src = tmp_path / "a.txt"
    src.write_bytes(b"x" * 5000)
    dst = tmp_path / "b.txt"
    updates = []

    result = CopyStep().execute(str(src), str(dst), StepOptions(), updates.append, CancellationToken())

    assert result.outcome == StepOutcome.SUCCEEDED
    assert dst.read_bytes() == src.read_bytes()
    assert result.input_bytes == result.output_bytes == 5000
    assert updates[-1].percent_complete == 100.0


def test_execute_observes_cancellation(tmp_path):
    src = tmp_path / "a.txt"
    src.write_text("data")
    token = CancellationToken()
    token.cancel()

    result = CopyStep().execute(str(src), str(tmp_path / "b.txt"), StepOptions(), None, token)

    assert result.outcome == StepOutcome.CANCELLED
    assert result.step_id == "file.copy"


def test_custom_extensions():
    step = CopyStep(supported_extensions=[".pdf"])
    assert step.supported_extensions == [".pdf"]
    assert ".txt" in CopyStep().supported_extensions
    assert os.path.basename(step.derive_output_path("/x/doc.pdf", StepOptions())) == "doc_copy.pdf"

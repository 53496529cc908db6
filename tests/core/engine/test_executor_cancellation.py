# tests/core/engine/test_executor_cancellation.py
"""
Testes de cancelamento cooperativo do PipelineExecutor.

Cancelamento é distinto de falha: arquivos em andamento terminam (ou
retornam CANCELLED, se o step observar o token), arquivos não iniciados
viram SKIPPED("Cancelled") e `was_cancelled` é sinalizado.
"""

import time

from batchforge.core.engine.engine import PipelineExecutor
from batchforge.core.pipeline.cancellation import CancellationToken
from batchforge.core.pipeline.options import PipelineOptions
from batchforge.core.pipeline.types import StepOutcome


def test_cancel_during_slow_run(tmp_path, make_files, DummyStep):
    make_files({f"test{i}.test": "content" for i in range(10)})
    step = DummyStep("slow", behavior="slow", delay=0.5)
    token = CancellationToken()
    options = PipelineOptions(input_path=str(tmp_path), file_pattern="*.test", max_parallelism=1)

    token.cancel_after(0.1)
    started = time.monotonic()
    result = PipelineExecutor([step]).execute(options, cancel_token=token)
    elapsed = time.monotonic() - started

    assert result.was_cancelled
    assert not result.is_success
    assert result.total == 10
    assert result.cancelled == 1
    assert result.skipped == 9
    assert all(r.message == "Cancelled" for r in result.results if r.outcome == StepOutcome.SKIPPED)
    assert len(step.calls) == 1
    assert elapsed < 5.0


def test_pre_cancelled_token_runs_nothing(tmp_path, make_files, DummyStep):
    make_files({"a.test": "x", "b.test": "y"})
    step = DummyStep()
    token = CancellationToken()
    token.cancel()

    result = PipelineExecutor([step]).execute(PipelineOptions(input_path=str(tmp_path)), cancel_token=token)

    assert result.was_cancelled
    assert step.calls == []
    assert result.skipped == 2
    assert not (tmp_path / "a.out").exists()


def test_cancellation_checked_between_chain_steps(tmp_path, make_files, DummyStep):
    make_files({"a.test": "x"})
    token = CancellationToken()
    first = DummyStep("first", suffix=".mid")

    original = first.execute

    def execute_then_cancel(*args, **kwargs):
        result = original(*args, **kwargs)
        token.cancel()
        return result

    first.execute = execute_then_cancel
    second = DummyStep("second", suffix=".final")

    result = PipelineExecutor([first, second]).execute(
        PipelineOptions(input_path=str(tmp_path)), cancel_token=token
    )

    (r,) = result.results
    assert r.outcome == StepOutcome.CANCELLED
    assert r.step_id == "second"
    assert second.calls == []
    assert not (tmp_path / "a.final").exists()
    assert result.was_cancelled


def test_uncancelled_run_is_not_flagged(tmp_path, make_files, DummyStep):
    make_files({"a.test": "x"})
    result = PipelineExecutor([DummyStep()]).execute(
        PipelineOptions(input_path=str(tmp_path)), cancel_token=CancellationToken()
    )
    assert not result.was_cancelled

# tests/core/engine/test_planner.py
"""
Testes do planejador (plan_pipeline / PipelineExecutor.plan).

Os testes asseguram que:
- opções inválidas produzem plano com erros e sem operações
- nenhum arquivo encontrado produz exatamente um warning explícito
- extensões sem step aplicável viram SKIP com motivo
- saídas existentes viram SKIP sem overwrite e PROCESS com overwrite
- a cadeia é encadeada na ordem declarada
- um step DIRECTORY encerra a cadeia, com warning
- duas entradas que resolvem para a mesma saída não são ambas processadas
- o planejamento não cria arquivos nem diretórios
"""

import os

import pytest

from batchforge.core.engine.engine import PipelineExecutor
from batchforge.core.engine.plan import PipelinePlan, PlannedAction, PlannedOperation
from batchforge.core.engine.planner import NO_FILES_WARNING, plan_pipeline
from batchforge.core.pipeline.options import PipelineOptions
from batchforge.core.pipeline.registry import DuplicateStepIdError
from batchforge.core.pipeline.types import OutputKind


def test_invalid_options_produce_errors_only(DummyStep):
    plan = plan_pipeline([DummyStep()], PipelineOptions(input_path="/missing", max_parallelism=0))
    assert not plan.is_valid
    assert "max_parallelism must be at least 1" in plan.errors
    assert plan.operations == ()


def test_missing_input_yields_single_warning(DummyStep):
    plan = plan_pipeline([DummyStep()], PipelineOptions(input_path="/missing", max_parallelism=1))
    assert plan.is_valid
    assert plan.total_files == 0
    assert plan.warnings == (NO_FILES_WARNING,)


def test_step_validation_errors_are_fatal(tmp_path, make_files, DummyStep):
    make_files({"a.test": "x"})
    steps = [DummyStep("a", errors=["bad config"], warnings=[]), DummyStep("b", warnings=["heads up"])]
    plan = plan_pipeline(steps, PipelineOptions(input_path=str(tmp_path)))
    assert plan.errors == ("bad config",)
    assert plan.operations == ()
    assert "heads up" in plan.warnings


def test_unsupported_extension_is_skipped(tmp_path, make_files, DummyStep):
    make_files({"a.xyz": "x"})
    plan = plan_pipeline([DummyStep()], PipelineOptions(input_path=str(tmp_path)))
    (op,) = plan.operations
    assert op.action == PlannedAction.SKIP
    assert op.skip_reason == "No step supports this file type (.xyz)"


def test_process_operation_details(tmp_path, make_files, DummyStep):
    (path,) = make_files({"a.test": "12345"})
    plan = plan_pipeline([DummyStep()], PipelineOptions(input_path=str(tmp_path), output_dir=str(tmp_path / "out")))
    (op,) = plan.operations
    assert op.action == PlannedAction.PROCESS
    assert op.input_path == path
    assert op.output_path == str(tmp_path / "out" / "a.out")
    assert op.input_size_bytes == 5
    assert op.step_ids == ("dummy",)
    assert not op.will_overwrite
    assert not os.path.exists(tmp_path / "out")


def test_existing_output_is_skipped_without_overwrite(tmp_path, make_files, DummyStep):
    make_files({"a.test": "x", "a.out": "old"})
    plan = plan_pipeline([DummyStep()], PipelineOptions(input_path=str(tmp_path), file_pattern="*.test"))
    (op,) = plan.operations
    assert op.action == PlannedAction.SKIP
    assert op.skip_reason == "Output exists (use overwrite to replace)"


def test_existing_output_is_overwritten_when_allowed(tmp_path, make_files, DummyStep):
    make_files({"a.test": "x", "a.out": "old"})
    options = PipelineOptions(input_path=str(tmp_path), file_pattern="*.test", overwrite=True)
    plan = plan_pipeline([DummyStep()], options)
    (op,) = plan.operations
    assert op.action == PlannedAction.PROCESS
    assert op.will_overwrite
    assert plan.will_overwrite == 1


def test_chain_threads_output_paths(tmp_path, make_files, DummyStep):
    make_files({"a.test": "x"})
    first = DummyStep("first", suffix=".mid")
    second = DummyStep("second", extensions=(".test",), suffix=".final")
    plan = plan_pipeline([first, second], PipelineOptions(input_path=str(tmp_path)))
    (op,) = plan.operations
    assert op.step_ids == ("first", "second")
    assert op.output_path == str(tmp_path / "a.final")


def test_only_matching_steps_join_the_chain(tmp_path, make_files, DummyStep):
    make_files({"a.test": "x"})
    other = DummyStep("other", extensions=(".pdf",))
    plan = plan_pipeline([other, DummyStep()], PipelineOptions(input_path=str(tmp_path)))
    assert plan.operations[0].step_ids == ("dummy",)


def test_directory_step_ends_chain_with_warning(tmp_path, make_files, DummyStep):
    make_files({"a.test": "x", "b.test": "y"})
    extract = DummyStep("extract", suffix="_files", output_kind=OutputKind.DIRECTORY)
    after = DummyStep("after")
    plan = plan_pipeline([extract, after], PipelineOptions(input_path=str(tmp_path)))
    assert all(op.step_ids == ("extract",) for op in plan.operations)
    assert plan.operations[0].output_path == str(tmp_path / "a_files")
    dropped = [w for w in plan.warnings if "after" in w]
    assert len(dropped) == 1


def test_plan_counters(tmp_path, make_files, DummyStep):
    make_files({"a.test": "12", "b.test": "345", "c.xyz": "6"})
    plan = plan_pipeline([DummyStep()], PipelineOptions(input_path=str(tmp_path)))
    assert plan.total_files == 3
    assert plan.will_process == 2
    assert plan.will_skip == 1
    assert plan.estimated_input_bytes == 6
    assert [os.path.basename(o.input_path) for o in plan.operations] == ["a.test", "b.test", "c.xyz"]


def test_plan_invariants_are_enforced():
    options = PipelineOptions(input_path="/x")
    op = PlannedOperation(input_path="/x/a", output_path="/x/b", action=PlannedAction.PROCESS)
    with pytest.raises(ValueError):
        PipelinePlan(options=options, operations=(op,), errors=("e",))
    with pytest.raises(ValueError):
        PipelinePlan(options=options)
    with pytest.raises(ValueError):
        PlannedOperation(input_path="/x/a", output_path="", action=PlannedAction.SKIP)


def test_executor_rejects_empty_and_duplicate_chains(DummyStep):
    with pytest.raises(ValueError):
        PipelineExecutor([])
    with pytest.raises(DuplicateStepIdError):
        PipelineExecutor([DummyStep("x"), DummyStep("x")])


def test_executor_plan_matches_function(tmp_path, make_files, DummyStep):
    make_files({"a.test": "x"})
    step = DummyStep()
    options = PipelineOptions(input_path=str(tmp_path))
    assert PipelineExecutor([step]).plan(options) == plan_pipeline([step], options)


def test_colliding_outputs_keep_first_and_skip_the_rest(tmp_path, make_files, DummyStep):
    first, second = make_files({"a/x.test": "from a", "b/x.test": "from b"}, root=tmp_path / "in")
    options = PipelineOptions(
        input_path=str(tmp_path / "in"),
        recursive=True,
        output_dir=str(tmp_path / "out"),
        overwrite=True,
    )
    plan = plan_pipeline([DummyStep()], options)

    kept, collided = plan.operations
    assert kept.input_path == first
    assert kept.action == PlannedAction.PROCESS
    assert collided.input_path == second
    assert collided.action == PlannedAction.SKIP
    assert collided.skip_reason == f"Output path collides with {first}"
    assert not collided.will_overwrite
    assert any(first in w and second in w for w in plan.warnings)


def test_colliding_outputs_are_published_once(tmp_path, make_files, DummyStep):
    first, second = make_files({"a/x.test": "from a", "b/x.test": "from b"}, root=tmp_path / "in")
    options = PipelineOptions(
        input_path=str(tmp_path / "in"),
        recursive=True,
        output_dir=str(tmp_path / "out"),
        overwrite=True,
    )
    result = PipelineExecutor([DummyStep()]).execute(options)

    assert result.succeeded == 1
    assert result.skipped == 1
    (skipped,) = [r for r in result.results if r.input_path == second]
    assert skipped.message == f"Output path collides with {first}"
    assert (tmp_path / "out" / "x.out").read_text() == "from a"

# src/batchforge/core/engine/engine.py
"""
Executor do pipeline do BatchForge.

O `PipelineExecutor` recebe uma cadeia ordenada de Steps e, para um
`PipelineOptions`, planeja e executa o processamento de cada arquivo.

Fluxo de `execute`:
    1. re-planeja (o plano é sempre um snapshot novo do filesystem)
    2. plano inválido ou dry-run → `PipelineResult.empty()`, sem efeitos
    3. operações PROCESS rodam em um pool de threads limitado por
       `max_parallelism`; cada worker processa a cadeia inteira de um arquivo
    4. operações SKIP do plano viram resultados `Skipped`, anexados após
       os resultados processados

Decisões arquiteturais:
    - Falhas são isoladas por arquivo: exceções levantadas por steps são
      convertidas em `ErrorPayload` e nunca chegam ao pool
    - Saídas FILE são escritas em temporários no diretório de destino e
      publicadas com rename atômico; saídas intermediárias de uma cadeia
      permanecem temporárias e nunca são publicadas
    - Saídas DIRECTORY são escritas diretamente no destino final
    - Cancelamento é um sinal explícito (`CancellationToken`), verificado
      antes de iniciar cada arquivo e entre steps da cadeia
    - `continue_on_error=False` é fail-fast: após a primeira falha,
      arquivos ainda não iniciados viram `Skipped`; os em andamento terminam
    - O canal de log é o `RunContext` (eventos estruturados) e, quando
      presente, o Manifest

Invariantes:
    - Nenhum caminho final é observado parcialmente escrito (saídas FILE)
    - Temporários são removidos ao final de cada arquivo, com ou sem falha
    - `PipelineProgress.completed` é estritamente crescente
    - Uma exceção no callback de progresso nunca interrompe a execução
    - O callback de progresso roda fora dos workers; todas as atualizações
      são entregues antes de `execute` retornar

Limites explícitos:
    - Não implementa retry
    - Não faz rollback de saídas já publicadas
"""

from __future__ import annotations

import os
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from batchforge.core.errors import (
    ErrorPayload,
    engine_configuration_error,
    engine_execution_error,
    input_not_found,
    output_exists,
)
from batchforge.core.exceptions import BatchForgeException
from batchforge.core.pipeline.cancellation import CancellationToken
from batchforge.core.pipeline.context import ENGINE_STEP_ID, RunContext
from batchforge.core.pipeline.options import PipelineOptions, StepOptions
from batchforge.core.pipeline.registry import StepRegistry
from batchforge.core.pipeline.step import Step, step_output_kind
from batchforge.core.pipeline.types import (
    OutputKind,
    PipelineProgress,
    StepOutcome,
    StepResult,
)
from batchforge.core.traceability.manifest import file_finished, file_started, run_finished

from .plan import PipelinePlan, PlannedOperation
from .planner import plan_pipeline
from .publish import discard, ensure_parent_dir, publish, same_path, temp_path_for
from .results import PipelineResult, ResultCollector


ProgressCallback = Callable[[PipelineProgress], None]

CANCELLED_REASON = "Cancelled"
FAIL_FAST_REASON = "Skipped after earlier failure"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _path_size(path: str) -> int:
    """Tamanho em bytes de um arquivo, ou soma dos arquivos de um diretório."""
    if os.path.isfile(path):
        return os.path.getsize(path)
    total = 0
    for dirpath, _dirnames, filenames in os.walk(path):
        for name in filenames:
            total += os.path.getsize(os.path.join(dirpath, name))
    return total


class _ProgressReporter:
    """
    Entrega progresso ao callback em uma thread dedicada.

    Workers apenas enfileiram `PipelineProgress`; um callback lento nunca
    bloqueia o pool. A fila preserva a ordem de `completed`. Erros do
    callback viram eventos de log.
    """

    def __init__(self, callback: Optional[ProgressCallback], *, total: int, ctx: RunContext):
        self._callback = callback
        self._total = total
        self._ctx = ctx
        self._completed = 0
        self._lock = threading.Lock()
        self._queue: "queue.Queue[Optional[PipelineProgress]]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        if callback is not None:
            self._thread = threading.Thread(target=self._drain, name="batchforge-progress", daemon=True)
            self._thread.start()

    def report(self, result: StepResult) -> None:
        with self._lock:
            self._completed += 1
            if self._thread is None:
                return
            self._queue.put(
                PipelineProgress(
                    completed=self._completed,
                    total=self._total,
                    current_file=result.input_path,
                    last_outcome=result.outcome,
                )
            )

    def _drain(self) -> None:
        while True:
            update = self._queue.get()
            if update is None:
                return
            try:
                self._callback(update)
            except Exception as e:
                self._ctx.log(
                    step_id=ENGINE_STEP_ID,
                    level="warning",
                    message="progress callback failed",
                    exc_type=e.__class__.__name__,
                    exc_message=str(e),
                )

    def close(self) -> None:
        """Entrega as atualizações pendentes e encerra a thread."""
        if self._thread is None:
            return
        self._queue.put(None)
        self._thread.join()
        self._thread = None


@dataclass
class _RunState:
    """Estado compartilhado entre os workers de uma execução."""
    options: PipelineOptions
    step_options: StepOptions
    token: CancellationToken
    ctx: RunContext
    collector: ResultCollector
    reporter: _ProgressReporter
    failed: threading.Event


class PipelineExecutor:
    """Planejador + executor canônico do BatchForge."""

    def __init__(self, steps: Sequence[Step]):
        steps = list(steps)
        if not steps:
            raise ValueError("At least one step is required")
        self._registry = StepRegistry.of(steps)

    @property
    def steps(self) -> List[Step]:
        return self._registry.list()

    def plan(self, options: PipelineOptions) -> PipelinePlan:
        """Computa o plano de execução sem efeitos colaterais."""
        return plan_pipeline(self._registry.list(), options)

    # ------------------------------------------------------------------
    # Guardrails: exceção -> ErrorPayload
    # ------------------------------------------------------------------

    def _exception_to_error(self, exc: Exception, *, step_id: Optional[str]) -> ErrorPayload:
        """Converte exceções em ErrorPayload (serializável, acionável).

        Regras:
        - BatchForgeException: o nome da classe é o código estável do erro.
        - Outras exceções: ENGINE_EXECUTION_ERROR, sem stack trace.
        """
        if isinstance(exc, BatchForgeException):
            return ErrorPayload(
                type=exc.__class__.__name__,
                message=str(exc) or "Execution error",
                details={"step": step_id, **dict(getattr(exc, "details", {}) or {})},
                hint=getattr(exc, "hint", None),
            )

        return engine_execution_error(
            step=step_id,
            exc_type=exc.__class__.__name__,
            exc_message=str(exc) or None,
        )

    # ------------------------------------------------------------------
    # Execução por arquivo
    # ------------------------------------------------------------------

    def _run_chain(self, op: PlannedOperation, state: _RunState, input_bytes: int, started: float) -> StepResult:
        """Executa a cadeia de steps de `op`, publicando somente a saída final."""
        temps: List[str] = []
        actual_input = op.input_path
        logical_input = op.input_path
        final_output = op.output_path
        message: Optional[str] = None

        try:
            for index, step_id in enumerate(op.step_ids):
                step = self._registry.get(step_id)
                is_last = index == len(op.step_ids) - 1

                if index > 0 and state.token.is_cancelled:
                    return StepResult.cancelled(
                        op.input_path,
                        duration_s=time.monotonic() - started,
                        input_bytes=input_bytes,
                        step_id=step_id,
                    )

                logical_output = step.derive_output_path(logical_input, state.step_options)
                if is_last:
                    logical_output = final_output
                ensure_parent_dir(logical_output)

                directory = step_output_kind(step) == OutputKind.DIRECTORY
                target = logical_output if directory else temp_path_for(logical_output)
                if not directory:
                    temps.append(target)

                try:
                    result = step.execute(actual_input, target, state.step_options, None, state.token)
                except Exception as e:
                    error = self._exception_to_error(e, step_id=step_id)
                    return StepResult.failed(
                        op.input_path,
                        error.message,
                        error=error,
                        duration_s=time.monotonic() - started,
                        input_bytes=input_bytes,
                        step_id=step_id,
                    )

                if not isinstance(result, StepResult):
                    error = engine_configuration_error(
                        message="Step returned an invalid result type",
                        details={
                            "step": step_id,
                            "expected": "StepResult",
                            "received": result.__class__.__name__,
                        },
                        hint="Ajuste o step para retornar StepResult",
                    )
                    return StepResult.failed(
                        op.input_path,
                        error.message,
                        error=error,
                        duration_s=time.monotonic() - started,
                        input_bytes=input_bytes,
                        step_id=step_id,
                    )

                if result.outcome != StepOutcome.SUCCEEDED:
                    return replace(
                        result,
                        input_path=op.input_path,
                        output_path=None,
                        duration_s=time.monotonic() - started,
                        input_bytes=input_bytes,
                        output_bytes=0,
                        step_id=result.step_id or step_id,
                    )

                message = result.message

                if directory:
                    # saída DIRECTORY encerra a cadeia
                    final_output = logical_output
                    break

                if not os.path.exists(target):
                    # step bem-sucedido sem saída (ex.: nada a extrair)
                    return StepResult.succeeded(
                        op.input_path,
                        final_output,
                        duration_s=time.monotonic() - started,
                        input_bytes=input_bytes,
                        output_bytes=0,
                        message=message,
                    )

                if is_last:
                    allow = state.options.overwrite or same_path(final_output, op.input_path)
                    try:
                        publish(target, final_output, overwrite=allow)
                    except FileExistsError:
                        error = output_exists(output_path=final_output, step=step_id)
                        return StepResult.failed(
                            op.input_path,
                            error.message,
                            error=error,
                            duration_s=time.monotonic() - started,
                            input_bytes=input_bytes,
                            step_id=step_id,
                        )
                else:
                    actual_input = target
                    logical_input = logical_output

            return StepResult.succeeded(
                op.input_path,
                final_output,
                duration_s=time.monotonic() - started,
                input_bytes=input_bytes,
                output_bytes=_path_size(final_output) if os.path.exists(final_output) else 0,
                message=message,
            )
        finally:
            for temp in temps:
                discard(temp)

    def _run_unit(self, op: PlannedOperation, state: _RunState) -> StepResult:
        if state.token.is_cancelled:
            return StepResult.skipped(op.input_path, CANCELLED_REASON, input_bytes=op.input_size_bytes)
        if state.failed.is_set():
            return StepResult.skipped(op.input_path, FAIL_FAST_REASON, input_bytes=op.input_size_bytes)

        started = time.monotonic()
        state.ctx.log(step_id=ENGINE_STEP_ID, level="info", message="file started", input_path=op.input_path)
        state.ctx.record(file_started, input_path=op.input_path, step_ids=op.step_ids, ts=_now())

        try:
            input_bytes = os.path.getsize(op.input_path)
        except OSError:
            error = input_not_found(input_path=op.input_path)
            return StepResult.failed(op.input_path, error.message, error=error)

        try:
            return self._run_chain(op, state, input_bytes, started)
        except Exception as e:
            # falha do próprio engine (ex.: mkdir negado); isolada no arquivo
            error = self._exception_to_error(e, step_id=None)
            return StepResult.failed(
                op.input_path,
                error.message,
                error=error,
                duration_s=time.monotonic() - started,
                input_bytes=input_bytes,
            )

    def _process(self, op: PlannedOperation, state: _RunState) -> None:
        result = self._run_unit(op, state)

        if result.outcome == StepOutcome.FAILED:
            if not state.options.continue_on_error:
                state.failed.set()
            state.ctx.log(
                step_id=result.step_id or ENGINE_STEP_ID,
                level="error",
                message=result.message or "file failed",
                input_path=result.input_path,
                error=result.error.to_dict() if result.error is not None else None,
            )
        else:
            state.ctx.log(
                step_id=ENGINE_STEP_ID,
                level="info",
                message=f"file {result.outcome.value}",
                input_path=result.input_path,
            )

        state.ctx.record(file_finished, input_path=result.input_path, ts=_now(), result=result.to_dict())
        state.collector.append(result)
        state.reporter.report(result)

    # ------------------------------------------------------------------
    # API pública
    # ------------------------------------------------------------------

    def execute(
        self,
        options: PipelineOptions,
        progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
        ctx: Optional[RunContext] = None,
    ) -> PipelineResult:
        """
        Planeja e executa o pipeline.

        Args:
            options (PipelineOptions): opções do run.
            progress (Optional[ProgressCallback]): recebe um `PipelineProgress`
                após cada arquivo concluído.
            cancel_token (Optional[CancellationToken]): sinal de cancelamento.
            ctx (Optional[RunContext]): contexto para log e Manifest; um novo
                contexto é criado quando omitido.

        Returns:
            PipelineResult: resultados processados (ordem de conclusão)
            seguidos dos skips do plano.
        """
        started = time.monotonic()
        ctx = ctx or RunContext.new()
        token = cancel_token or CancellationToken()

        plan = self.plan(options)
        for warning in plan.warnings:
            ctx.add_warning(step_id=ENGINE_STEP_ID, message=warning)

        if not plan.is_valid:
            ctx.log(step_id=ENGINE_STEP_ID, level="error", message="plan is invalid", errors=list(plan.errors))
            return PipelineResult.empty()

        ctx.log(
            step_id=ENGINE_STEP_ID,
            level="info",
            message="plan computed",
            total_files=plan.total_files,
            will_process=plan.will_process,
            will_skip=plan.will_skip,
            dry_run=options.dry_run,
        )
        if options.dry_run:
            return PipelineResult.empty()

        state = _RunState(
            options=options,
            step_options=options.step_options(),
            token=token,
            ctx=ctx,
            collector=ResultCollector(),
            reporter=_ProgressReporter(progress, total=plan.will_process, ctx=ctx),
            failed=threading.Event(),
        )

        to_process = plan.to_process
        try:
            if to_process:
                with ThreadPoolExecutor(
                    max_workers=options.max_parallelism,
                    thread_name_prefix="batchforge",
                ) as pool:
                    futures = [pool.submit(self._process, op, state) for op in to_process]
                    wait(futures)
                    for future in futures:
                        future.result()
        finally:
            state.reporter.close()

        for op in plan.to_skip:
            skipped = StepResult.skipped(op.input_path, op.skip_reason or "Skipped", input_bytes=op.input_size_bytes)
            ctx.record(file_finished, input_path=op.input_path, ts=_now(), result=skipped.to_dict())
            state.collector.append(skipped)

        was_cancelled = token.is_cancelled
        if was_cancelled:
            ctx.log(step_id=ENGINE_STEP_ID, level="warning", message="run cancelled")

        result = PipelineResult(
            results=tuple(state.collector.snapshot()),
            total_duration_s=time.monotonic() - started,
            was_cancelled=was_cancelled,
        )
        summary = result.to_dict()["summary"]
        ctx.log(step_id=ENGINE_STEP_ID, level="info", message="run finished", **summary)
        ctx.record(run_finished, ts=_now(), summary={**summary, "was_cancelled": was_cancelled})
        return result

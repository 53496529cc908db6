# src/batchforge/core/engine/planner.py
"""
Planejador de execução do BatchForge.

Este módulo transforma um `PipelineOptions` e uma cadeia ordenada de
Steps em um `PipelinePlan`: para cada arquivo descoberto, decide se ele
será processado ou ignorado, por quais steps passará e qual será a saída
final.

Princípios fundamentais:
    - O planejamento é livre de efeitos colaterais: apenas leitura do
      filesystem (listagem e `stat`)
    - Erros de configuração são fatais ao plano; warnings não são
    - A ordem das operações segue a ordem da descoberta
    - O mesmo estado de entrada produz sempre o mesmo plano

Decisões arquiteturais:
    - Os steps aplicáveis a um arquivo são os que suportam sua extensão,
      na ordem da cadeia declarada pelo chamador
    - O caminho de saída é encadeado: cada step deriva sua saída a partir
      da saída do step anterior
    - Um step de saída DIRECTORY encerra a cadeia daquele arquivo; steps
      posteriores são descartados com um warning (um por step)
    - Duas operações nunca compartilham a mesma saída final: a primeira na
      ordem da descoberta vence e as demais viram SKIP com warning

Limites explícitos:
    - Não executa Steps
    - Não cria diretórios nem arquivos
    - Não interage com RunContext
"""

from __future__ import annotations

import os
from dataclasses import replace
from typing import Dict, List, Sequence, Set, Tuple

from batchforge.core.pipeline.options import PipelineOptions, StepOptions
from batchforge.core.pipeline.step import Step, step_output_kind, supports_extension
from batchforge.core.pipeline.types import OutputKind

from .discovery import discover_files
from .plan import PipelinePlan, PlannedAction, PlannedOperation
from .publish import same_path


NO_FILES_WARNING = "No files found matching input pattern"
OUTPUT_EXISTS_REASON = "Output exists (use overwrite to replace)"


def unsupported_reason(extension: str) -> str:
    return f"No step supports this file type ({extension})"


def _file_size(path: str) -> int:
    try:
        return os.path.getsize(path)
    except OSError:
        # arquivo removido entre descoberta e planejamento; a execução reporta
        return 0


def collision_reason(first_input: str) -> str:
    return f"Output path collides with {first_input}"


def _path_key(path: str) -> str:
    return os.path.normcase(os.path.abspath(path))


def _validate_steps(steps: Sequence[Step], step_options: StepOptions) -> Tuple[List[str], List[str]]:
    errors: List[str] = []
    warnings: List[str] = []
    for step in steps:
        validation = step.validate(step_options)
        errors.extend(validation.errors)
        warnings.extend(validation.warnings)
    return errors, warnings


def _chain_for(
    input_path: str,
    steps: Sequence[Step],
    step_options: StepOptions,
    dropped: Set[str],
) -> Tuple[List[str], str]:
    """Steps aplicáveis a `input_path` e o caminho de saída final da cadeia."""
    extension = os.path.splitext(input_path)[1]
    matching = [s for s in steps if supports_extension(s, extension)]

    chain: List[str] = []
    current = input_path
    ended = False
    for step in matching:
        if ended:
            dropped.add(step.id)
            continue
        current = step.derive_output_path(current, step_options)
        chain.append(step.id)
        ended = step_output_kind(step) == OutputKind.DIRECTORY
    return chain, current


def _plan_file(
    input_path: str,
    steps: Sequence[Step],
    options: PipelineOptions,
    step_options: StepOptions,
    dropped: Set[str],
) -> PlannedOperation:
    size = _file_size(input_path)
    chain, output_path = _chain_for(input_path, steps, step_options, dropped)

    if not chain:
        return PlannedOperation(
            input_path=input_path,
            output_path="",
            action=PlannedAction.SKIP,
            input_size_bytes=size,
            skip_reason=unsupported_reason(os.path.splitext(input_path)[1]),
        )

    output_exists = os.path.exists(output_path) and not same_path(output_path, input_path)
    if output_exists and not options.overwrite:
        return PlannedOperation(
            input_path=input_path,
            output_path=output_path,
            action=PlannedAction.SKIP,
            input_size_bytes=size,
            skip_reason=OUTPUT_EXISTS_REASON,
            step_ids=tuple(chain),
        )

    return PlannedOperation(
        input_path=input_path,
        output_path=output_path,
        action=PlannedAction.PROCESS,
        input_size_bytes=size,
        will_overwrite=output_exists,
        step_ids=tuple(chain),
    )


def _resolve_collisions(operations: List[PlannedOperation], warnings: List[str]) -> List[PlannedOperation]:
    """
    Garante que duas operações PROCESS nunca publiquem no mesmo caminho.

    A primeira operação (na ordem da descoberta) mantém a saída; as
    seguintes viram SKIP, com um warning por colisão.
    """
    claimed: Dict[str, str] = {}
    resolved: List[PlannedOperation] = []
    for op in operations:
        if op.action != PlannedAction.PROCESS:
            resolved.append(op)
            continue
        key = _path_key(op.output_path)
        first = claimed.get(key)
        if first is None:
            claimed[key] = op.input_path
            resolved.append(op)
            continue
        warnings.append(f"{op.input_path}: {collision_reason(first)}")
        resolved.append(
            replace(
                op,
                action=PlannedAction.SKIP,
                will_overwrite=False,
                skip_reason=collision_reason(first),
            )
        )
    return resolved


def plan_pipeline(steps: Sequence[Step], options: PipelineOptions) -> PipelinePlan:
    """
    Computa o plano de execução para `options` sobre a cadeia `steps`.

    Args:
        steps (Sequence[Step]): cadeia ordenada de steps.
        options (PipelineOptions): opções do run.

    Returns:
        PipelinePlan: plano com operações, ou com erros (e sem operações)
        quando a configuração é inválida.
    """
    validation = options.validate()
    if not validation.is_valid:
        return PipelinePlan.failed(options, list(validation.errors), list(validation.warnings))

    files = discover_files(options)

    step_options = options.step_options()
    errors, warnings = _validate_steps(steps, step_options)
    warnings = list(validation.warnings) + warnings
    if errors:
        return PipelinePlan.failed(options, errors, warnings)

    dropped: Set[str] = set()
    operations = _resolve_collisions(
        [_plan_file(path, steps, options, step_options, dropped) for path in files],
        warnings,
    )

    for step in steps:
        if step.id in dropped:
            warnings.append(
                f"Step '{step.id}' follows a directory output and was not applied"
            )

    if not operations:
        warnings.append(NO_FILES_WARNING)

    return PipelinePlan(
        options=options,
        operations=tuple(operations),
        warnings=tuple(warnings),
    )

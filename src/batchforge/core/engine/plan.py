# src/batchforge/core/engine/plan.py
"""
Estruturas do plano de execução.

Um `PipelinePlan` é a descrição, livre de efeitos colaterais, do que uma
execução faria: uma `PlannedOperation` por arquivo descoberto, mais
erros de configuração e warnings não fatais.

Invariantes:
    - Operação SKIP sempre carrega `skip_reason`
    - Plano com erros não possui operações
    - Plano sem operações e sem erros carrega ao menos um warning
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from batchforge.core.pipeline.options import PipelineOptions


class PlannedAction(str, Enum):
    PROCESS = "process"
    SKIP = "skip"


@dataclass(frozen=True)
class PlannedOperation:
    """Uma linha do plano: o que acontecerá com um arquivo de entrada."""
    input_path: str
    output_path: str
    action: PlannedAction
    input_size_bytes: int = 0
    will_overwrite: bool = False
    skip_reason: Optional[str] = None
    step_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "step_ids", tuple(self.step_ids))
        if self.action == PlannedAction.SKIP and not self.skip_reason:
            raise ValueError("A skipped operation requires a skip reason")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input_path": self.input_path,
            "output_path": self.output_path,
            "action": self.action.value,
            "input_size_bytes": self.input_size_bytes,
            "will_overwrite": self.will_overwrite,
            "skip_reason": self.skip_reason,
            "step_ids": list(self.step_ids),
        }


@dataclass(frozen=True)
class PipelinePlan:
    """Plano completo computado a partir de um `PipelineOptions`."""
    options: PipelineOptions
    operations: Tuple[PlannedOperation, ...] = ()
    warnings: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "operations", tuple(self.operations))
        object.__setattr__(self, "warnings", tuple(self.warnings))
        object.__setattr__(self, "errors", tuple(self.errors))
        if self.errors and self.operations:
            raise ValueError("A plan with errors cannot carry operations")
        if not self.errors and not self.operations and not self.warnings:
            raise ValueError("An empty plan must explain itself with a warning")

    @classmethod
    def failed(cls, options: PipelineOptions, errors: List[str], warnings: List[str] = ()) -> "PipelinePlan":
        return cls(options=options, errors=tuple(errors), warnings=tuple(warnings))

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def total_files(self) -> int:
        return len(self.operations)

    @property
    def to_process(self) -> List[PlannedOperation]:
        return [o for o in self.operations if o.action == PlannedAction.PROCESS]

    @property
    def to_skip(self) -> List[PlannedOperation]:
        return [o for o in self.operations if o.action == PlannedAction.SKIP]

    @property
    def will_process(self) -> int:
        return len(self.to_process)

    @property
    def will_skip(self) -> int:
        return len(self.to_skip)

    @property
    def will_overwrite(self) -> int:
        return sum(1 for o in self.operations if o.will_overwrite)

    @property
    def estimated_input_bytes(self) -> int:
        return sum(o.input_size_bytes for o in self.operations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "options": self.options.to_dict(),
            "operations": [o.to_dict() for o in self.operations],
            "warnings": list(self.warnings),
            "errors": list(self.errors),
        }

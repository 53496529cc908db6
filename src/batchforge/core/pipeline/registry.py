# src/batchforge/core/pipeline/registry.py
"""
Registro estrutural da cadeia de Steps.

Este módulo define o `StepRegistry`, responsável por registrar Steps e
validar a integridade estrutural da cadeia antes de qualquer
planejamento ou execução.

O registry garante que:
    - cada Step possua um identificador válido
    - não existam identificadores duplicados
    - a ordem de declaração dos Steps seja preservada: é ela que define a
      ordem de aplicação dos steps sobre cada arquivo

Limites explícitos:
    - Não planeja execução
    - Não executa Steps
    - Não reordena Steps
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .step import Step


class DuplicateStepIdError(ValueError):
    """
    Exceção levantada quando dois Steps da cadeia compartilham o mesmo `id`.

    A duplicidade é tratada como erro fatal de configuração no momento do
    registro, antes de qualquer planejamento.
    """


@dataclass
class StepRegistry:
    """Registro ordenado de Steps com `id` único."""

    _steps: Dict[str, Step] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def of(cls, steps: Iterable[Step]) -> "StepRegistry":
        registry = cls()
        for step in steps:
            registry.add(step)
        return registry

    def add(self, step: Step) -> None:
        step_id = getattr(step, "id", None)
        if not isinstance(step_id, str) or not step_id.strip():
            raise ValueError("step.id must be a non-empty string")
        if step_id in self._steps:
            raise DuplicateStepIdError(f"Duplicate step id: {step_id}")
        self._steps[step_id] = step
        self._order.append(step_id)

    def get(self, step_id: str) -> Step:
        return self._steps[step_id]

    def list(self) -> List[Step]:
        return [self._steps[sid] for sid in self._order]

    def ids(self) -> List[str]:
        return list(self._order)

    def __len__(self) -> int:
        return len(self._order)

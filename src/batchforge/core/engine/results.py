# src/batchforge/core/engine/results.py
"""
Agregação de resultados de uma execução.

Workers escrevem em um `ResultCollector` (lista append-only protegida por
lock). Ao final da execução o engine constrói, uma única vez, o
`PipelineResult` terminal.

Invariantes:
    - Contagens e totais são sempre derivados de `results`, nunca armazenados
    - `PipelineResult` é imutável após criação
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from batchforge.core.pipeline.types import StepOutcome, StepResult


class ResultCollector:
    """Coletor thread-safe de `StepResult` (ordem de conclusão)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._results: List[StepResult] = []

    def append(self, result: StepResult) -> None:
        with self._lock:
            self._results.append(result)

    def snapshot(self) -> List[StepResult]:
        with self._lock:
            return list(self._results)

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)


@dataclass(frozen=True)
class PipelineResult:
    """Resultado agregado e terminal de uma execução do pipeline."""

    results: Tuple[StepResult, ...] = ()
    total_duration_s: float = 0.0
    was_cancelled: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "results", tuple(self.results))
        if self.total_duration_s < 0:
            raise ValueError("total_duration_s must be non-negative")

    @classmethod
    def empty(cls) -> "PipelineResult":
        return cls()

    def _count(self, outcome: StepOutcome) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)

    @property
    def succeeded(self) -> int:
        return self._count(StepOutcome.SUCCEEDED)

    @property
    def failed(self) -> int:
        return self._count(StepOutcome.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(StepOutcome.SKIPPED)

    @property
    def cancelled(self) -> int:
        return self._count(StepOutcome.CANCELLED)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def total_input_bytes(self) -> int:
        return sum(r.input_bytes for r in self.results)

    @property
    def total_output_bytes(self) -> int:
        return sum(r.output_bytes for r in self.results)

    @property
    def is_success(self) -> bool:
        return self.failed == 0 and not self.was_cancelled

    @property
    def has_failures(self) -> bool:
        return self.failed > 0

    @property
    def failed_results(self) -> List[StepResult]:
        return [r for r in self.results if r.outcome == StepOutcome.FAILED]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "total_duration_s": self.total_duration_s,
            "was_cancelled": self.was_cancelled,
            "summary": {
                "total": self.total,
                "succeeded": self.succeeded,
                "failed": self.failed,
                "skipped": self.skipped,
                "cancelled": self.cancelled,
                "total_input_bytes": self.total_input_bytes,
                "total_output_bytes": self.total_output_bytes,
            },
        }

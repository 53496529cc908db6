# src/batchforge/core/pipeline/types.py
"""
Tipos canônicos do pipeline do BatchForge.

Este módulo define as estruturas e enums fundamentais que padronizam
a comunicação entre Steps, Planner, Executor e camadas de relatório.

Os tipos aqui definidos representam:
    - desfechos finais do processamento de um arquivo
    - resultado imutável produzido para cada arquivo
    - resultado de validação (opções do run e opções de step)
    - eventos de progresso (por arquivo e por step)

Componentes principais:
    - StepOutcome      → enum de desfechos (SUCCEEDED, FAILED, SKIPPED, CANCELLED)
    - OutputKind       → natureza da saída de um step (arquivo único ou diretório)
    - StepResult       → estrutura imutável de resultado por arquivo
    - ValidationResult → erros e warnings de validação, sem estado parcial
    - PipelineProgress → progresso agregado reportado ao sink externo
    - StepProgress     → progresso interno de um step

Invariantes:
    - Enums possuem valores textuais canônicos
    - StepResult é imutável e não pode ser construído em estado inconsistente
    - ValidationResult válido nunca carrega erros; inválido sempre carrega

Limites explícitos:
    - Não executa Steps
    - Não planeja pipelines
    - Não contém lógica de domínio
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from batchforge.core.errors import ErrorPayload


class StepOutcome(str, Enum):
    """
    Desfechos finais possíveis do processamento de um arquivo.

    Estados definidos:
        - SUCCEEDED: cadeia de steps concluída e saída publicada
        - FAILED: um step falhou (ou levantou exceção convertida pelo executor)
        - SKIPPED: nenhum step foi executado (decisão do plano, cancelamento
          antes do início ou fail-fast)
        - CANCELLED: o cancelamento foi observado durante a execução

    O estado é terminal: a máquina de estados por arquivo é
    `Queued → Running → {SUCCEEDED | FAILED | SKIPPED | CANCELLED}`, e
    estados intermediários não pertencem a este enum.
    """
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"


class OutputKind(str, Enum):
    """Natureza da saída produzida por um step."""
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class StepResult:
    """
    Resultado imutável do processamento de um arquivo.

    Campos:
        - input_path: arquivo de entrada
        - outcome: desfecho final
        - output_path: saída final (obrigatória em SUCCEEDED)
        - message: mensagem humana (obrigatória em FAILED e SKIPPED)
        - error: detalhe estruturado da falha (ErrorPayload)
        - duration_s: duração em segundos
        - input_bytes / output_bytes: contagens em bytes
        - step_id: step que produziu a falha/cancelamento, quando conhecido

    Construção:
        Use os construtores `succeeded`, `failed`, `skipped` e `cancelled`.
        A construção direta é validada em `__post_init__`; combinações
        inconsistentes (ex.: SUCCEEDED sem output_path) levantam ValueError.
    """
    input_path: str
    outcome: StepOutcome
    output_path: Optional[str] = None
    message: Optional[str] = None
    error: Optional[ErrorPayload] = None
    duration_s: float = 0.0
    input_bytes: int = 0
    output_bytes: int = 0
    step_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.outcome, StepOutcome):
            raise ValueError(f"Invalid outcome: {self.outcome!r}")
        if not self.input_path:
            raise ValueError("StepResult requires an input path")
        if self.outcome == StepOutcome.SUCCEEDED and not self.output_path:
            raise ValueError("A succeeded result requires an output path")
        if self.outcome == StepOutcome.FAILED and not self.message:
            raise ValueError("A failed result requires a message")
        if self.outcome == StepOutcome.SKIPPED and not self.message:
            raise ValueError("A skipped result requires a reason")
        if self.outcome != StepOutcome.FAILED and self.error is not None:
            raise ValueError("Only failed results carry an error payload")
        if self.input_bytes < 0 or self.output_bytes < 0:
            raise ValueError("Byte counts cannot be negative")
        if self.duration_s < 0:
            raise ValueError("Duration cannot be negative")

    # -----------------------------
    # Construtores por desfecho
    # -----------------------------
    @classmethod
    def succeeded(
        cls,
        input_path: str,
        output_path: str,
        *,
        duration_s: float = 0.0,
        input_bytes: int = 0,
        output_bytes: int = 0,
        message: Optional[str] = None,
        step_id: Optional[str] = None,
    ) -> "StepResult":
        return cls(
            input_path=input_path,
            outcome=StepOutcome.SUCCEEDED,
            output_path=output_path,
            message=message,
            duration_s=duration_s,
            input_bytes=input_bytes,
            output_bytes=output_bytes,
            step_id=step_id,
        )

    @classmethod
    def failed(
        cls,
        input_path: str,
        message: str,
        *,
        error: Optional[ErrorPayload] = None,
        duration_s: float = 0.0,
        input_bytes: int = 0,
        step_id: Optional[str] = None,
    ) -> "StepResult":
        return cls(
            input_path=input_path,
            outcome=StepOutcome.FAILED,
            message=message,
            error=error,
            duration_s=duration_s,
            input_bytes=input_bytes,
            step_id=step_id,
        )

    @classmethod
    def skipped(cls, input_path: str, reason: str, *, input_bytes: int = 0) -> "StepResult":
        return cls(
            input_path=input_path,
            outcome=StepOutcome.SKIPPED,
            message=reason,
            input_bytes=input_bytes,
        )

    @classmethod
    def cancelled(
        cls,
        input_path: str,
        *,
        message: str = "Operation cancelled",
        duration_s: float = 0.0,
        input_bytes: int = 0,
        step_id: Optional[str] = None,
    ) -> "StepResult":
        return cls(
            input_path=input_path,
            outcome=StepOutcome.CANCELLED,
            message=message,
            duration_s=duration_s,
            input_bytes=input_bytes,
            step_id=step_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input_path": self.input_path,
            "output_path": self.output_path,
            "outcome": self.outcome.value,
            "message": self.message,
            "error": self.error.to_dict() if self.error is not None else None,
            "duration_s": self.duration_s,
            "input_bytes": self.input_bytes,
            "output_bytes": self.output_bytes,
            "step_id": self.step_id,
        }


@dataclass(frozen=True)
class ValidationResult:
    """
    Resultado de uma validação (opções do run ou opções de um step).

    `valid()`, `invalid(*errors)` e `with_warnings(*warnings)` são os
    caminhos de construção; não existe estado "parcialmente válido".
    """
    is_valid: bool
    errors: Tuple[str, ...] = field(default_factory=tuple)
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "errors", tuple(self.errors))
        object.__setattr__(self, "warnings", tuple(self.warnings))
        if self.is_valid and self.errors:
            raise ValueError("A valid ValidationResult cannot carry errors")
        if not self.is_valid and not self.errors:
            raise ValueError("An invalid ValidationResult requires at least one error")

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def invalid(cls, *errors: str) -> "ValidationResult":
        return cls(is_valid=False, errors=tuple(errors))

    @classmethod
    def with_warnings(cls, *warnings: str) -> "ValidationResult":
        return cls(is_valid=True, warnings=tuple(warnings))


@dataclass(frozen=True)
class PipelineProgress:
    """Progresso reportado ao sink após cada arquivo concluído."""
    completed: int
    total: int
    current_file: str
    last_outcome: StepOutcome

    @property
    def percent_complete(self) -> float:
        return (self.completed / self.total * 100.0) if self.total > 0 else 0.0


@dataclass(frozen=True)
class StepProgress:
    """Progresso interno de um step sobre um arquivo (0–100)."""
    input_path: str
    percent_complete: float
    status: Optional[str] = None

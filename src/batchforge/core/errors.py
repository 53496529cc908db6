"""
BatchForge — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do BatchForge.

Falhas por arquivo nunca são propagadas como exceções para fora do worker:
elas viram dados, anexados ao `StepResult` como `ErrorPayload`. Por isso
os erros devem ser:
- explícitos
- serializáveis
- associados ao arquivo e ao step que os produziu

Nenhum stack trace cru é exposto no payload.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do BatchForge.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """
    type: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ErrorPayload":
        return cls(
            type=str(data.get("type", "")),
            message=str(data.get("message", "")),
            details=dict(data.get("details", {}) or {}),
            hint=data.get("hint"),
        )


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Engine / Execução
ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"
ENGINE_CONFIGURATION_ERROR = "ENGINE_CONFIGURATION_ERROR"

# Arquivos
INPUT_NOT_FOUND = "INPUT_NOT_FOUND"
OUTPUT_EXISTS = "OUTPUT_EXISTS"

# Steps
STEP_FAILED = "STEP_FAILED"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def engine_execution_error(
    *,
    step: Optional[str] = None,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Verifique o event log do run para diagnosticar a falha. Nenhum retry é aplicado automaticamente.",
) -> ErrorPayload:
    return ErrorPayload(
        type=ENGINE_EXECUTION_ERROR,
        message=exc_message or "Falha inesperada durante a execução do step",
        details={
            "step": step,
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint=hint,
    )


def engine_configuration_error(
    *,
    message: str = "Configuração inválida para execução do pipeline",
    details: Optional[Dict[str, Any]] = None,
    hint: str = "Revise a implementação do step ou as opções do run antes de reexecutar.",
) -> ErrorPayload:
    return ErrorPayload(
        type=ENGINE_CONFIGURATION_ERROR,
        message=message,
        details=details or {},
        hint=hint,
    )


def input_not_found(*, input_path: str, step: Optional[str] = None) -> ErrorPayload:
    return ErrorPayload(
        type=INPUT_NOT_FOUND,
        message=f"Input file not found: {input_path}",
        details={"input_path": input_path, "step": step},
        hint="O arquivo foi removido entre o planejamento e a execução. Reexecute o plano.",
    )


def output_exists(*, output_path: str, step: Optional[str] = None) -> ErrorPayload:
    return ErrorPayload(
        type=OUTPUT_EXISTS,
        message=f"Output exists: {output_path}",
        details={"output_path": output_path, "step": step},
        hint="Habilite overwrite para substituir saídas existentes.",
    )


def step_failed(*, step: str, message: str, details: Optional[Dict[str, Any]] = None) -> ErrorPayload:
    return ErrorPayload(
        type=STEP_FAILED,
        message=message,
        details={"step": step, **(details or {})},
        hint=None,
    )

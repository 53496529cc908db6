"""
BatchForge — Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do BatchForge.

Objetivo:
- Permitir que Steps levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para ErrorPayload
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Steps devem preferir retornar `StepResult.failed(...)`; exceções que
  escapam de um step são capturadas pelo executor e convertidas em dados.
- Exceções devem carregar apenas dados estruturados (serializáveis).
- Cancelamento NÃO é modelado como exceção (ver CancellationToken).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class BatchForgeException(Exception):
    """Base class para exceções internas do BatchForge.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Arquivos
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InputNotFound(BatchForgeException):
    """Arquivo de entrada planejado não existe mais no momento da execução."""


@dataclass(frozen=True)
class OutputExists(BatchForgeException):
    """Saída final já existe e overwrite não foi autorizado."""


# ---------------------------------------------------------------------------
# Steps / Configuração
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StepConfigurationError(BatchForgeException):
    """Parâmetros de step inválidos detectados durante a execução."""

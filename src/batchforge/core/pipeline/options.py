# src/batchforge/core/pipeline/options.py
"""
Opções de execução do pipeline e validação pré-voo.

Este módulo define:
    - PipelineOptions → configuração imutável de uma invocação do engine
    - StepOptions     → visão das opções entregue a cada Step
    - validate_options → validação pura (sem I/O) das opções do run

Princípios fundamentais:
    - Defaults seguros: nada é sobrescrito sem `overwrite=True`
    - Opções são imutáveis após construção
    - Validação retorna TODAS as violações, nunca apenas a primeira

Limites explícitos:
    - Não acessa filesystem (validação é estrutural)
    - Não conhece o schema de parâmetros de cada Step
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, TypeVar

from .types import ValidationResult


MIN_PARALLELISM = 1
MAX_PARALLELISM = 64

T = TypeVar("T")


def default_parallelism() -> int:
    """Número de unidades de processamento disponíveis, limitado ao teto do engine."""
    return max(MIN_PARALLELISM, min(os.cpu_count() or 1, MAX_PARALLELISM))


def _freeze(parameters: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(parameters or {}))


def _accepts(value: Any, default: Any) -> bool:
    # bool é subclasse de int: nunca aceitar True/False onde se espera número (e vice-versa)
    if isinstance(default, bool) or isinstance(value, bool):
        return isinstance(value, bool) and isinstance(default, bool)
    return isinstance(value, type(default))


@dataclass(frozen=True)
class StepOptions:
    """
    Opções entregues a cada Step (validação, derivação de saída e execução).

    Campos:
        - output_dir: diretório de saída resolvido (ou "" para "ao lado da entrada")
        - overwrite: se saídas existentes podem ser substituídas
        - parameters: parâmetros específicos de steps (mapa somente leitura)
    """
    output_dir: str = ""
    overwrite: bool = False
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", _freeze(self.parameters))

    def get_parameter(self, key: str, default: T) -> T:
        """
        Retorna o parâmetro `key` quando presente e do mesmo tipo de `default`.

        Ausência ou tipo incompatível retornam `default`. O engine permanece
        agnóstico ao schema de cada step; cada step declara o tipo esperado
        pelo valor default que fornece.
        """
        if key not in self.parameters:
            return default
        value = self.parameters[key]
        if default is None or _accepts(value, default):
            return value
        return default

    def has_parameter(self, key: str) -> bool:
        return key in self.parameters


@dataclass(frozen=True)
class PipelineOptions:
    """
    Configuração imutável de uma execução do pipeline.

    Campos:
        - input_path: arquivo, diretório ou padrão glob de entrada
        - output_dir: diretório de saída; None grava ao lado das entradas
        - max_parallelism: limite de arquivos processados simultaneamente [1, 64]
        - overwrite: substituir saídas existentes (default: False, seguro)
        - continue_on_error: seguir processando após falhas (default: True)
        - dry_run: apenas planejar, sem executar steps
        - recursive: descer em subdiretórios
        - file_pattern: filtro de nome de arquivo (ex.: "*.pdf")
        - parameters: parâmetros específicos de steps (chave → valor)
    """
    input_path: str
    output_dir: Optional[str] = None
    max_parallelism: int = field(default_factory=default_parallelism)
    overwrite: bool = False
    continue_on_error: bool = True
    dry_run: bool = False
    recursive: bool = False
    file_pattern: str = "*"
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", _freeze(self.parameters))

    def validate(self) -> ValidationResult:
        return validate_options(self)

    def step_options(self) -> StepOptions:
        """
        Visão das opções entregue aos Steps.

        Sem `output_dir` configurado, `StepOptions.output_dir` é vazio e cada
        step grava ao lado do próprio arquivo de entrada.
        """
        return StepOptions(
            output_dir=self.output_dir or "",
            overwrite=self.overwrite,
            parameters=self.parameters,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["parameters"] = dict(self.parameters)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PipelineOptions":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown pipeline option(s): {', '.join(unknown)}")
        # input_path ausente vira "" e é reportado por validate_options
        return cls(**{"input_path": "", **dict(data)})


def validate_options(options: PipelineOptions) -> ValidationResult:
    """
    Valida as opções do run antes de qualquer I/O.

    Regras (nesta ordem, todas reportadas):
        1. input_path presente e não vazio
        2. max_parallelism dentro de [1, 64]
    """
    errors: List[str] = []

    if not isinstance(options.input_path, str) or not options.input_path.strip():
        errors.append("Input path is required")

    parallelism = options.max_parallelism
    if isinstance(parallelism, bool) or not isinstance(parallelism, int):
        errors.append("max_parallelism must be an integer")
    elif parallelism < MIN_PARALLELISM:
        errors.append(f"max_parallelism must be at least {MIN_PARALLELISM}")
    elif parallelism > MAX_PARALLELISM:
        errors.append(f"max_parallelism cannot exceed {MAX_PARALLELISM}")

    if errors:
        return ValidationResult.invalid(*errors)
    return ValidationResult.valid()

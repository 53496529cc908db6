# src/batchforge/core/config/loader.py
"""
Loader de configuração do BatchForge.

Resolve as opções de um run a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional; ignorado se ausente)
    - overrides explícitos do chamador (ex.: `input_path` vindo da linha
      de comando), aplicados por último

O resultado de `load_config` é um dicionário puro; `load_options`
converte esse dicionário em um `PipelineOptions` imutável.

Princípios fundamentais:
    - Configuração é declarativa e explícita
    - Erros estruturais são falhas fatais, levantadas antes de qualquer plano
    - A mesma entrada sempre produz a mesma configuração final

Limites explícitos:
    - Não valida regras do run (ex.: limites de paralelismo); isso é
      responsabilidade de `validate_options` durante o planejamento
    - Não interage com Engine ou Steps
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import json

import yaml  # PyYAML

from batchforge.core.pipeline.options import PipelineOptions

from .errors import (
    ConfigFileNotFoundError,
    InvalidConfigRootTypeError,
    UnknownOptionError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo YAML ou JSON cujo conteúdo raiz é um dicionário.

    Arquivos vazios são interpretados como dicionários vazios.

    Raises:
        ConfigFileNotFoundError: se o arquivo não existir.
        UnsupportedConfigFormatError: se a extensão não for suportada.
        InvalidConfigRootTypeError: se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise ConfigFileNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_config(
    *,
    defaults_path: str,
    local_path: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva de um run.

    Precedência: overrides > arquivo local > defaults.

    Args:
        defaults_path (str): arquivo de configuração base.
        local_path (Optional[str]): arquivo opcional de overrides locais.
        overrides (Optional[Mapping[str, Any]]): overrides do chamador.

    Returns:
        Dict[str, Any]: configuração final resolvida.

    Raises:
        ConfigFileNotFoundError, UnsupportedConfigFormatError,
        InvalidConfigRootTypeError, ConfigTypeConflictError
    """
    effective = _load_file(Path(defaults_path))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    if overrides:
        effective = deep_merge(effective, dict(overrides))

    return effective


def options_from_config(config: Mapping[str, Any]) -> PipelineOptions:
    """
    Converte um dicionário resolvido em `PipelineOptions`.

    Raises:
        UnknownOptionError: se houver chaves que não são opções do pipeline.
    """
    try:
        return PipelineOptions.from_dict(config)
    except ValueError as e:
        raise UnknownOptionError(str(e)) from e


def load_options(
    defaults_path: str,
    local_path: Optional[str] = None,
    **overrides: Any,
) -> PipelineOptions:
    """Atalho: `load_config` seguido de `options_from_config`."""
    config = load_config(
        defaults_path=defaults_path,
        local_path=local_path,
        overrides=overrides,
    )
    return options_from_config(config)

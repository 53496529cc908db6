# src/batchforge/core/config/__init__.py
"""
Camada de configuração do BatchForge.

Carrega opções de run a partir de arquivos YAML/JSON (defaults + overrides
locais), resolve a configuração final via deep-merge determinístico e
calcula um hash canônico para rastreabilidade.

Limites explícitos:
    - Não executa pipeline
    - Não interage com Steps
"""

from .errors import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigTypeConflictError,
    InvalidConfigRootTypeError,
    UnknownOptionError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash, compute_options_hash
from .loader import load_config, load_options, options_from_config
from .merge import deep_merge

__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigTypeConflictError",
    "InvalidConfigRootTypeError",
    "UnknownOptionError",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "compute_options_hash",
    "deep_merge",
    "load_config",
    "load_options",
    "options_from_config",
]

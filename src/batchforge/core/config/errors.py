# src/batchforge/core/config/errors.py
"""
Exceções da camada de configuração do BatchForge.

Erros de configuração são erros do chamador: são levantados antes que
qualquer plano exista e nunca se misturam às falhas por arquivo, que
são retornadas como dados no `PipelineResult`.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
"""


class ConfigError(Exception):
    """Base para erros de carregamento e resolução de configuração."""


class ConfigFileNotFoundError(ConfigError):
    """
    Arquivo de configuração obrigatório (defaults) não encontrado.

    Um arquivo local de override ausente não é erro: ele é simplesmente
    ignorado.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Extensão de arquivo não suportada.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz do arquivo não é um mapa chave-valor."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo:
        - base:     {"max_parallelism": 4}
        - override: {"max_parallelism": "4"}
    """


class UnknownOptionError(ConfigError):
    """A configuração resolvida contém chaves que não são opções do pipeline."""

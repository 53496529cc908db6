# src/batchforge/core/config/hashing.py
"""
Hash canônico de opções resolvidas.

O hash identifica estruturalmente a configuração de um run e é gravado
no Manifest (`inputs.options_hash`), permitindo comparar execuções.

Política (v1): JSON canônico (chaves ordenadas, separadores compactos,
UTF-8) → SHA-256 hexadecimal.
"""

import hashlib
import json
from typing import Any, Dict, Mapping


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Hash SHA-256 de um dicionário de configuração.

    Raises:
        TypeError: se `config` não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    canonical_json = json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()


def compute_options_hash(options: Any) -> str:
    """Hash de um `PipelineOptions` (ou de seu `to_dict()`)."""
    data = options if isinstance(options, Mapping) else options.to_dict()
    return compute_config_hash(dict(data))

"""
Rastreabilidade de execuções do BatchForge.

Este pacote define o Manifest de uma run: estado por arquivo e Event Log
ordenado, persistível em JSON determinístico.

Componentes:
    - manifest → RunManifest e operações explícitas de atualização
"""

from .manifest import (
    RunManifest,
    create_manifest,
    add_event,
    file_started,
    file_finished,
    run_finished,
    save_manifest,
    load_manifest,
)

__all__ = [
    "RunManifest",
    "create_manifest",
    "add_event",
    "file_started",
    "file_finished",
    "run_finished",
    "save_manifest",
    "load_manifest",
]

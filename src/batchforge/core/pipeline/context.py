# src/batchforge/core/pipeline/context.py
"""
Contexto de execução de uma run do BatchForge.

Este módulo define o `RunContext`, a estrutura que acompanha uma
execução do engine e concentra seus sinais observáveis:
    - identidade da execução (run_id, created_at)
    - log estruturado de eventos (o canal de logging do engine)
    - warnings não fatais agrupados por origem
    - Manifest opcional de rastreabilidade

Princípios fundamentais:
    - Isolamento por execução (cada run possui seu próprio contexto)
    - Eventos estruturados e ordenados, sempre com `run_id`
    - Seguro para escrita concorrente a partir dos workers

Invariantes:
    - Logs sempre incluem `run_id`, `step_id`, `level` e `timestamp` UTC
    - Warnings são agrupados por `step_id`
    - Toda mutação passa pelo lock interno

Limites explícitos:
    - Não executa Steps
    - Não planeja nem coordena execução
    - Não persiste dados automaticamente
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from batchforge.core.traceability.manifest import RunManifest


ENGINE_STEP_ID = "engine"


@dataclass
class RunContext:
    """
    Contexto compartilhado de uma run do pipeline.

    Campos:
    - run_id: identificador único da execução
    - created_at: timestamp UTC de criação do contexto
    - meta: metadados livres (ex.: origem da invocação)
    - manifest: Manifest de rastreabilidade, quando o chamador deseja um
    - events: log estruturado de eventos
    - warnings: warnings por step_id

    Decisões arquiteturais:
        - Workers do executor escrevem aqui em paralelo; por isso log,
          warnings e atualizações do manifest são serializados por lock
        - O engine não usa o módulo `logging`: o log é um artefato
          estruturado da run, inspecionável por testes e relatórios
    """
    run_id: str
    created_at: datetime
    meta: Dict[str, Any] = field(default_factory=dict)
    manifest: Optional[RunManifest] = None

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False, compare=False)

    @classmethod
    def new(cls, *, manifest: Optional[RunManifest] = None, **meta: Any) -> "RunContext":
        return cls(
            run_id=f"run-{uuid.uuid4().hex[:12]}",
            created_at=datetime.now(timezone.utc),
            meta=dict(meta),
            manifest=manifest,
        )

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "step_id": step_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        with self._lock:
            self.events.append(event)

    def add_warning(self, *, step_id: str, message: str) -> None:
        with self._lock:
            if step_id not in self.warnings:
                self.warnings[step_id] = []
            self.warnings[step_id].append(message)

    def events_at(self, level: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [e for e in self.events if e.get("level") == level]

    # -----------------------------
    # Manifest
    # -----------------------------
    def record(self, update: Callable[..., None], **kwargs: Any) -> None:
        """Aplica `update(manifest, **kwargs)` sob lock, se houver manifest."""
        if self.manifest is None:
            return
        with self._lock:
            update(self.manifest, **kwargs)

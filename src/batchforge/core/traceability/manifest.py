# src/batchforge/core/traceability/manifest.py
"""
Manifest v1 — rastreabilidade de execuções do BatchForge.

Este módulo define a estrutura e as operações canônicas do Manifest,
o artefato de rastreabilidade de uma run do engine.

O Manifest consolida, de forma determinística e auditável:
    - metadados da execução (run)
    - hash canônico das opções resolvidas
    - estado incremental de cada arquivo processado
    - Event Log ordenado de eventos explícitos

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - Toda mutação ocorre por chamadas explícitas da API
    - A ordem do Event Log reflete a ordem real de conclusão
    - O Manifest é serializável e reconstruível (round-trip)

Decisões arquiteturais:
    - UTC é o timezone canônico para todos os timestamps
    - O formato de persistência é JSON determinístico
    - Arquivos são indexados pelo caminho de entrada

Limites explícitos:
    - Não executa pipeline
    - Não decide políticas de execução
    - Não realiza migração de versões de schema
    - Não é thread-safe por si só (o RunContext serializa o acesso)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """Normaliza um timestamp para timezone-aware em UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


def _ms_between(start: datetime, end: datetime) -> int:
    """Duração em milissegundos, nunca negativa."""
    s = _ensure_tzaware_utc(start)
    e = _ensure_tzaware_utc(end)
    return max(0, int((e - s).total_seconds() * 1000))


@dataclass
class RunManifest:
    """
    Manifest v1 — registro de uma execução do engine.

    Campos principais:
        - run: identificação e timestamps da execução
        - inputs: hash das opções resolvidas e cadeia de steps
        - files: estado por arquivo de entrada
        - events: Event Log ordenado

    Invariantes:
        - `events` é sempre uma lista ordenada
        - `files` é sempre um dicionário indexado pelo caminho de entrada
    """
    run: Dict[str, Any]
    inputs: Dict[str, Any]
    files: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run": dict(self.run),
            "inputs": dict(self.inputs),
            "files": {k: dict(v) for k, v in self.files.items()},
            "events": [dict(e) for e in self.events],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunManifest":
        """Reconstrução permissiva: campos ausentes viram coleções vazias."""
        return cls(
            run=dict(data.get("run", {})),
            inputs=dict(data.get("inputs", {})),
            files={k: dict(v) for k, v in (data.get("files", {}) or {}).items()},
            events=[dict(e) for e in (data.get("events", []) or [])],
        )


def create_manifest(
    *,
    run_id: str,
    started_at: datetime,
    engine_version: str,
    options_hash: str,
    step_ids: Sequence[str] = (),
) -> RunManifest:
    """
    Cria o Manifest inicial de uma execução.

    ⚠️ Esta função **não emite eventos implicitamente**: o Event Log
    inicia vazio e só é preenchido por chamadas explícitas.
    """
    return RunManifest(
        run={
            "run_id": run_id,
            "started_at": _iso(started_at),
            "engine_version": engine_version,
        },
        inputs={
            "options_hash": options_hash,
            "step_ids": list(step_ids),
        },
    )


def add_event(
    manifest: RunManifest,
    *,
    event_type: str,
    ts: datetime,
    input_path: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """Adiciona um evento explícito ao Event Log, preservando a ordem de chamada."""
    ev: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if input_path is not None:
        ev["input_path"] = input_path
    if payload is not None:
        ev["payload"] = payload
    manifest.events.append(ev)


def file_started(
    manifest: RunManifest,
    *,
    input_path: str,
    step_ids: Sequence[str],
    ts: datetime,
) -> None:
    """Marca um arquivo como em execução (`running`)."""
    entry = manifest.files.setdefault(input_path, {"input_path": input_path})
    entry.update(
        {
            "status": "running",
            "step_ids": list(step_ids),
            "started_at": _iso(ts),
        }
    )
    add_event(manifest, event_type="file_started", ts=ts, input_path=input_path)


def file_finished(
    manifest: RunManifest,
    *,
    input_path: str,
    ts: datetime,
    result: Dict[str, Any],
) -> None:
    """
    Registra o desfecho final de um arquivo.

    `result` é a forma serializada de um `StepResult` (`to_dict()`). O
    evento registrado é `file_<outcome>` (ex.: `file_succeeded`).
    """
    entry = manifest.files.setdefault(input_path, {"input_path": input_path})
    started_iso = entry.get("started_at")
    started_dt = datetime.fromisoformat(started_iso) if started_iso else ts

    outcome = result.get("outcome", "succeeded")
    entry.update(
        {
            "status": outcome,
            "finished_at": _iso(ts),
            "duration_ms": _ms_between(started_dt, ts),
            "output_path": result.get("output_path"),
            "message": result.get("message"),
            "input_bytes": result.get("input_bytes", 0),
            "output_bytes": result.get("output_bytes", 0),
        }
    )
    payload: Dict[str, Any] = {"message": result.get("message")}
    if result.get("error") is not None:
        entry["error"] = result["error"]
        payload["error"] = result["error"]
    if result.get("step_id") is not None:
        entry["step_id"] = result["step_id"]

    add_event(manifest, event_type=f"file_{outcome}", ts=ts, input_path=input_path, payload=payload)


def run_finished(
    manifest: RunManifest,
    *,
    ts: datetime,
    summary: Dict[str, Any],
) -> None:
    """Fecha a run registrando o resumo agregado."""
    manifest.run["finished_at"] = _iso(ts)
    manifest.run["summary"] = dict(summary)
    add_event(manifest, event_type="run_finished", ts=ts, payload=dict(summary))


def save_manifest(manifest: RunManifest, path: Path) -> None:
    """Persiste o Manifest em JSON determinístico (chaves ordenadas, UTF-8)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(manifest.to_dict(), ensure_ascii=False, indent=2, sort_keys=True),
        encoding="utf-8",
    )


def load_manifest(path: Path) -> RunManifest:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return RunManifest.from_dict(data)

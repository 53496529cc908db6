# tests/core/pipeline/test_run_context_logging.py
"""
Testes do log estruturado e dos warnings do RunContext.

Invariantes verificadas:
- eventos sempre carregam run_id, step_id, level, message e timestamp
- warnings são agrupados por step_id
- escrita concorrente não perde eventos
- `record` só atua quando há Manifest
"""

import threading
from datetime import datetime, timezone

from batchforge.core.pipeline.context import RunContext
from batchforge.core.traceability.manifest import add_event, create_manifest


def test_log_event_shape(run_ctx):
    run_ctx.log(step_id="engine", level="info", message="hello", files=3)
    event = run_ctx.events[-1]
    assert event["run_id"] == run_ctx.run_id
    assert event["step_id"] == "engine"
    assert event["level"] == "info"
    assert event["message"] == "hello"
    assert event["files"] == 3
    assert "timestamp" in event


def test_run_id_is_unique():
    assert RunContext.new().run_id != RunContext.new().run_id


def test_warnings_grouped_by_step(run_ctx):
    run_ctx.add_warning(step_id="a", message="w1")
    run_ctx.add_warning(step_id="a", message="w2")
    run_ctx.add_warning(step_id="b", message="w3")
    assert run_ctx.warnings == {"a": ["w1", "w2"], "b": ["w3"]}


def test_concurrent_logging_keeps_every_event(run_ctx):
    def worker(n):
        for i in range(50):
            run_ctx.log(step_id=f"w{n}", level="debug", message=str(i))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(run_ctx.events_at("debug")) == 400


def test_record_without_manifest_is_noop(run_ctx):
    calls = []
    run_ctx.record(lambda manifest, **kw: calls.append(kw), x=1)
    assert calls == []


def test_record_applies_update_to_manifest():
    ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
    manifest = create_manifest(run_id="r", started_at=ts, engine_version="0.1.0", options_hash="h")
    ctx = RunContext.new(manifest=manifest)
    ctx.record(add_event, event_type="custom", ts=ts)
    assert manifest.events[-1]["event_type"] == "custom"

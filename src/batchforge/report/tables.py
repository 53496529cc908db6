# src/batchforge/report/tables.py
"""
Exportação tabular (pandas) de planos e resultados.

Uma linha por arquivo. Útil para inspeção em notebooks, filtros e
exportação (`to_csv`, `to_parquet`) sem que o core dependa de pandas.

Colunas estáveis, mesmo quando não há linhas.
"""

from __future__ import annotations

from typing import Any, Dict, List

from batchforge.core.engine.plan import PipelinePlan
from batchforge.core.engine.results import PipelineResult


PLAN_COLUMNS: List[str] = [
    "input_path",
    "output_path",
    "action",
    "input_size_bytes",
    "will_overwrite",
    "skip_reason",
    "step_ids",
]

RESULT_COLUMNS: List[str] = [
    "input_path",
    "output_path",
    "outcome",
    "message",
    "error_type",
    "step_id",
    "duration_s",
    "input_bytes",
    "output_bytes",
]


def plan_to_frame(plan: PipelinePlan):
    """DataFrame com uma linha por `PlannedOperation`, na ordem do plano."""
    import pandas as pd  # type: ignore

    rows: List[Dict[str, Any]] = []
    for op in plan.operations:
        row = op.to_dict()
        row["step_ids"] = ",".join(op.step_ids)
        rows.append(row)
    return pd.DataFrame(rows, columns=PLAN_COLUMNS)


def result_to_frame(result: PipelineResult):
    """DataFrame com uma linha por `StepResult`, na ordem do resultado."""
    import pandas as pd  # type: ignore

    rows: List[Dict[str, Any]] = []
    for r in result.results:
        rows.append(
            {
                "input_path": r.input_path,
                "output_path": r.output_path,
                "outcome": r.outcome.value,
                "message": r.message,
                "error_type": r.error.type if r.error is not None else None,
                "step_id": r.step_id,
                "duration_s": r.duration_s,
                "input_bytes": r.input_bytes,
                "output_bytes": r.output_bytes,
            }
        )
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)

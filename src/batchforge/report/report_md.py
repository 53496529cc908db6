"""
src/batchforge/report/report_md.py

Relatórios Markdown de plano e de execução — BatchForge

Regras:
- O relatório é derivado EXCLUSIVAMENTE do `PipelinePlan` / `PipelineResult`.
- Não acessa o filesystem, não recalcula decisões do planner.
- Mesmo plano/resultado => mesmo Markdown (exceto pela ordem de conclusão,
  que já está registrada em `PipelineResult.results`).

Estrutura do relatório de plano:
# Pipeline Plan
## Summary
## Warnings        (quando houver)
## Errors          (quando houver)
## Operations

Estrutura do relatório de execução:
# Pipeline Execution
## Summary
## Failed Operations (quando houver)
"""

from __future__ import annotations

from typing import List

from batchforge.core.engine.plan import PipelinePlan, PlannedAction
from batchforge.core.engine.results import PipelineResult


DEFAULT_MAX_OPERATIONS = 20
DEFAULT_MAX_FAILURES = 10

_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_bytes(num_bytes: int) -> str:
    """Formata bytes em unidade binária legível (ex.: `1.5 KB`)."""
    size = float(num_bytes)
    order = 0
    while size >= 1024 and order < len(_UNITS) - 1:
        order += 1
        size /= 1024
    text = f"{size:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_UNITS[order]}"


def render_plan_md(plan: PipelinePlan, *, max_operations: int = DEFAULT_MAX_OPERATIONS) -> str:
    """Gera o Markdown de um plano (resumo, warnings, erros e operações)."""
    lines: List[str] = []

    lines.append("# Pipeline Plan\n")

    lines.append("## Summary")
    lines.append(f"- **Total files**: {plan.total_files}")
    lines.append(f"- **Will process**: {plan.will_process}")
    lines.append(f"- **Will skip**: {plan.will_skip}")
    lines.append(f"- **Will overwrite**: {plan.will_overwrite}")
    lines.append(f"- **Input size**: {format_bytes(plan.estimated_input_bytes)}")
    lines.append("")

    if plan.warnings:
        lines.append(f"## Warnings ({len(plan.warnings)})")
        for warning in plan.warnings:
            lines.append(f"- ⚠ {warning}")
        lines.append("")

    if plan.errors:
        lines.append(f"## Errors ({len(plan.errors)})")
        for error in plan.errors:
            lines.append(f"- ✗ {error}")
        lines.append("")

    if plan.operations:
        lines.append("## Operations")
        for op in plan.operations[:max_operations]:
            if op.action == PlannedAction.PROCESS:
                flag = " [overwrite]" if op.will_overwrite else ""
                lines.append(f"- → `{op.input_path}`")
                lines.append(f"  - └─> `{op.output_path}`{flag}")
            else:
                lines.append(f"- ○ `{op.input_path}`")
                lines.append(f"  - └─ skip: {op.skip_reason}")
        hidden = plan.total_files - max_operations
        if hidden > 0:
            lines.append(f"- ... and {hidden} more files")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def render_result_md(result: PipelineResult, *, max_failures: int = DEFAULT_MAX_FAILURES) -> str:
    """Gera o Markdown do resultado de uma execução."""
    lines: List[str] = []

    lines.append("# Pipeline Execution\n")

    lines.append("## Summary")
    lines.append(f"- **Total**: {result.total}")
    lines.append(f"- **Succeeded**: {result.succeeded}")
    lines.append(f"- **Failed**: {result.failed}")
    lines.append(f"- **Skipped**: {result.skipped}")
    if result.was_cancelled:
        lines.append(f"- **Cancelled**: {result.cancelled}")
    lines.append(f"- **Duration**: {result.total_duration_s:.2f}s")

    if result.total_input_bytes > 0:
        lines.append(f"- **Input**: {format_bytes(result.total_input_bytes)}")
        lines.append(f"- **Output**: {format_bytes(result.total_output_bytes)}")
        if 0 < result.total_output_bytes < result.total_input_bytes:
            savings = (1 - result.total_output_bytes / result.total_input_bytes) * 100
            lines.append(f"- **Savings**: {savings:.1f}%")
    lines.append("")

    if result.has_failures:
        lines.append("## Failed Operations")
        failures = result.failed_results
        for failure in failures[:max_failures]:
            lines.append(f"- ✗ `{failure.input_path}`")
            lines.append(f"  - {failure.message}")
        if len(failures) > max_failures:
            lines.append(f"- ... and {len(failures) - max_failures} more failures")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"

"""
Adapters de apresentação do BatchForge.

Consomem `PipelinePlan` / `PipelineResult` e nunca o contrário: o core
não conhece este pacote.
"""

from .report_md import format_bytes, render_plan_md, render_result_md
from .tables import plan_to_frame, result_to_frame

__all__ = [
    "format_bytes",
    "render_plan_md",
    "render_result_md",
    "plan_to_frame",
    "result_to_frame",
]

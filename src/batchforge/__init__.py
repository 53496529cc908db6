# src/batchforge/__init__.py
"""
BatchForge — engine de processamento de arquivos em lote.

Um pipeline é uma cadeia fixa e ordenada de Steps aplicada a cada arquivo
de entrada. O engine descobre arquivos, planeja (processar ou ignorar,
com qual saída) e executa em paralelo limitado, com publicação atômica
de saídas, cancelamento cooperativo e falhas isoladas por arquivo.

Arquitetura em alto nível:
    - core.pipeline     → contratos de Step, opções, resultados, contexto
    - core.engine       → descoberta, planejamento e execução
    - core.config       → opções a partir de YAML/JSON
    - core.traceability → Manifest e Event Log por arquivo
    - report            → Markdown e DataFrames de planos e resultados
    - steps             → steps de referência (file.copy, file.gzip, archive.unzip)

Limites explícitos:
    - Não há CLI neste pacote
    - Não há retry nem rollback de saídas publicadas
"""

from batchforge.core.engine.engine import PipelineExecutor
from batchforge.core.engine.plan import PipelinePlan, PlannedAction, PlannedOperation
from batchforge.core.engine.planner import plan_pipeline
from batchforge.core.engine.results import PipelineResult
from batchforge.core.pipeline.cancellation import CancellationToken
from batchforge.core.pipeline.context import RunContext
from batchforge.core.pipeline.options import PipelineOptions, StepOptions, validate_options
from batchforge.core.pipeline.step import Step
from batchforge.core.pipeline.types import (
    OutputKind,
    PipelineProgress,
    StepOutcome,
    StepProgress,
    StepResult,
    ValidationResult,
)

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "OutputKind",
    "PipelineExecutor",
    "PipelineOptions",
    "PipelinePlan",
    "PipelineProgress",
    "PipelineResult",
    "PlannedAction",
    "PlannedOperation",
    "RunContext",
    "Step",
    "StepOptions",
    "StepOutcome",
    "StepProgress",
    "StepResult",
    "ValidationResult",
    "plan_pipeline",
    "validate_options",
]

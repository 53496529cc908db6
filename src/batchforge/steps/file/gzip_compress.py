"""Step de referência: file.gzip (v1).

Responsabilidades:
- comprimir o arquivo de entrada em formato gzip (`<nome>.gz`)
- observar cancelamento entre blocos

Parâmetros (via StepOptions.parameters):
- compression_level (int, 1..9, default 6)

Limites explícitos (v1):
- NÃO remove o arquivo de entrada
- NÃO recomprime arquivos já comprimidos (extensões suportadas são texto/dados)
"""

from __future__ import annotations

import gzip
import os
import time
from dataclasses import dataclass, field
from typing import List, Optional

from batchforge.core.pipeline.cancellation import CancellationToken
from batchforge.core.pipeline.options import StepOptions
from batchforge.core.pipeline.step import Step, StepProgressCallback
from batchforge.core.pipeline.types import OutputKind, StepResult, ValidationResult
from batchforge.steps.common import copy_chunks, output_path_for


DEFAULT_EXTENSIONS = [".txt", ".csv", ".json", ".log", ".xml", ".tar"]
DEFAULT_LEVEL = 6


@dataclass
class GzipStep(Step):
    """Comprime arquivos com gzip."""

    id: str = "file.gzip"
    description: str = "Compress files with gzip"
    supported_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    output_kind: OutputKind = OutputKind.FILE

    def validate(self, options: StepOptions) -> ValidationResult:
        if options.has_parameter("compression_level"):
            level = options.parameters["compression_level"]
            if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= 9:
                return ValidationResult.invalid("compression_level must be an integer between 1 and 9")
        return ValidationResult.valid()

    def derive_output_path(self, input_path: str, options: StepOptions) -> str:
        return output_path_for(input_path, options, name=os.path.basename(input_path) + ".gz")

    def execute(
        self,
        input_path: str,
        output_path: str,
        options: StepOptions,
        progress: Optional[StepProgressCallback],
        cancel_token: CancellationToken,
    ) -> StepResult:
        started = time.monotonic()
        size = os.path.getsize(input_path)
        level = options.get_parameter("compression_level", DEFAULT_LEVEL)

        with open(input_path, "rb") as src, gzip.open(output_path, "wb", compresslevel=level) as dst:
            completed = copy_chunks(
                src,
                dst,
                input_path=input_path,
                total_bytes=size,
                cancel_token=cancel_token,
                progress=progress,
            )

        if not completed:
            return StepResult.cancelled(input_path, input_bytes=size, step_id=self.id)

        compressed = os.path.getsize(output_path)
        return StepResult.succeeded(
            input_path,
            output_path,
            duration_s=time.monotonic() - started,
            input_bytes=size,
            output_bytes=compressed,
            message=f"compressed {size} -> {compressed} bytes",
            step_id=self.id,
        )

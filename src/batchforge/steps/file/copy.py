"""Step de referência: file.copy (v1).

Responsabilidades:
- copiar o arquivo de entrada, byte a byte, para o caminho recebido do executor
- observar cancelamento entre blocos

Parâmetros (via StepOptions.parameters):
- copy_suffix (str, default "_copy"): sufixo aplicado ao nome quando a
  saída é gravada ao lado da entrada

Limites explícitos (v1):
- NÃO preserva metadados (mtime, permissões)
- NÃO interpreta o conteúdo
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from typing import List, Optional

from batchforge.core.pipeline.cancellation import CancellationToken
from batchforge.core.pipeline.options import StepOptions
from batchforge.core.pipeline.step import Step, StepProgressCallback
from batchforge.core.pipeline.types import OutputKind, StepResult, ValidationResult
from batchforge.steps.common import copy_chunks, output_path_for, with_suffix


DEFAULT_EXTENSIONS = [".txt", ".csv", ".json", ".log", ".dat"]


@dataclass
class CopyStep(Step):
    """Copia arquivos para o diretório de saída (ou ao lado, com sufixo)."""

    id: str = "file.copy"
    description: str = "Copy files"
    supported_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    output_kind: OutputKind = OutputKind.FILE

    def validate(self, options: StepOptions) -> ValidationResult:
        suffix = options.get_parameter("copy_suffix", "_copy")
        if not options.output_dir and not suffix:
            return ValidationResult.invalid(
                "copy_suffix cannot be empty when no output directory is configured"
            )
        return ValidationResult.valid()

    def derive_output_path(self, input_path: str, options: StepOptions) -> str:
        if options.output_dir:
            return output_path_for(input_path, options, name=os.path.basename(input_path))
        suffix = options.get_parameter("copy_suffix", "_copy")
        return output_path_for(input_path, options, name=with_suffix(input_path, suffix))

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

        with open(input_path, "rb") as src, open(output_path, "wb") as dst:
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

        return StepResult.succeeded(
            input_path,
            output_path,
            duration_s=time.monotonic() - started,
            input_bytes=size,
            output_bytes=os.path.getsize(output_path),
            step_id=self.id,
        )

"""Step de referência: archive.unzip (v1).

Responsabilidades:
- extrair um arquivo .zip para o diretório `<stem>_files`
- observar cancelamento entre membros do arquivo

Saída DIRECTORY:
- o executor entrega o diretório final (não há temporário); uma extração
  interrompida pode deixar o diretório parcialmente preenchido
- encerra a cadeia de steps do arquivo

Limites explícitos (v1):
- NÃO suporta arquivos protegidos por senha
- NÃO extrai membros cujo caminho escape do diretório de destino
"""

from __future__ import annotations

import os
import shutil
import time
import zipfile
from dataclasses import dataclass, field
from typing import List, Optional

from batchforge.core.errors import step_failed
from batchforge.core.pipeline.cancellation import CancellationToken
from batchforge.core.pipeline.options import StepOptions
from batchforge.core.pipeline.step import Step, StepProgressCallback
from batchforge.core.pipeline.types import OutputKind, StepProgress, StepResult, ValidationResult
from batchforge.steps.common import output_path_for


def _safe_target(root: str, member: str) -> Optional[str]:
    target = os.path.abspath(os.path.join(root, member))
    base = os.path.abspath(root)
    if target != base and not target.startswith(base + os.sep):
        return None
    return target


@dataclass
class UnzipStep(Step):
    """Extrai arquivos .zip."""

    id: str = "archive.unzip"
    description: str = "Extract zip archives"
    supported_extensions: List[str] = field(default_factory=lambda: [".zip"])
    output_kind: OutputKind = OutputKind.DIRECTORY

    def validate(self, options: StepOptions) -> ValidationResult:
        return ValidationResult.valid()

    def derive_output_path(self, input_path: str, options: StepOptions) -> str:
        stem = os.path.splitext(os.path.basename(input_path))[0]
        return output_path_for(input_path, options, name=f"{stem}_files")

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

        try:
            archive = zipfile.ZipFile(input_path)
        except zipfile.BadZipFile as e:
            message = f"Not a valid zip archive: {e}"
            return StepResult.failed(
                input_path,
                message,
                error=step_failed(step=self.id, message=message),
                input_bytes=size,
                step_id=self.id,
            )

        extracted = 0
        with archive:
            members = archive.infolist()
            os.makedirs(output_path, exist_ok=True)

            for index, info in enumerate(members):
                if cancel_token.is_cancelled:
                    return StepResult.cancelled(input_path, input_bytes=size, step_id=self.id)

                target = _safe_target(output_path, info.filename)
                if target is None:
                    message = f"Archive member escapes destination: {info.filename}"
                    return StepResult.failed(
                        input_path,
                        message,
                        error=step_failed(step=self.id, message=message, details={"member": info.filename}),
                        input_bytes=size,
                        step_id=self.id,
                    )

                if info.is_dir():
                    os.makedirs(target, exist_ok=True)
                else:
                    os.makedirs(os.path.dirname(target), exist_ok=True)
                    with archive.open(info) as src, open(target, "wb") as dst:
                        shutil.copyfileobj(src, dst)
                    extracted += info.file_size

                if progress is not None:
                    progress(StepProgress(
                        input_path=input_path,
                        percent_complete=(index + 1) * 100.0 / len(members),
                        status=info.filename,
                    ))

        return StepResult.succeeded(
            input_path,
            output_path,
            duration_s=time.monotonic() - started,
            input_bytes=size,
            output_bytes=extracted,
            message=f"extracted {len(members)} member(s)",
            step_id=self.id,
        )

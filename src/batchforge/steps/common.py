# src/batchforge/steps/common.py
"""
Utilitários compartilhados pelos steps de referência.

- derivação de caminhos de saída (diretório de saída configurado ou ao
  lado da entrada)
- cópia em blocos com checkpoints de cancelamento e progresso
"""

from __future__ import annotations

import os
from typing import BinaryIO, Optional

from batchforge.core.pipeline.cancellation import CancellationToken
from batchforge.core.pipeline.options import StepOptions
from batchforge.core.pipeline.step import StepProgressCallback
from batchforge.core.pipeline.types import StepProgress


CHUNK_SIZE = 1024 * 1024


def output_path_for(input_path: str, options: StepOptions, *, name: str) -> str:
    """`name` dentro do diretório de saída, ou ao lado de `input_path`."""
    directory = options.output_dir or os.path.dirname(input_path)
    return os.path.join(directory, name)


def with_suffix(input_path: str, suffix: str) -> str:
    """Nome do arquivo com `suffix` antes da extensão (`a.txt` → `a_copy.txt`)."""
    stem, ext = os.path.splitext(os.path.basename(input_path))
    return f"{stem}{suffix}{ext}"


def copy_chunks(
    src: BinaryIO,
    dst: BinaryIO,
    *,
    input_path: str,
    total_bytes: int,
    cancel_token: CancellationToken,
    progress: Optional[StepProgressCallback] = None,
) -> bool:
    """
    Copia `src` em `dst` em blocos.

    Returns:
        bool: False se o cancelamento foi observado antes do fim.
    """
    copied = 0
    for chunk in iter(lambda: src.read(CHUNK_SIZE), b""):
        if cancel_token.is_cancelled:
            return False
        dst.write(chunk)
        copied += len(chunk)
        if progress is not None and total_bytes > 0:
            progress(StepProgress(input_path=input_path, percent_complete=min(100.0, copied * 100.0 / total_bytes)))
    return True

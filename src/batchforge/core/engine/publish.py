# src/batchforge/core/engine/publish.py
"""
Publicação atômica de saídas.

Um step que produz um único arquivo nunca escreve diretamente no caminho
final: ele recebe um caminho temporário, único por invocação, no mesmo
diretório do destino. Somente após sucesso o temporário é movido para o
destino. Sem overwrite, a publicação usa `os.link`, que falha
atomicamente se o destino já existe; com overwrite, `os.replace` (rename
atômico no mesmo filesystem). O temporário é sempre removido ao final,
inclusive em falha ou exceção.

Saídas do tipo diretório (ex.: extração de vários arquivos) são escritas
diretamente no diretório final. Nesse caso a garantia é mais fraca: um
step que falha no meio pode deixar o diretório parcialmente preenchido,
e a consistência depende das escritas internas do próprio step.

Invariantes:
    - Nenhum caminho final é observado parcialmente escrito (saídas FILE)
    - Dois workers nunca disputam o mesmo caminho temporário
    - Sem overwrite, um destino existente nunca é substituído, mesmo sob
      publicações concorrentes
    - Criação de diretórios é idempotente e segura sob concorrência
"""

from __future__ import annotations

import os
import shutil
import uuid
from pathlib import Path
from typing import Optional


TEMP_PREFIX = ".batchforge-"


def temp_path_for(final_path: str) -> str:
    """
    Caminho temporário único, no diretório do destino final.

    O nome preserva a extensão do destino, pois alguns steps escolhem o
    formato de escrita pela extensão.
    """
    final = Path(final_path)
    return str(final.with_name(f"{TEMP_PREFIX}{uuid.uuid4().hex}-{final.name}"))


def same_path(a: str, b: str) -> bool:
    """True se `a` e `b` resolvem para o mesmo caminho absoluto."""
    return os.path.normcase(os.path.abspath(a)) == os.path.normcase(os.path.abspath(b))


def ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(os.path.abspath(path))
    if parent:
        os.makedirs(parent, exist_ok=True)


def publish(temp_path: str, final_path: str, *, overwrite: bool) -> bool:
    """
    Move `temp_path` para `final_path`.

    Returns:
        bool: False quando o step não produziu o arquivo temporário
        (saída vazia legítima); True quando a saída foi publicada.

    Raises:
        FileExistsError: se `final_path` existe e overwrite não foi autorizado.
    """
    if not os.path.exists(temp_path):
        return False
    if overwrite:
        os.replace(temp_path, final_path)
        return True
    os.link(temp_path, final_path)
    discard(temp_path)
    return True


def discard(path: Optional[str]) -> None:
    """Remove um temporário, se ainda existir."""
    if not path or not os.path.lexists(path):
        return
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path, ignore_errors=True)
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        # removido concorrentemente
        return

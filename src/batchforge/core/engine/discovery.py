# src/batchforge/core/engine/discovery.py
"""
Descoberta de arquivos de entrada.

Resolve a especificação de entrada de um run (arquivo único, diretório
ou padrão glob) em uma lista concreta e deterministicamente ordenada de
arquivos candidatos.

Regras:
    - arquivo existente → apenas ele
    - diretório existente → filhos (ou toda a árvore, se `recursive`)
      cujo nome casa com `file_pattern`
    - caso contrário → decomposição em diretório pai + padrão de nome
    - nada encontrado → lista vazia (o Planner transforma isso em warning)

Invariantes:
    - A ordem é lexicográfica pelo caminho completo
    - Em modo recursivo com `output_dir` configurado, nada sob o
      diretório de saída é retornado ("input eats output")
    - Arquivos temporários de publicação do próprio engine nunca são
      retornados

Limites explícitos:
    - Não lê conteúdo de arquivos
    - Não decide quais steps se aplicam
"""

from __future__ import annotations

import fnmatch
import os
from typing import Iterator, List, Optional

from batchforge.core.pipeline.options import PipelineOptions

from .publish import TEMP_PREFIX


def _normalize_dir(path: str) -> str:
    return os.path.normcase(os.path.abspath(path)).rstrip("\\/")


def _is_under(path: str, directory: str) -> bool:
    candidate = os.path.normcase(os.path.abspath(path))
    return candidate == directory or candidate.startswith(directory + os.sep)


def _walk(root: str, pattern: str, recursive: bool) -> Iterator[str]:
    if recursive:
        for dirpath, _dirnames, filenames in os.walk(root):
            for name in filenames:
                if fnmatch.fnmatch(name, pattern):
                    yield os.path.join(dirpath, name)
        return

    with os.scandir(root) as entries:
        for entry in entries:
            if entry.is_file() and fnmatch.fnmatch(entry.name, pattern):
                yield entry.path


def _enumerate(root: str, pattern: str, options: PipelineOptions) -> List[str]:
    excluded: Optional[str] = None
    if options.recursive and options.output_dir:
        excluded = _normalize_dir(options.output_dir)

    found: List[str] = []
    for path in _walk(root, pattern or "*", options.recursive):
        if os.path.basename(path).startswith(TEMP_PREFIX):
            continue
        if excluded is not None and _is_under(path, excluded):
            continue
        if not os.path.isfile(path):
            continue
        found.append(path)
    return sorted(found)


def discover_files(options: PipelineOptions) -> List[str]:
    """
    Resolve `options.input_path` em uma lista ordenada de arquivos.

    Args:
        options (PipelineOptions): opções do run (input_path, file_pattern,
            recursive, output_dir).

    Returns:
        List[str]: arquivos candidatos, em ordem lexicográfica.
    """
    input_path = options.input_path

    if os.path.isfile(input_path):
        return [input_path]

    if os.path.isdir(input_path):
        return _enumerate(input_path, options.file_pattern, options)

    # Tenta como padrão glob: diretório pai + padrão de nome
    directory = os.path.dirname(input_path) or "."
    pattern = os.path.basename(input_path)
    if pattern and os.path.isdir(directory):
        return _enumerate(directory, pattern, options)

    return []

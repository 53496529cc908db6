# src/batchforge/core/pipeline/step.py
"""
Contrato canônico de Step do BatchForge.

Este módulo define o protocolo formal que qualquer Step deve satisfazer
para ser planejado e executado pelo engine do BatchForge.

Um Step é uma transformação plugável e sem estado, aplicada a um arquivo
por vez. O engine não conhece o que o Step faz internamente: ele apenas
valida, deriva o caminho de saída e invoca a execução, materializando a
saída de forma segura (publicação atômica).

Responsabilidades de um Step:
    - declarar identidade e extensões suportadas
    - validar suas opções antes de qualquer I/O
    - derivar, de forma pura, o caminho de saída para uma entrada
    - executar sobre um arquivo, retornando um StepResult

Princípios fundamentais:
    - Steps não conhecem o Planner nem o Executor
    - Steps não controlam ordem de execução nem paralelismo
    - Conformidade é garantida por duck typing (@runtime_checkable)

Invariantes:
    - `id` é único na cadeia de steps
    - `execute` é seguro sob invocação concorrente
    - Falhas são retornadas como dados (`StepResult.failed`), não exceções;
      cancelamento observado retorna `StepResult.cancelled`

Limites explícitos:
    - Não contém lógica de planejamento
    - Não publica a saída final (responsabilidade do executor)
    - Não implementa retry
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence, runtime_checkable

from .cancellation import CancellationToken
from .options import StepOptions
from .types import OutputKind, StepProgress, StepResult, ValidationResult


StepProgressCallback = Callable[[StepProgress], None]


@runtime_checkable
class Step(Protocol):
    """
    Contrato canônico de um Step do BatchForge.

    Atributos obrigatórios:
        - id: identificador único e estável (ex.: "file.gzip")
        - supported_extensions: extensões aceitas, com ponto (ex.: [".pdf"]);
          a comparação feita pelo planner é case-insensitive

    Atributos opcionais lidos pelo engine via `getattr`:
        - description: descrição humana do step
        - output_kind: `OutputKind.FILE` (default) ou `OutputKind.DIRECTORY`

    Decisões arquiteturais:
        - O protocolo não impõe herança, apenas conformidade estrutural
        - Para saídas FILE, `execute` recebe um caminho temporário; o
          executor publica no destino final somente em caso de sucesso
        - Para saídas DIRECTORY, `execute` recebe o diretório final
    """
    id: str
    supported_extensions: Sequence[str]

    def validate(self, options: StepOptions) -> ValidationResult:
        """Valida as opções do step. Chamado no planejamento, sem I/O."""
        ...

    def derive_output_path(self, input_path: str, options: StepOptions) -> str:
        """Caminho de saída para `input_path`. Função pura (usada no dry-run)."""
        ...

    def execute(
        self,
        input_path: str,
        output_path: str,
        options: StepOptions,
        progress: Optional[StepProgressCallback],
        cancel_token: CancellationToken,
    ) -> StepResult:
        """Executa o step sobre um arquivo."""
        ...


def step_output_kind(step: Step) -> OutputKind:
    kind = getattr(step, "output_kind", OutputKind.FILE) or OutputKind.FILE
    return OutputKind(kind)


def supports_extension(step: Step, extension: str) -> bool:
    """Verifica (case-insensitive) se o step aceita a extensão informada."""
    wanted = (extension or "").lower()
    return any(str(ext).lower() == wanted for ext in (step.supported_extensions or []))

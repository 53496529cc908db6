# tests/conftest.py
"""
Fixtures compartilhados para testes do BatchForge.

Este módulo define fixtures reutilizáveis que fornecem:
- árvores de arquivos de entrada em diretórios temporários (`tmp_path`)
- Steps dummy configuráveis (copiar, falhar, levantar exceção, demorar)
- contexto de execução controlado (RunContext)

Decisões arquiteturais:
    - Steps dummy utilizam duck typing em vez de herança
    - O comportamento de cada dummy é escolhido por parâmetro, para que
      cada teste declare explicitamente o cenário que exercita
    - Imports do core são realizados de forma lazy para melhorar a
      clareza de erros durante falhas

Invariantes:
    - Todo I/O acontece sob `tmp_path`
    - Nenhuma fixture executa pipeline

Limites explícitos:
    - Não substituir testes dos steps de referência
"""

import os
import threading

import pytest


@pytest.fixture
def make_files(tmp_path):
    """
    Factory que cria arquivos de entrada sob `tmp_path`.

    Uso:
        paths = make_files({"a.test": "content", "sub/b.test": "x"})

    Returns:
        Callable[[dict], list[str]]: caminhos criados, na ordem do dict.
    """

    def _make(files, root=None):
        base = root or tmp_path
        created = []
        for name, content in files.items():
            path = os.path.join(str(base), name)
            os.makedirs(os.path.dirname(path), exist_ok=True)
            mode = "wb" if isinstance(content, bytes) else "w"
            with open(path, mode) as f:
                f.write(content)
            created.append(path)
        return created

    return _make


@pytest.fixture
def run_ctx():
    """RunContext novo, sem manifest."""
    from batchforge.core.pipeline.context import RunContext

    return RunContext.new(origin="tests")


@pytest.fixture
def DummyStep():
    """
    Fixture que fornece uma classe de Step dummy configurável.

    Comportamentos (`behavior`):
        - "copy": copia a entrada para o caminho recebido (default)
        - "fail": retorna StepResult.failed
        - "raise": levanta RuntimeError("boom")
        - "none": sucesso sem produzir saída
        - "wrong_type": retorna um dict em vez de StepResult
        - "slow": espera `delay` segundos observando o cancelamento; se
          cancelado retorna StepResult.cancelled, senão copia

    A instância registra, de forma thread-safe, cada chamada de
    `execute` em `calls` (tuplas input_path, output_path) e o pico de
    execuções simultâneas em `max_concurrency`.
    """
    from batchforge.core.pipeline.types import OutputKind, StepResult, ValidationResult

    class _DummyStep:
        def __init__(
            self,
            id="dummy",
            *,
            extensions=(".test",),
            suffix=".out",
            behavior="copy",
            delay=0.0,
            output_kind=OutputKind.FILE,
            errors=(),
            warnings=(),
            fail_on=(),
        ):
            self.id = id
            self.description = f"dummy step {id}"
            self.supported_extensions = list(extensions)
            self.output_kind = output_kind
            self.suffix = suffix
            self.behavior = behavior
            self.delay = delay
            self.errors = list(errors)
            self.warnings = list(warnings)
            self.fail_on = set(fail_on)
            self.calls = []
            self.max_concurrency = 0
            self._running = 0
            self._lock = threading.Lock()

        def validate(self, options):
            if self.errors:
                return ValidationResult.invalid(*self.errors)
            if self.warnings:
                return ValidationResult.with_warnings(*self.warnings)
            return ValidationResult.valid()

        def derive_output_path(self, input_path, options):
            directory = options.output_dir or os.path.dirname(input_path)
            stem = os.path.splitext(os.path.basename(input_path))[0]
            return os.path.join(directory, stem + self.suffix)

        def _write(self, input_path, output_path):
            if self.output_kind == OutputKind.DIRECTORY:
                os.makedirs(output_path, exist_ok=True)
                with open(input_path, "rb") as src, open(os.path.join(output_path, "part-0"), "wb") as dst:
                    dst.write(src.read())
                return
            with open(input_path, "rb") as src, open(output_path, "wb") as dst:
                dst.write(src.read())

        def execute(self, input_path, output_path, options, progress, cancel_token):
            with self._lock:
                self.calls.append((input_path, output_path))
                self._running += 1
                self.max_concurrency = max(self.max_concurrency, self._running)
            try:
                behavior = self.behavior
                if os.path.basename(input_path) in self.fail_on:
                    behavior = "fail"

                if behavior == "fail":
                    with open(output_path, "w") as f:
                        f.write("partial")
                    return StepResult.failed(input_path, "dummy failure", step_id=self.id)
                if behavior == "raise":
                    raise RuntimeError("boom")
                if behavior == "none":
                    return StepResult.succeeded(input_path, output_path, step_id=self.id)
                if behavior == "wrong_type":
                    return {"status": "ok"}
                if behavior == "slow":
                    if cancel_token.wait(self.delay):
                        return StepResult.cancelled(input_path, step_id=self.id)

                self._write(input_path, output_path)
                return StepResult.succeeded(input_path, output_path, step_id=self.id)
            finally:
                with self._lock:
                    self._running -= 1

    return _DummyStep

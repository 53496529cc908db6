# src/batchforge/core/pipeline/cancellation.py
"""
Token de cancelamento cooperativo.

O cancelamento é um sinal explícito repassado a cada chamada de Step e
observado em checkpoints definidos (antes de iniciar um arquivo, entre
steps de uma cadeia e dentro dos loops internos de cada step). Nenhuma
exceção é usada para propagar cancelamento: steps que observam o sinal
retornam `StepResult.cancelled(...)`.
"""

from __future__ import annotations

import threading
from typing import Optional


class CancellationToken:
    """Flag thread-safe de cancelamento, sinalizável uma única vez."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._timer: Optional[threading.Timer] = None

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def cancel_after(self, seconds: float) -> None:
        """Agenda o cancelamento após `seconds` segundos (substitui agendamento anterior)."""
        self.dispose()
        timer = threading.Timer(seconds, self.cancel)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def dispose(self) -> None:
        """Descarta um cancelamento agendado que ainda não disparou."""
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Bloqueia até o cancelamento ou até `timeout` segundos.

        Retorna True se o token foi cancelado. Útil para steps que fazem
        espera ativa e precisam reagir ao cancelamento.
        """
        return self._event.wait(timeout)

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled})"

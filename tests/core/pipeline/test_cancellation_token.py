# tests/core/pipeline/test_cancellation_token.py
"""Testes do CancellationToken."""

import time

from batchforge.core.pipeline.cancellation import CancellationToken


def test_token_starts_not_cancelled():
    token = CancellationToken()
    assert not token.is_cancelled
    assert token.wait(0.01) is False


def test_cancel_is_observed():
    token = CancellationToken()
    token.cancel()
    assert token.is_cancelled
    assert token.wait(0) is True


def test_cancel_after_signals_later():
    token = CancellationToken()
    token.cancel_after(0.05)
    assert not token.is_cancelled
    assert token.wait(2.0) is True
    assert token.is_cancelled


def test_wait_returns_early_on_cancel():
    token = CancellationToken()
    token.cancel_after(0.05)
    started = time.monotonic()
    token.wait(5.0)
    assert time.monotonic() - started < 2.0


def test_dispose_drops_scheduled_cancel():
    token = CancellationToken()
    token.cancel_after(0.05)
    token.dispose()
    assert token.wait(0.2) is False
    assert not token.is_cancelled


def test_dispose_without_schedule_is_noop():
    token = CancellationToken()
    token.dispose()
    token.cancel()
    assert token.is_cancelled

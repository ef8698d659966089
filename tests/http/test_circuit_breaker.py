"""Tests for the upstream circuit breaker."""

import logging
import time

from levantapedidos.clients.circuit_breaker import CLOSED, HALF_OPEN, OPEN, CircuitBreaker

BREAKER_LOGGER = "levantapedidos.circuit_breaker"


def trip(cb: CircuitBreaker) -> None:
    for _ in range(cb.fail_threshold):
        cb.on_failure()


def test_opening_is_logged_with_breaker_name(caplog):
    cb = CircuitBreaker(fail_threshold=3, reset_timeout=1.0, name="https://dominio.test")

    with caplog.at_level(logging.WARNING, logger=BREAKER_LOGGER):
        trip(cb)

    assert cb.state == OPEN
    assert not cb.allow()
    [record] = [r for r in caplog.records if r.getMessage() == "circuit_opened"]
    assert record.breaker == "https://dominio.test"
    assert record.fail_count == 3


def test_half_open_failure_reopens():
    """A failed trial request sends the breaker straight back to open."""
    cb = CircuitBreaker(fail_threshold=3, reset_timeout=0.05)
    trip(cb)

    time.sleep(0.06)
    assert cb.allow()
    assert cb.state == HALF_OPEN

    cb.on_failure()
    assert cb.state == OPEN
    assert not cb.allow()


def test_recovery_is_logged(caplog):
    cb = CircuitBreaker(fail_threshold=1, reset_timeout=0.05, name="dominio")
    trip(cb)
    time.sleep(0.06)
    assert cb.allow()

    with caplog.at_level(logging.INFO, logger=BREAKER_LOGGER):
        cb.on_success()

    assert cb.state == CLOSED
    assert cb.fail_count == 0
    assert any(
        r.getMessage() == "circuit_closed" and r.breaker == "dominio" for r in caplog.records
    )


def test_success_while_closed_is_silent(caplog):
    cb = CircuitBreaker(fail_threshold=3)

    with caplog.at_level(logging.INFO, logger=BREAKER_LOGGER):
        cb.on_success()

    assert caplog.records == []


def test_interleaved_success_keeps_breaker_closed():
    """Only consecutive failures count toward the threshold."""
    cb = CircuitBreaker(fail_threshold=3, reset_timeout=1.0)

    cb.on_failure()
    cb.on_failure()
    cb.on_success()
    cb.on_failure()
    cb.on_failure()

    assert cb.state == CLOSED
    assert cb.allow()


def test_failures_while_open_do_not_extend_window():
    cb = CircuitBreaker(fail_threshold=2, reset_timeout=1.0)
    trip(cb)
    opened_at = cb.opened_at

    cb.on_failure()

    assert cb.state == OPEN
    assert cb.opened_at == opened_at

"""Circuit breaker for the upstream host.

Opens after N consecutive failures so a dead DominioDZ endpoint fails fast
instead of holding every fan-out task for the full timeout.
"""

from __future__ import annotations

import time

from levantapedidos.core.logging import get_logger

log = get_logger("levantapedidos.circuit_breaker")

CLOSED = "closed"
OPEN = "open"
HALF_OPEN = "half-open"


class CircuitBreaker:
    """Open after N failures, half-open after timeout, close on success."""

    def __init__(self, fail_threshold: int = 5, reset_timeout: float = 30.0, name: str = ""):
        """Initialize circuit breaker.

        Args:
            fail_threshold: Consecutive failures before opening
            reset_timeout: Seconds to wait before allowing a trial request
            name: Label used in log lines (usually the host)

        """
        self.fail_threshold = fail_threshold
        self.reset_timeout = reset_timeout
        self.name = name
        self.fail_count = 0
        self.state = CLOSED
        self.opened_at = 0.0

    def on_success(self) -> None:
        if self.state != CLOSED:
            log.info("circuit_closed", extra={"breaker": self.name})
        self.fail_count = 0
        self.state = CLOSED

    def on_failure(self) -> None:
        self.fail_count += 1
        if self.state == HALF_OPEN or (
            self.fail_count >= self.fail_threshold and self.state == CLOSED
        ):
            self.state = OPEN
            self.opened_at = time.monotonic()
            log.warning(
                "circuit_opened",
                extra={"breaker": self.name, "fail_count": self.fail_count},
            )

    def allow(self) -> bool:
        """Check if a request may go through."""
        if self.state == OPEN:
            if time.monotonic() - self.opened_at < self.reset_timeout:
                return False
            self.state = HALF_OPEN
        return True


__all__ = ["CircuitBreaker", "CLOSED", "OPEN", "HALF_OPEN"]

"""Async HTTP client with timeout, retry and circuit breaker.

Provides BaseHTTPClient with built-in reliability patterns.
"""

from __future__ import annotations

import asyncio
import json
import random
import time
from collections.abc import Mapping
from typing import Any, NamedTuple

import aiohttp

from levantapedidos.clients.circuit_breaker import CircuitBreaker
from levantapedidos.core.errors import UpstreamError
from levantapedidos.core.logging import get_logger

log = get_logger("levantapedidos.http")

DEFAULT_TIMEOUT = 30
RETRY_STATUS = {429, 500, 502, 503, 504}


class HTTPResult(NamedTuple):
    """Fully-read HTTP response."""

    status: int
    reason: str
    text: str
    elapsed_ms: int

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class BaseHTTPClient:
    """Base HTTP client with retry and circuit breaker."""

    def __init__(
        self,
        base_url: str,
        default_headers: Mapping[str, str] | None = None,
        timeout_sec: int = DEFAULT_TIMEOUT,
        cb_fail_threshold: int = 5,
        cb_reset_timeout: float = 30.0,
        max_retries: int = 2,
        backoff_base: float = 0.5,
        backoff_max: float = 4.0,
    ) -> None:
        """Initialize HTTP client.

        Args:
            base_url: Base URL for all requests
            default_headers: Headers to include in all requests
            timeout_sec: Total request timeout in seconds
            cb_fail_threshold: Failures before circuit breaker opens
            cb_reset_timeout: Seconds before circuit breaker tries half-open
            max_retries: Maximum attempts per request (1 = no retry)
            backoff_base: Base delay for exponential backoff
            backoff_max: Maximum backoff delay

        """
        self.base_url = base_url.rstrip("/")
        self.default_headers = dict(default_headers or {})
        self.timeout_sec = timeout_sec
        self.max_retries = max(1, max_retries)
        self.backoff_base = backoff_base
        self.backoff_max = backoff_max

        self._cb = CircuitBreaker(cb_fail_threshold, cb_reset_timeout, name=self.base_url)
        self._session: aiohttp.ClientSession | None = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if not self._session or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_sec)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def _backoff(self, attempt: int) -> float:
        delay = min(self.backoff_base * (2 ** (attempt - 1)), self.backoff_max)
        return delay * random.uniform(0.7, 1.3)

    async def request(
        self,
        method: str,
        path: str = "",
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
    ) -> HTTPResult:
        """Make HTTP request with retry and circuit breaker.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: URL path (relative to base_url)
            headers: Additional headers
            params: Query parameters
            json_body: JSON body for request

        Returns:
            HTTPResult with the body already read

        Raises:
            UpstreamError: If circuit breaker is open, all attempts fail or the
                body cannot be decoded

        """
        url = f"{self.base_url}{path}"
        if not self._cb.allow():
            raise UpstreamError(f"Circuit breaker is open for {self.base_url}")

        hdrs = dict(self.default_headers)
        if headers:
            hdrs.update(headers)

        session = await self._ensure_session()
        attempt = 0

        while True:
            attempt += 1
            t0 = time.perf_counter()

            try:
                async with session.request(
                    method=method.upper(),
                    url=url,
                    headers=hdrs,
                    params=params,
                    json=json_body,
                ) as resp:
                    raw = await resp.read()
                    status = resp.status
                    reason = resp.reason or ""
                    charset = resp.charset or "utf-8"
                elapsed_ms = int((time.perf_counter() - t0) * 1000)
            except (asyncio.TimeoutError, aiohttp.ClientError) as e:
                log.warning(
                    "http_exception",
                    extra={
                        "method": method,
                        "url": url,
                        "attempt": attempt,
                        "error": str(e) or type(e).__name__,
                    },
                )
                self._cb.on_failure()

                if attempt >= self.max_retries:
                    raise UpstreamError(
                        f"Request to {url} failed after {attempt} attempt(s): "
                        f"{str(e) or type(e).__name__}"
                    ) from e

                await asyncio.sleep(self._backoff(attempt))
                continue

            log.info(
                "http_response",
                extra={
                    "method": method,
                    "url": url,
                    "status": status,
                    "elapsed_ms": elapsed_ms,
                    "attempt": attempt,
                    "body_len": len(raw),
                },
            )

            if status in RETRY_STATUS and attempt < self.max_retries:
                await asyncio.sleep(self._backoff(attempt))
                continue

            if status < 500:
                self._cb.on_success()
            else:
                self._cb.on_failure()

            try:
                text = raw.decode(charset)
            except (UnicodeDecodeError, LookupError) as e:
                log.error(
                    "http_decode_error",
                    extra={"url": url, "status": status, "charset": charset, "error": str(e)},
                )
                raise UpstreamError(
                    f"Undecodable response body from {url} ({charset}): {e}", status=status
                ) from e

            return HTTPResult(status=status, reason=reason, text=text, elapsed_ms=elapsed_ms)

    async def json(self, method: str, path: str = "", **kwargs) -> Any:
        """Make HTTP request and parse JSON response.

        Args:
            method: HTTP method
            path: URL path
            **kwargs: Additional arguments for request()

        Returns:
            Parsed JSON (None for an empty body)

        Raises:
            UpstreamError: On non-2xx status or invalid JSON

        """
        resp = await self.request(method, path, **kwargs)
        if not resp.ok:
            raise UpstreamError(
                f"Upstream API error: {resp.status} {resp.reason}".rstrip(),
                status=resp.status,
            )
        try:
            return json.loads(resp.text) if resp.text else None
        except ValueError as e:
            log.error(
                "json_decode_error",
                extra={"url": f"{self.base_url}{path}", "text_sample": resp.text[:256]},
            )
            raise UpstreamError(f"Invalid JSON from {self.base_url}{path}") from e


__all__ = ["BaseHTTPClient", "HTTPResult", "DEFAULT_TIMEOUT", "RETRY_STATUS"]

"""HTTP adapter – RetryingHttpxTransport."""
from __future__ import annotations

from typing import Any, Mapping

import tenacity

from rental_query.adapters.http.client import HttpxTransport
from rental_query.adapters.http.envelope import TransportResponse
from rental_query.kernel.errors import TransportError
from rental_query.observability.logging import get_logger

logger = get_logger(__name__)


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, TransportError) and exc.is_retryable


class RetryingHttpxTransport(HttpxTransport):
    """Transport that retries network errors and 5xx responses.

    4xx responses are business rejections and are returned immediately.
    After ``max_attempts`` the last failure is returned as an envelope.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        max_attempts: int = 3,
        wait: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(base_url, timeout, **kwargs)
        self._max_attempts = max_attempts
        self._wait = wait if wait is not None else tenacity.wait_exponential(multiplier=0.1, max=2)

    def _retrying(self) -> tenacity.AsyncRetrying:
        return tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self._max_attempts),
            wait=self._wait,
            retry=tenacity.retry_if_exception(_is_retryable),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(state: tenacity.RetryCallState) -> None:
        exc = state.outcome.exception() if state.outcome else None
        logger.info("transport.retrying", attempt=state.attempt_number, error=str(exc))

    async def _send(
        self,
        method: str,
        endpoint: str,
        data: Mapping[str, Any] | None,
        headers: Mapping[str, str] | None,
    ) -> TransportResponse:
        async for attempt in self._retrying():
            with attempt:
                result = await super()._send(method, endpoint, data, headers)
        return result


__all__ = ["RetryingHttpxTransport"]

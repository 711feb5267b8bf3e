"""HTTP transport for provider calls.

One POST per call over a shared httpx.AsyncClient. Connection pooling is
httpx's business; this module only adds the client-side deadline.

Deadline semantics:
- timeout_ms > 0: the request runs as its own task and httpx gets the same
  budget. When the deadline passes first the task is cancelled and
  LLMTimeoutError is raised immediately, even if the transport ignores the
  cancellation and keeps running.
- timeout_ms None or <= 0: no deadline (httpx timeout=None).
- asyncio.wait releases its timer handle on every exit path.
"""

import asyncio
from dataclasses import dataclass

import httpx

from recap.services.llm.errors import LLMTimeoutError, LLMTransportError


@dataclass(frozen=True)
class TransportResponse:
    """Raw outcome of one HTTP round trip."""

    status_code: int
    reason_phrase: str
    text: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


def _deadline_seconds(timeout_ms: float | None) -> float | None:
    if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, (int, float)):
        return None
    if timeout_ms <= 0:
        return None
    return timeout_ms / 1000


def _consume_outcome(task: asyncio.Task) -> None:
    # Abandoned requests may finish later; retrieve the outcome so asyncio
    # doesn't report an unretrieved exception.
    if not task.cancelled():
        task.exception()


class TransportClient:
    """Sends a JSON payload and returns the raw response text."""

    def __init__(self, client: httpx.AsyncClient, *, provider: str):
        """Initialize transport with shared HTTP client.

        Args:
            client: Shared httpx.AsyncClient for connection pooling.
            provider: Provider name used for error attribution.
        """
        self._client = client
        self._provider = provider

    async def send(
        self,
        url: str,
        payload: dict,
        *,
        headers: dict[str, str],
        timeout_ms: float | None = None,
    ) -> TransportResponse:
        """POST payload to url, honoring the optional deadline.

        Raises:
            LLMTimeoutError: Deadline passed or httpx timed out.
            LLMTransportError: Connection, network, or protocol failure.
        """
        deadline_s = _deadline_seconds(timeout_ms)

        try:
            if deadline_s is None:
                return await self._post(url, payload, headers, None)
            return await self._post_with_deadline(url, payload, headers, deadline_s)
        except httpx.TimeoutException as e:
            raise self._timeout_error() from e
        except httpx.HTTPError as e:
            raise LLMTransportError(
                f"{self._provider} request failed: {type(e).__name__}", provider=self._provider
            ) from e

    async def _post_with_deadline(
        self,
        url: str,
        payload: dict,
        headers: dict[str, str],
        deadline_s: float,
    ) -> TransportResponse:
        task = asyncio.ensure_future(self._post(url, payload, headers, deadline_s))
        try:
            done, _ = await asyncio.wait({task}, timeout=deadline_s)
        finally:
            if not task.done():
                task.cancel()
                task.add_done_callback(_consume_outcome)

        if not done:
            raise self._timeout_error()
        return task.result()

    async def _post(
        self,
        url: str,
        payload: dict,
        headers: dict[str, str],
        deadline_s: float | None,
    ) -> TransportResponse:
        timeout = httpx.Timeout(deadline_s) if deadline_s is not None else None
        response = await self._client.post(url, headers=headers, json=payload, timeout=timeout)
        return TransportResponse(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            text=response.text,
        )

    def _timeout_error(self) -> LLMTimeoutError:
        return LLMTimeoutError(f"{self._provider} request timed out", provider=self._provider)

"""Test helpers for provider mocks.

Provides:
- Endpoint URLs for the built-in providers
- Chat-completions body builders
- An httpx transport that never answers, for deadline tests
"""

import asyncio

import httpx

GROK_CHAT_URL = "https://api.x.ai/v1/chat/completions"
OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


def chat_completion(
    content: object = "4",
    *,
    model: str = "m1",
    usage: dict | None = None,
) -> dict:
    """Build a minimal chat-completions success body."""
    body: dict = {
        "id": "chatcmpl-test",
        "model": model,
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }
    if usage is not None:
        body["usage"] = usage
    return body


class HangingTransport(httpx.AsyncBaseTransport):
    """Transport whose requests never complete.

    With ignore_cancel=True the request keeps waiting after cancellation,
    like a transport that doesn't honor abort signals.
    """

    def __init__(self, ignore_cancel: bool = False):
        self.ignore_cancel = ignore_cancel
        self.requests: list[httpx.Request] = []
        self.cancelled = False
        self.release = asyncio.Event()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        while True:
            try:
                await self.release.wait()
                return httpx.Response(200, json={"model": "late", "choices": []})
            except asyncio.CancelledError:
                self.cancelled = True
                if not self.ignore_cancel:
                    raise

"""
Completion Client - raw HTTPS transport for streamed chat completions.

POSTs `{model, messages, stream: true}` with a bearer key and yields the
response body exactly as the network delivers it. Line framing is the
decoder's job, not this module's.

Usage:
    client = CompletionClient()
    async for chunk in client.stream(endpoint, "how do I rename a file"):
        decoder.feed(chunk)
"""
import logging
from typing import AsyncGenerator, Dict, Optional

import httpx

from lumina.config import ServiceEndpoint, settings
from lumina.exceptions import TransportError
from lumina.models import CompletionRequest
from lumina.prompts import build_messages

logger = logging.getLogger(__name__)

_MAX_ERROR_DETAIL = 500


def build_request(endpoint: ServiceEndpoint, query: str) -> CompletionRequest:
    return CompletionRequest(
        model=endpoint.model,
        messages=build_messages(query),
        stream=True,
    )


def build_headers(endpoint: ServiceEndpoint) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {endpoint.api_key}",
        "Content-Type": "application/json",
    }


class CompletionClient:
    """
    Thin wrapper over `httpx.AsyncClient.stream`.

    Pass `http_client` to share a connection pool (or a mock transport in
    tests); otherwise a client is opened per request and closed with it.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[httpx.Timeout] = None,
    ) -> None:
        self._http = http_client
        self.timeout = timeout or httpx.Timeout(
            settings.ai_read_timeout,
            connect=settings.ai_connect_timeout,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} shared_client={self._http is not None}>"

    async def stream(self, endpoint: ServiceEndpoint, query: str) -> AsyncGenerator[bytes, None]:
        """
        Yield raw body chunks.

        Raises:
            TransportError: non-success status (before any chunk is yielded)
                or a connection failure at any point
        """
        if self._http is not None:
            async for chunk in self._stream_with(self._http, endpoint, query):
                yield chunk
            return

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            async for chunk in self._stream_with(client, endpoint, query):
                yield chunk

    async def _stream_with(
        self,
        client: httpx.AsyncClient,
        endpoint: ServiceEndpoint,
        query: str,
    ) -> AsyncGenerator[bytes, None]:
        body = build_request(endpoint, query).model_dump()
        logger.info(f"🔸 Streaming from {endpoint.name}: model={endpoint.model}, query_length={len(query)}")

        try:
            async with client.stream(
                "POST",
                endpoint.url,
                json=body,
                headers=build_headers(endpoint),
            ) as response:
                if not response.is_success:
                    raw = await response.aread()
                    detail = raw.decode("utf-8", errors="replace")[:_MAX_ERROR_DETAIL]
                    logger.error(f"❌ {endpoint.name} returned HTTP {response.status_code}: {detail}")
                    raise TransportError(
                        f"API request failed: HTTP {response.status_code}",
                        status_code=response.status_code,
                        detail=detail,
                    )

                async for chunk in response.aiter_bytes():
                    if chunk:
                        yield chunk

        except httpx.HTTPError as e:
            logger.error(f"❌ {endpoint.name} stream error: {e}")
            raise TransportError(f"Connection error: {e}") from e

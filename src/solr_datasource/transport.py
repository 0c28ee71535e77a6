"""SolrTransport: POSTs form-encoded parameters to a Solr ``/select`` URL."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from .exceptions import SolrResponseError, SolrTransportError
from .result import QueryResult

logger = logging.getLogger(__name__)


class SolrTransport:
    """
    Pooled async HTTP client for Solr queries.

    Status codes >= 400 and bodies that are not JSON raise
    :class:`SolrResponseError`; connection failures and timeouts raise
    :class:`SolrTransportError`. Nothing is retried.
    """

    def __init__(
        self,
        *,
        max_connections: int = 5,
        keepalive_expiry: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_connections,
            keepalive_expiry=keepalive_expiry,
        )
        self._client = client
        # An injected client belongs to the caller
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(limits=self._limits)
        return self._client

    async def post(
        self,
        url: str,
        params: Mapping[str, str],
        *,
        connect_timeout: float = 2.0,
        request_timeout: float = 5.0,
    ) -> QueryResult:
        timeout = httpx.Timeout(request_timeout, connect=connect_timeout)
        try:
            response = await self.client.post(
                url,
                data=dict(params),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=timeout,
            )
        except httpx.HTTPError as e:
            host = httpx.URL(url).host
            logger.error(f"Solr request to {url} failed: {e!r}")
            raise SolrTransportError(f"Solr error: {e} ({host})") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code >= 400 or not isinstance(payload, dict):
            logger.error(f"Solr error response from {url}: {response.status_code}")
            raise SolrResponseError(response.status_code, response.reason_phrase)

        try:
            return QueryResult.from_response(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise SolrResponseError(
                response.status_code, "Unexpected response structure"
            ) from e

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

"""SolrDataSource: the connector the federation framework talks to."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .assembler import QueryAssembler
from .compiler import FilterCompiler
from .config import DataSourceConfig
from .escaping import escape_value
from .operators import DEFAULT_PROFILE, OperatorProfile
from .request import QueryRequest
from .transport import SolrTransport
from .urls import UrlRotation

if TYPE_CHECKING:
    from .result import QueryResult
    from .status import IStatusCounter

logger = logging.getLogger(__name__)

QUERY_COUNTER = "dataSourceQueries"


class SolrDataSource:
    """Translates framework query requests to Solr and runs them.

    Example:
        ```python
        ds = SolrDataSource(
            {"servers": {"default": {"urls": ["http://solr:8983/solr/"]}}}
        )
        result = await ds.process(
            {"collection": "article", "filter": [[{
                "attribute": "id", "operator": "equal", "value": 1,
            }]]}
        )
        await ds.close()
        ```
    """

    def __init__(
        self,
        config: DataSourceConfig | Mapping[str, Any],
        *,
        transport: SolrTransport | None = None,
        status: IStatusCounter | None = None,
        profile: OperatorProfile = DEFAULT_PROFILE,
    ) -> None:
        if not isinstance(config, DataSourceConfig):
            config = DataSourceConfig.from_dict(dict(config))
        self.config = config
        self._urls = {
            name: UrlRotation(server.urls) for name, server in config.servers.items()
        }
        self._status = status
        self._assembler = QueryAssembler(FilterCompiler(profile))
        self._transport = transport or SolrTransport(
            max_connections=config.max_connections,
            keepalive_expiry=config.keepalive_expiry,
        )

    def prepare(self) -> None:
        """Lifecycle hook called by the framework before the first query."""

    async def process(
        self,
        request: QueryRequest | Mapping[str, Any],
        *,
        explain: dict[str, Any] | None = None,
    ) -> QueryResult:
        """Run ``request`` against its server.

        Args:
            request: Query request model or framework dict.
            explain: If given, receives the request ``url`` and ``params``.

        Raises:
            UnknownServerError: The request names an unconfigured server.
            UnsupportedOperatorError: A filter uses an unsupported operator.
            SolrTransportError: The HTTP request failed.
        """
        if not isinstance(request, QueryRequest):
            request = QueryRequest.model_validate(request)

        server = self.config.server(request.server)
        params = self._assembler.assemble(request)
        url = next(self._urls[request.server]) + request.collection + "/select"
        logger.debug(f"Querying Solr server {request.server!r} at {url}")

        if explain is not None:
            explain.update({"url": url, "params": params})
        if self._status is not None:
            self._status.increment(QUERY_COUNTER)

        return await self._transport.post(
            url,
            params,
            connect_timeout=server.connect_timeout,
            request_timeout=server.request_timeout,
        )

    async def close(self) -> None:
        await self._transport.aclose()

    def escape(self, value: Any, expose_solr_syntax: bool = False) -> Any:
        return escape_value(value, expose_solr_syntax)

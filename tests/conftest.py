"""Shared fixtures for solr-datasource tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest

from solr_datasource import (
    FilterCompiler,
    QueryAssembler,
    SolrDataSource,
    SolrTransport,
)

EMPTY_RESPONSE = {"response": {"numFound": 0, "docs": []}}


class RecordingHandler:
    """``httpx.MockTransport`` handler that records requests and replies canned."""

    def __init__(
        self,
        status_code: int = 200,
        body: Any = None,
        raw: bytes | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = EMPTY_RESPONSE if body is None else body
        self.raw = raw
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw)
        return httpx.Response(self.status_code, content=json.dumps(self.body))

    @property
    def last_params(self) -> dict[str, str]:
        body = self.requests[-1].content.decode("utf-8")
        return {k: v[0] for k, v in parse_qs(body, keep_blank_values=True).items()}


@pytest.fixture
def compiler() -> FilterCompiler:
    return FilterCompiler()


@pytest.fixture
def assembler() -> QueryAssembler:
    return QueryAssembler()


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def make_datasource() -> Callable[..., SolrDataSource]:
    """Build a data source whose HTTP traffic goes to a RecordingHandler."""

    def _make(
        handler: RecordingHandler,
        servers: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> SolrDataSource:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        config = {
            "servers": servers
            or {"default": {"urls": ["http://example.com/solr/"]}}
        }
        return SolrDataSource(
            config, transport=SolrTransport(client=client), **kwargs
        )

    return _make


@pytest.fixture
def make_handler() -> type[RecordingHandler]:
    return RecordingHandler

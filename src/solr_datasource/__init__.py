"""Solr data source: filter/query translation and querying for a federation layer."""

from __future__ import annotations

from .assembler import (
    MATCH_ALL,
    NO_LIMIT,
    QueryAssembler,
    build_order_string,
    prepare_query_addition,
    prepare_search_term,
)
from .compiler import FilterCompiler
from .config import DataSourceConfig, ServerConfig
from .datasource import SolrDataSource
from .escaping import escape_value
from .exceptions import (
    ConfigurationError,
    FilterCompileError,
    SolrDataSourceError,
    SolrResponseError,
    SolrTransportError,
    UnknownServerError,
    UnsupportedOperatorError,
)
from .operators import (
    DEFAULT_PROFILE,
    LEGACY_PROFILE,
    FilterOperator,
    OperatorProfile,
)
from .request import FilterCondition, OrderCriterion, QueryRequest
from .result import QueryResult
from .status import InMemoryStatusCounter, IStatusCounter
from .transport import SolrTransport
from .urls import UrlRotation

__all__ = [
    # Data source
    "SolrDataSource",
    "DataSourceConfig",
    "ServerConfig",
    # Translation
    "FilterCompiler",
    "QueryAssembler",
    "escape_value",
    "build_order_string",
    "prepare_query_addition",
    "prepare_search_term",
    "MATCH_ALL",
    "NO_LIMIT",
    # Operators
    "FilterOperator",
    "OperatorProfile",
    "DEFAULT_PROFILE",
    "LEGACY_PROFILE",
    # Models
    "FilterCondition",
    "OrderCriterion",
    "QueryRequest",
    "QueryResult",
    # Collaborators
    "SolrTransport",
    "UrlRotation",
    "IStatusCounter",
    "InMemoryStatusCounter",
    # Exceptions
    "SolrDataSourceError",
    "UnsupportedOperatorError",
    "FilterCompileError",
    "ConfigurationError",
    "UnknownServerError",
    "SolrTransportError",
    "SolrResponseError",
]

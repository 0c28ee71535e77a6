"""
Solr data source exception hierarchy.

All exceptions inherit from ``SolrDataSourceError`` and provide
``to_dict()`` for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class SolrDataSourceError(Exception):
    """Base exception for all data source errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class UnsupportedOperatorError(SolrDataSourceError, ValueError):
    """
    Filter operator is not supported by the engine profile.

    Provides fuzzy-matched suggestions for likely intended operators.
    """

    def __init__(self, operator: str, supported_operators: list[str]) -> None:
        self.operator = operator
        self.supported_operators = supported_operators
        self.suggestions = get_close_matches(
            operator, supported_operators, n=3, cutoff=0.6
        )

        message = f'DataSource "solr" does not support "{operator}" filters.'
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_OPERATOR",
            "operator": self.operator,
            "suggestions": self.suggestions,
            "supported_operators": sorted(self.supported_operators),
        }


class FilterCompileError(SolrDataSourceError, ValueError):
    """Raised when a filter condition cannot be rendered (malformed value)."""

    def __init__(self, message: str, attribute: str | list[str] | None = None) -> None:
        self.message = message
        self.attribute = attribute
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FILTER_COMPILE_ERROR",
            "message": self.message,
            "attribute": self.attribute,
        }


class ConfigurationError(SolrDataSourceError):
    """Raised when the data source configuration is invalid."""


class UnknownServerError(SolrDataSourceError, LookupError):
    """Raised when a request names a server that is not configured."""

    def __init__(self, server: str, available_servers: list[str]) -> None:
        self.server = server
        self.available_servers = available_servers
        super().__init__(f'Server "{server}" not defined')

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNKNOWN_SERVER",
            "server": self.server,
            "available_servers": sorted(self.available_servers),
        }


class SolrTransportError(SolrDataSourceError):
    """Raised when the HTTP request to the engine fails."""


class SolrResponseError(SolrTransportError):
    """Raised for HTTP status >= 400 or a response body that is not JSON."""

    def __init__(self, status_code: int, reason: str) -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Solr error: {status_code} {reason}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "SOLR_RESPONSE_ERROR",
            "status_code": self.status_code,
            "message": str(self),
        }

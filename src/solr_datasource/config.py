"""Data source configuration models."""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .exceptions import ConfigurationError, UnknownServerError

# Framework configs give timeouts in milliseconds under camelCase keys.
_MILLISECOND_KEYS = {
    "connectTimeout": "connect_timeout",
    "requestTimeout": "request_timeout",
}


class ServerConfig(BaseModel):
    """One logical Solr server: a set of equivalent base URLs.

    Timeouts are in seconds.
    """

    model_config = ConfigDict(frozen=True)

    urls: list[str] = Field(min_length=1)
    connect_timeout: float = Field(default=2.0, gt=0)
    request_timeout: float = Field(default=5.0, gt=0)

    @model_validator(mode="before")
    @classmethod
    def _convert_milliseconds(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key, name in _MILLISECOND_KEYS.items():
            value = data.pop(key, None)
            if isinstance(value, (int, float)):
                data.setdefault(name, value / 1000)
        return data

    @field_validator("urls")
    @classmethod
    def _normalize_urls(cls, urls: list[str]) -> list[str]:
        return [url if url.endswith("/") else url + "/" for url in urls]


class DataSourceConfig(BaseModel):
    """Configuration of a :class:`~solr_datasource.datasource.SolrDataSource`."""

    model_config = ConfigDict(frozen=True)

    servers: dict[str, ServerConfig] = Field(min_length=1)
    max_connections: int = Field(default=5, ge=1)
    keepalive_expiry: float = Field(default=10.0, ge=0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DataSourceConfig:
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid data source configuration: {e}") from e

    def server(self, name: str) -> ServerConfig:
        try:
            return self.servers[name]
        except KeyError:
            raise UnknownServerError(name, list(self.servers)) from None

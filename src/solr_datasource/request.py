"""Request models: the engine-agnostic query description."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .operators import FilterOperator


class FilterCondition(BaseModel):
    """A single ``attribute <operator> value`` condition.

    A list ``attribute`` is a composite key: ``value`` then holds rows of
    scalars matched positionally to the attribute names.
    """

    model_config = ConfigDict(frozen=True)

    attribute: str | list[str]
    operator: FilterOperator | str
    value: Any = None

    @property
    def is_composite(self) -> bool:
        return isinstance(self.attribute, list)


class OrderCriterion(BaseModel):
    model_config = ConfigDict(frozen=True)

    attribute: str
    direction: Literal["asc", "desc"] = "asc"


class QueryRequest(BaseModel):
    """Query description handed over by the federation framework.

    Framework dicts use camelCase keys (``limitPer``, ``queryAddition``);
    snake_case names are accepted as well.
    """

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )

    collection: str
    server: str = "default"
    attributes: list[str] | None = None
    filter: list[list[FilterCondition]] | None = None
    search: str | None = None
    allowed_search_fields: list[str] | None = None
    query_addition: str | None = None
    order: list[OrderCriterion] | None = None
    limit: int | None = Field(default=None, ge=0)
    page: int | None = Field(default=None, ge=1)
    limit_per: str | None = None
    expose_solr_syntax: bool = False
    df: str | None = None

    @field_validator("allowed_search_fields", mode="before")
    @classmethod
    def _split_search_fields(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [f.strip() for f in v.split(",") if f.strip()]
        return v

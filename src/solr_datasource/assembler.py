"""QueryAssembler: request -> Solr ``/select`` parameters."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from .compiler import FilterCompiler
from .escaping import escape_value
from .request import OrderCriterion, QueryRequest

logger = logging.getLogger(__name__)

# Row count sent when no limit is given; Solr would otherwise return 10 rows.
NO_LIMIT = 1000000
MATCH_ALL = "*:*"


def build_order_string(order: Iterable[OrderCriterion]) -> str:
    """Render ``attribute direction`` pairs, comma-separated, order preserved."""
    return ",".join(f"{o.attribute} {o.direction}" for o in order)


def prepare_query_addition(query_addition: str) -> str:
    """Collapse line breaks and whitespace runs of a raw query addition."""
    query_addition = re.sub(r"[\r\n]+", " ", query_addition)
    query_addition = re.sub(r"\s{2,}", " ", query_addition)
    return query_addition.strip()


def prepare_search_term(
    search: str,
    allowed_search_fields: Iterable[str] | None = None,
    expose_solr_syntax: bool = False,
) -> str:
    """Escape a full-text search term or scope it to an allowed field.

    ``title:foo bar`` becomes ``(title:"foo bar")`` when ``title`` is an
    allowed search field; anything else is searched as escaped text.
    """
    term = search.strip()
    escaped = str(escape_value(term, expose_solr_syntax))
    fields = [f for f in (allowed_search_fields or []) if f]
    if not fields:
        return escaped

    alternatives = "|".join(re.escape(f) for f in fields)
    pattern = re.compile(rf"^(?P<field>{alternatives}):(?P<search>.+)", re.DOTALL)
    match = pattern.match(term)
    if match is None:
        return escaped
    return f'({match.group("field")}:"{match.group("search")}")'


class QueryAssembler:
    """Builds the Solr request parameters for a :class:`QueryRequest`."""

    def __init__(self, compiler: FilterCompiler | None = None) -> None:
        self.compiler = compiler or FilterCompiler()

    def assemble(self, request: QueryRequest | Mapping[str, Any]) -> dict[str, str]:
        if not isinstance(request, QueryRequest):
            request = QueryRequest.model_validate(request)

        params: dict[str, str] = {"wt": "json"}
        query_parts: list[str] = []

        if request.attributes:
            params["fl"] = ",".join(request.attributes)
        if request.df:
            params["df"] = request.df

        if request.search and request.search.strip():
            query_parts.append(
                prepare_search_term(
                    request.search,
                    request.allowed_search_fields,
                    request.expose_solr_syntax,
                )
            )
        if request.filter:
            query_parts.append(self.compiler.compile(request.filter))
        if request.query_addition:
            addition = prepare_query_addition(request.query_addition)
            if addition:
                query_parts.append(addition)
        if not query_parts:
            query_parts.append(MATCH_ALL)

        # overwrite Solr default limit for sub-resource processing
        limit = request.limit or NO_LIMIT
        if request.page:
            params["start"] = str((request.page - 1) * limit)

        if request.limit_per:
            # group.limit paginates; sort order is not applied to groups
            params.update(
                {
                    "group": "true",
                    "group.format": "simple",
                    "group.main": "true",
                    "group.field": request.limit_per,
                    "group.limit": str(limit),
                    "rows": str(NO_LIMIT),
                }
            )
        else:
            params["rows"] = str(limit)
            if request.order:
                params["sort"] = build_order_string(request.order)

        params["q"] = " AND ".join(query_parts)
        logger.debug(f"Assembled Solr query for {request.collection!r}: {params}")
        return params

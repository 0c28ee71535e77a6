"""QueryResult: normalized response of a Solr ``/select`` request."""

from __future__ import annotations

from typing import Any, NamedTuple


class QueryResult(NamedTuple):
    total_count: int
    data: list[dict[str, Any]]

    @classmethod
    def from_response(cls, payload: dict[str, Any]) -> QueryResult:
        """Build from a Solr JSON response (``response.numFound``/``docs``)."""
        response = payload["response"]
        return cls(total_count=int(response["numFound"]), data=list(response["docs"]))

    def to_dict(self) -> dict[str, Any]:
        return {"totalCount": self.total_count, "data": self.data}

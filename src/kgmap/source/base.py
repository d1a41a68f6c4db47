from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from rdflib import Graph, URIRef
from rdflib.term import Node

from kgmap.common.types import ResourceId
from kgmap.graph import value, types
from kgmap.source.dialect import Dialect


class GraphSource(ABC):
    """
    Where the materializer reads triples from.

    ``describe`` is best effort: an unknown resource yields an empty graph,
    not an error.
    """

    query_dialect: Dialect = Dialect.SPARQL

    @abstractmethod
    def describe(self, resource: ResourceId) -> Graph:
        """All triples describing ``resource``."""

    @abstractmethod
    def graph_query(self, query: str) -> Graph:
        """Run a CONSTRUCT/DESCRIBE style query."""

    def select(self, query: str) -> List[Dict[str, Any]]:
        raise NotImplementedError(f"{type(self).__name__} does not answer select queries")

    def get_query_dialect(self) -> Dialect:
        return self.query_dialect or Dialect.SPARQL


def get_value(source: GraphSource, subject: ResourceId, predicate: URIRef) -> Optional[Node]:
    return value(source.describe(subject), subject, predicate)


def get_type(source: GraphSource, subject: ResourceId) -> Optional[URIRef]:
    asserted = types(source.describe(subject), subject)
    return asserted[0] if asserted else None

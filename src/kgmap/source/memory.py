# kgmap/source/memory.py
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional
from rdflib import Graph
from rdflib.query import ResultRow
from kgmap.common.types import ResourceId
from kgmap.source.base import GraphSource
from kgmap.source.dialect import Dialect


class RDFLibSource(GraphSource):
    """Graph source over an in-memory rdflib graph."""

    query_dialect = Dialect.ARQ

    def __init__(self, graph: Optional[Graph] = None):
        self.g = graph if graph is not None else Graph()

    def add(self, graph: Graph | Iterable) -> "RDFLibSource":
        for triple in graph:
            self.g.add(triple)
        return self

    def describe(self, resource: ResourceId) -> Graph:
        """Concise bounded description: the resource's triples plus the closure over its blank nodes."""
        if (resource, None, None) not in self.g:
            return Graph()
        return self.g.cbd(resource)

    def graph_query(self, query: str) -> Graph:
        result = self.g.query(query)
        return result.graph if result.graph is not None else Graph()

    def select(self, query: str) -> List[Dict[str, Any]]:
        rows = []
        for row in self.g.query(query):
            if isinstance(row, ResultRow):
                rows.append({str(k): v for k, v in row.asdict().items()})
        return rows

    def asGraph(self) -> Graph:
        return self.g

    def __len__(self) -> int:
        return len(self.g)

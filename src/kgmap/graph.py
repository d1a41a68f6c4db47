# kgmap/graph.py
"""
The few graph primitives marshalling needs: pattern match by subject and
predicate, single and multi value lookup, and RDF list detection.
"""
from __future__ import annotations
from typing import List, Optional, Set
from rdflib import Graph, URIRef, BNode, RDF
from rdflib.term import Node

from kgmap.common.types import ResourceId


def predicates(graph: Graph, subject: ResourceId) -> Set[URIRef]:
    return {p for _, p, _ in graph.triples((subject, None, None))}


def values(graph: Graph, subject: ResourceId, predicate: URIRef) -> List[Node]:
    return list(graph.objects(subject, predicate))


def value(graph: Graph, subject: ResourceId, predicate: URIRef) -> Optional[Node]:
    for o in graph.objects(subject, predicate):
        return o
    return None


def types(graph: Graph, subject: ResourceId) -> List[URIRef]:
    return [o for o in graph.objects(subject, RDF.type) if isinstance(o, URIRef)]


def is_list(graph: Graph, node: Node) -> bool:
    """True when ``node`` heads an rdf:first/rdf:rest chain in ``graph``."""
    if node == RDF.nil:
        return True
    return isinstance(node, BNode) and (node, RDF.first, None) in graph


def list_items(graph: Graph, head: Node) -> List[Node]:
    """Walk an RDF list inside ``graph`` as far as the graph describes it."""
    items: List[Node] = []
    seen = set()
    node = head
    while node is not None and node != RDF.nil and node not in seen:
        seen.add(node)
        first = value(graph, node, RDF.first)
        if first is not None:
            items.append(first)
        node = value(graph, node, RDF.rest)
    return items

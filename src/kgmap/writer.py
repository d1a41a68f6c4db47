from __future__ import annotations

import logging
from typing import Any, Optional

from rdflib import BNode, Graph, Literal, RDF, URIRef, XSD
from rdflib.collection import Collection
from rdflib.term import Node

from kgmap.common.types import ResourceId
from kgmap.config import MappingOptions
from kgmap.errors import InvalidMappingError, UnsupportedLiteralError
from kgmap.identity import assign_id
from kgmap.literals import kind_of_value, lexical_form, to_literal
from kgmap.model.annotations import has_rdfs_class
from kgmap.model.bindings import BindingResolver, MemberBinding
from kgmap.proxy import is_reference, is_resolved, reference_key, resolve

logger = logging.getLogger(__name__)

COLLECTION_TYPES = (list, tuple, set, frozenset)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if is_reference(value):
        return False
    return str(value) == ""


class GraphWriter:
    """Turns a record's direct properties into triples.

    Related records are written by identifier only; marshalling their own
    properties takes a separate call.
    """

    def __init__(self, options: MappingOptions, bindings: BindingResolver):
        self.options = options
        self.bindings = bindings

    def id_of(self, obj: Any) -> ResourceId:
        obj = resolve(obj)
        return assign_id(obj, self.bindings.resolve(type(obj)))

    def value_of(self, member: MemberBinding, value: Any) -> Node:
        if is_reference(value):
            # a reference is written as its key unless it already resolved
            if is_resolved(value):
                return self.value_of(member, resolve(value))
            return reference_key(value)
        if isinstance(value, URIRef):
            if member.xsd_uri:
                return Literal(str(value), datatype=XSD.anyURI)
            return value
        if isinstance(value, (BNode, Literal)):
            return value
        if has_rdfs_class(type(value)):
            return self.id_of(value)
        if kind_of_value(value) is None:
            raise InvalidMappingError(
                f"Unknown type conversion: {type(value).__name__} {value!r} for member '{member.name}'")
        if not self.options.strong_typing:
            return Literal(lexical_form(value))
        return to_literal(value, lang=member.language, kind=member.kind)

    def to_graph(self, obj: Any) -> Optional[Graph]:
        if obj is None:
            return None
        obj = resolve(obj)

        binding = self.bindings.resolve(type(obj))
        subject = assign_id(obj, binding)

        graph = Graph()
        for prefix, uri in binding.namespaces:
            graph.bind(prefix, uri)
        graph.add((subject, RDF.type, binding.class_iri))

        for member in binding.mapped_members():
            logger.debug("Getting rdf for : %s.%s", binding.cls.__name__, member.name)
            value = getattr(obj, member.name, None)
            if _is_empty(value):
                continue
            try:
                if isinstance(value, COLLECTION_TYPES):
                    nodes = [self.value_of(member, v) for v in value if not _is_empty(v)]
                    if not nodes:
                        continue
                    if member.is_list:
                        head = BNode()
                        Collection(graph, head, nodes)
                        graph.add((subject, member.predicate, head))
                    else:
                        for node in nodes:
                            graph.add((subject, member.predicate, node))
                else:
                    graph.add((subject, member.predicate, self.value_of(member, value)))
            except UnsupportedLiteralError as e:
                raise InvalidMappingError(f"Cannot write member '{member.name}' of {binding.cls.__name__}") from e

        return graph

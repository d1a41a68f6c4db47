"""
Read direction: populate a record from the description of a resource.

A ``Materializer`` belongs to one ``Mapper`` and shares its registries. The
construction registry makes cyclic graphs terminate: a resource reached
again while it is still being built resolves to the instance under
construction, so ``a.knows.knows is a`` holds after reading a two-node
cycle.
"""
from __future__ import annotations

import locale
import logging
import time as timer
from datetime import date, datetime, time
from typing import Any, List, Optional, TYPE_CHECKING

from rdflib import BNode, Graph, Literal, RDF, URIRef
from rdflib.term import Node

from kgmap.common.types import ResourceId
from kgmap.codegen import generate_instance_class, is_abstract
from kgmap.errors import AmbiguousValueError, InvalidMappingError, MappingError, UnknownTypeError
from kgmap.graph import is_list, list_items, predicates, types, values
from kgmap.identity import ConstructionRegistry, bind_id
from kgmap.literals import NativeKind, from_literal
from kgmap.model.annotations import has_rdfs_class
from kgmap.model.bindings import MemberBinding, TypeBinding
from kgmap.proxy import LazyReference
from kgmap.source.base import GraphSource, get_type, get_value

if TYPE_CHECKING:
    from kgmap.mapper import Mapper

logger = logging.getLogger(__name__)

_UNSET = object()


def default_language(configured: Optional[str] = None) -> str:
    if configured:
        return configured
    current = locale.getlocale()[0]
    if current:
        return current.split("_")[0].lower()
    return "en"


def _coerce(member: MemberBinding, val: Any) -> Any:
    tp = member.python_type
    if tp is float and isinstance(val, int) and not isinstance(val, bool):
        return float(val)
    if tp is datetime and isinstance(val, date) and not isinstance(val, datetime):
        return datetime.combine(val, time())
    if tp is date and isinstance(val, datetime):
        return val.date()
    return val


def _check_type(member: MemberBinding, val: Any) -> None:
    tp = member.python_type
    if tp is Any or tp is object or not isinstance(tp, type) or val is None:
        return
    if not isinstance(val, tp):
        raise TypeError(f"expected {tp.__name__}, got {type(val).__name__} {val!r}")


def _set(obj: Any, name: str, val: Any) -> None:
    params = getattr(type(obj), "__dataclass_params__", None)
    if params is not None and params.frozen:
        object.__setattr__(obj, name, val)
    else:
        setattr(obj, name, val)


class Materializer:
    def __init__(self, mapper: "Mapper"):
        self.mapper = mapper
        self.options = mapper.options
        self.bindings = mapper.bindings
        self.registry = ConstructionRegistry()

    # allocation

    def new_instance(self, cls: type) -> Any:
        start = timer.time()
        obj = None
        factory = self.mapper.instance_factory
        if factory is not None:
            try:
                obj = factory(cls)
            except LookupError:
                logger.debug("Instance factory has no binding for %s, using default construction", cls.__name__)
        if obj is None:
            impl = generate_instance_class(cls) if is_abstract(cls) else cls
            try:
                obj = impl()
            except TypeError as e:
                raise InvalidMappingError(
                    f"Cannot create instance of {cls.__name__}, it should have a default constructor") from e
            except Exception as e:
                raise InvalidMappingError(f"Cannot create instance of {cls.__name__}: {e}") from e
        logger.debug("Allocated %s in %.2f ms", cls.__name__, (timer.time() - start) * 1000)
        return obj

    def _refine(self, obj: Any, requested: type, key: ResourceId, graph: Graph) -> Any:
        """Swap ``obj`` for an instance of the most specific registered subclass."""
        current = self.bindings.resolve(type(obj))
        for asserted in types(graph, key):
            try:
                found = self.mapper.type_for(asserted)
            except UnknownTypeError as e:
                logger.debug("%s", e)
                continue
            if found is type(obj) or found is requested:
                continue
            if self.bindings.resolve(found).class_iri == current.class_iri:
                continue
            if not issubclass(found, requested):
                logger.warning("Asserted type %s of %s is not compatible with %s, ignoring it",
                               found.__name__, key, requested.__name__)
                continue
            try:
                refined = self.new_instance(found)
                bind_id(refined, key)
            except MappingError as e:
                logger.warning("Cannot refine %s to %s, keeping %s: %s",
                               key, found.__name__, type(obj).__name__, e)
                continue
            obj = refined
            self.registry.replace(key, obj)
            current = self.bindings.resolve(type(obj))
        return obj

    # top level

    def materialize(self, cls: type, key: ResourceId, source: GraphSource) -> Any:
        existing = self.registry.get(key)
        if existing is not None:
            return existing

        self.bindings.resolve(cls)
        obj = self.new_instance(cls)
        bind_id(obj, key)

        with self.registry.constructing(key, obj):
            start = timer.time()
            graph = source.describe(key)
            logger.debug("Described %s in %.2f ms (%d triples)", key, (timer.time() - start) * 1000, len(graph))
            if len(graph) == 0:
                return obj

            obj = self._refine(obj, cls, key, graph)
            binding = self.bindings.resolve(type(obj))

            for predicate in predicates(graph, key):
                if predicate == RDF.type:
                    continue
                member = binding.member_for(predicate)
                if member is None:
                    logger.debug("No member of %s bound to %s", binding.cls.__name__, predicate)
                    continue
                self._assign(obj, binding, member, graph, key, source)
            return obj

    def _assign(self, obj: Any, binding: TypeBinding, member: MemberBinding,
                graph: Graph, key: ResourceId, source: GraphSource) -> None:
        try:
            val = self._read(member, graph, key, source)
            if val is _UNSET:
                return
            if member.is_collection:
                for item in val:
                    _check_type(member, item)
            else:
                _check_type(member, val)
            _set(obj, member.name, val)
        except TypeError as e:
            logger.warning("Cannot assign %s.%s for %s: %s", binding.cls.__name__, member.name, key, e)
        except InvalidMappingError:
            raise
        except Exception as e:
            raise InvalidMappingError(
                f"Cannot assign {binding.cls.__name__}.{member.name} for {key}: {e}") from e

    # values

    def _read(self, member: MemberBinding, graph: Graph, key: ResourceId, source: GraphSource) -> Any:
        nodes = values(graph, key, member.predicate)
        if member.is_collection:
            items: List[Any] = []
            for node in nodes:
                elements = self._list_elements(member, graph, key, node, source) \
                    if isinstance(node, BNode) else None
                if elements is not None:
                    items.extend(elements)
                    continue
                val = self._value(member, node, source)
                if val is not None:
                    items.append(val)
            return member.collection_type(items)

        candidates = self._candidates(member, nodes)
        if not candidates:
            return _UNSET
        if len(candidates) > 1:
            shown = ", ".join(str(c) for c in candidates[:5])
            raise AmbiguousValueError(
                f"Ambiguous value for member '{member.name}' of {key}: {len(candidates)} candidates ({shown})")
        val = self._value(member, candidates[0], source)
        return _UNSET if val is None else val

    def _candidates(self, member: MemberBinding, nodes: List[Node]) -> List[Node]:
        if member.kind.is_literal:
            literals = [n for n in nodes if isinstance(n, Literal)]
            if literals:
                nodes = literals
        elif member.kind is NativeKind.RESOURCE:
            resources = [n for n in nodes if isinstance(n, (URIRef, BNode))]
            if resources:
                nodes = resources

        if nodes and all(isinstance(n, Literal) for n in nodes):
            nodes = self._by_language(member, nodes)
        return nodes

    def _by_language(self, member: MemberBinding, nodes: List[Literal]) -> List[Literal]:
        def lang(n):
            return n.language.lower() if n.language else None

        if self.options.enable_lang_aware:
            wanted = member.language.lower() if member.language else None
            return [n for n in nodes if lang(n) == wanted]

        untagged = [n for n in nodes if n.language is None]
        if untagged:
            return untagged
        preferred = default_language(self.options.default_language).lower()
        tagged = [n for n in nodes if lang(n) == preferred]
        return tagged or nodes

    def _value(self, member: MemberBinding, node: Node, source: GraphSource) -> Any:
        if isinstance(node, Literal):
            return _coerce(member, from_literal(node, member.kind))
        if isinstance(node, URIRef) and member.kind is NativeKind.URI:
            return node
        return self._related(member, node, source)

    def _related(self, member: MemberBinding, node: Node, source: GraphSource) -> Any:
        target = member.python_type if has_rdfs_class(member.python_type) else None
        if target is None:
            asserted = get_type(source, node)
            if asserted is not None:
                target = self.mapper.types.get(asserted)
        if target is None and member.kind is NativeKind.ANY:
            return node

        try:
            if target is None:
                raise InvalidMappingError(f"No mapped type for value {node} of member '{member.name}'")
            if member.lazy:
                return LazyReference(self.mapper, target, node, source)
            return self.mapper.from_graph(target, node, source)
        except MappingError as e:
            if self.options.strict_mode:
                raise
            logger.warning("Ignoring value %s of member '%s': %s", node, member.name, e)
            return None

    def _list_elements(self, member: MemberBinding, graph: Graph, key: ResourceId,
                       node: BNode, source: GraphSource) -> Optional[List[Any]]:
        """Elements of the RDF list headed by ``node``, or None if it heads no list."""
        dialect = source.get_query_dialect()
        list_graph, head = graph, node
        if not is_list(graph, node):
            if (node, None, None) in graph:
                # described here and not a list, so a related record
                return None
            list_graph = source.graph_query(dialect.list_query(key, member.predicate))
            if not is_list(list_graph, node):
                # blank node labels differ between requests, accept the one unknown head
                heads = [o for o in list_graph.objects(key, member.predicate)
                         if is_list(list_graph, o) and not is_list(graph, o)]
                if len(heads) != 1:
                    return None
                head = heads[0]

        if member.is_list and dialect.supports_stable_bnode_ids:
            nodes = self._walk_source(head, source)
        else:
            nodes = list_items(list_graph, head)

        elements = []
        for item in nodes:
            val = self._value(member, item, source)
            if val is None:
                raise InvalidMappingError(f"Error converting a list value: {item}")
            elements.append(val)
        return elements

    @staticmethod
    def _walk_source(head: Node, source: GraphSource) -> List[Node]:
        items: List[Node] = []
        seen = set()
        node = head
        while node is not None and node != RDF.nil and node not in seen:
            seen.add(node)
            first = get_value(source, node, RDF.first)
            if first is not None:
                items.append(first)
            node = get_value(source, node, RDF.rest)
        return items

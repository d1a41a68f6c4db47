# kgmap/mapper.py
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Iterable, Optional, Type, TypeVar

from rdflib import Graph, URIRef

from kgmap.common.types import ResourceId, as_resource
from kgmap.config import MappingOptions
from kgmap.errors import UnknownTypeError
from kgmap.materializer import Materializer
from kgmap.model.bindings import BindingResolver, TypeBinding
from kgmap.prefixes import NamespaceRegistry
from kgmap.source.base import GraphSource
from kgmap.writer import GraphWriter

logger = logging.getLogger(__name__)

T = TypeVar("T")

InstanceFactory = Callable[[type], Optional[Any]]


class Mapper:
    """
    Converts between mapped Python records and RDF graphs.

    A mapper owns every registry involved in a conversion: the namespace
    prefixes, the class IRI to type table used for type refinement, the
    cached member bindings and the construction registry for cycles. Two
    mappers never share state.

    Example::

        mapper = Mapper()
        mapper.init([Person, Employee])
        graph = mapper.to_graph(alice)
        copy = mapper.from_graph(Person, mapper.id_of(alice), RDFLibSource(graph))
    """

    def __init__(self, options: Optional[MappingOptions] = None,
                 instance_factory: Optional[InstanceFactory] = None):
        self.options = options or MappingOptions()
        self.instance_factory = instance_factory
        self.ns = NamespaceRegistry(self.options.namespaces)
        self.types: Dict[URIRef, type] = {}
        self._lock = threading.RLock()
        self.bindings = BindingResolver(self.options, self.ns, type_names=self._type_names)
        self.writer = GraphWriter(self.options, self.bindings)
        self.materializer = Materializer(self)

    @property
    def lock(self) -> threading.RLock:
        """Lock held during conversions; lazy references resolve under it too."""
        return self._lock

    def _type_names(self) -> Dict[str, type]:
        return {cls.__name__: cls for cls in self.types.values()}

    def init(self, types: Iterable[type]) -> "Mapper":
        """Register types for refinement; a class IRI bound twice keeps the last type."""
        with self._lock:
            for cls in types:
                self.bindings.validate(cls)
                self.ns.register_once(cls)
                iri = self.ns.expand(cls.__rdfs_class__)
                previous = self.types.get(iri)
                if previous is not None and previous is not cls:
                    logger.warning("Class %s rebound from %s to %s", iri, previous.__name__, cls.__name__)
                self.types[iri] = cls
        return self

    def resolve_bindings(self, cls: type) -> TypeBinding:
        with self._lock:
            self.ns.register_once(cls)
            return self.bindings.resolve(cls)

    def type_for(self, iri: URIRef) -> type:
        cls = self.types.get(URIRef(iri))
        if cls is None:
            raise UnknownTypeError(f"No type registered for class {iri}")
        return cls

    def id_of(self, obj: Any) -> ResourceId:
        with self._lock:
            return self.writer.id_of(obj)

    def to_graph(self, obj: Any) -> Optional[Graph]:
        """Triples for the direct properties of ``obj``; related records contribute their id only."""
        with self._lock:
            return self.writer.to_graph(obj)

    def from_graph(self, cls: Type[T], id: Any, source: GraphSource) -> T:
        """Instance of ``cls`` populated from what ``source`` says about ``id``."""
        key = as_resource(id)
        with self._lock:
            return self.materializer.materialize(cls, key, source)

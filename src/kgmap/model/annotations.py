"""
Declarations that make a Python class mappable to RDF.

Example::

    @namespaces(foaf="http://xmlns.com/foaf/0.1/")
    @rdfs_class("foaf:Person")
    @dataclass
    class Person(SupportsRdfId):
        name: str = rdf_field("foaf:name", default=None)
        knows: list[Person] = rdf_field("foaf:knows", default_factory=list)
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, MISSING
from typing import Any, Callable, Optional

from rdflib import BNode

from kgmap.common.types import ResourceId, as_resource
from kgmap.errors import InvalidMappingError
from kgmap.literals import NativeKind

METADATA_KEY = "kgmap"


@dataclass(frozen=True)
class RdfProperty:
    """Explicit binding of a member to a predicate."""
    predicate: Optional[str] = None
    is_list: bool = False
    language: Optional[str] = None
    lazy: bool = False
    xsd_uri: bool = False
    kind: Optional[NativeKind] = None
    transient: bool = False
    is_id: bool = False
    id_namespace: Optional[str] = None

    def __call__(self, fn: Callable) -> Callable:
        # used as a decorator on property getters
        fn.__rdf_property__ = self
        return fn


class SupportsRdfId:
    """Identity capability: an instance carries its resource identifier.

    The identifier is write-once, assigning a different one later fails.
    """

    _rdf_id: Optional[ResourceId] = None

    @property
    def rdf_id(self) -> Optional[ResourceId]:
        return self._rdf_id

    @rdf_id.setter
    def rdf_id(self, value) -> None:
        key = None if value is None else as_resource(value)
        current = self._rdf_id
        if current is not None and key != current:
            raise InvalidMappingError(f"Instance already identified as {current}, cannot rebind to {key}")
        object.__setattr__(self, "_rdf_id", key)

    @property
    def is_anonymous(self) -> bool:
        return isinstance(self._rdf_id, BNode)


def rdfs_class(iri: str, inherit: bool = True, base: Optional[str] = None):
    """Bind a type to its class IRI (a qname or a full IRI)."""
    def deco(cls):
        cls.__rdfs_class__ = iri
        cls.__kgmap_inherit__ = inherit
        cls.__kgmap_base__ = base
        return cls
    return deco


def namespaces(*pairs: str, **prefixes: str):
    """Declare namespace prefixes, either as ``prefix, uri, ...`` or as keywords."""
    declared = []
    for i in range(0, len(pairs) - 1, 2):
        declared.append((pairs[i], pairs[i + 1]))
    declared.extend(prefixes.items())

    def deco(cls):
        cls.__kgmap_namespaces__ = tuple(declared)
        return cls
    return deco


def entity(cls):
    """Persistence marker, only checked when entity enforcement is enabled."""
    cls.__kgmap_entity__ = True
    return cls


def _field(binding: RdfProperty, default: Any, default_factory: Any, **kwargs):
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[METADATA_KEY] = binding
    if default_factory is not MISSING:
        return dataclasses.field(default_factory=default_factory, metadata=metadata, **kwargs)
    return dataclasses.field(default=default, metadata=metadata, **kwargs)


def rdf_field(predicate: Optional[str] = None, *, default: Any = MISSING, default_factory: Any = MISSING,
              is_list: bool = False, language: Optional[str] = None, lazy: bool = False,
              xsd_uri: bool = False, kind: Optional[NativeKind] = None, **kwargs):
    """A dataclass field bound to ``predicate``."""
    binding = RdfProperty(predicate=predicate, is_list=is_list, language=language, lazy=lazy,
                          xsd_uri=xsd_uri, kind=kind)
    return _field(binding, default, default_factory, **kwargs)


def rdf_id_field(predicate: Optional[str] = None, *, namespace: Optional[str] = None,
                 default: Any = MISSING, kind: Optional[NativeKind] = None, **kwargs):
    """The member an instance's identifier is derived from."""
    binding = RdfProperty(predicate=predicate, kind=kind, is_id=True, id_namespace=namespace)
    return _field(binding, default, MISSING, **kwargs)


def transient_field(*, default: Any = MISSING, default_factory: Any = MISSING, **kwargs):
    """A dataclass field that never takes part in mapping."""
    return _field(RdfProperty(transient=True), default, default_factory, **kwargs)


def rdf_property(predicate: Optional[str] = None, *, is_list: bool = False, language: Optional[str] = None,
                 lazy: bool = False, xsd_uri: bool = False, kind: Optional[NativeKind] = None,
                 transient: bool = False) -> RdfProperty:
    """Bind a property getter to ``predicate``; apply below ``@property``."""
    return RdfProperty(predicate=predicate, is_list=is_list, language=language, lazy=lazy,
                       xsd_uri=xsd_uri, kind=kind, transient=transient)


def has_rdfs_class(cls) -> bool:
    return isinstance(cls, type) and getattr(cls, "__rdfs_class__", None) is not None


def is_entity(cls) -> bool:
    return bool(getattr(cls, "__kgmap_entity__", False))

from __future__ import annotations

import collections.abc
import dataclasses
import inspect
import logging
import threading
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from rdflib import URIRef

from kgmap.common.types import DEFAULT_NAMESPACE
from kgmap.config import MappingOptions
from kgmap.errors import InvalidMappingError
from kgmap.literals import NativeKind, kind_of_type
from kgmap.model.annotations import METADATA_KEY, RdfProperty, SupportsRdfId, has_rdfs_class, is_entity
from kgmap.prefixes import NamespaceRegistry

logger = logging.getLogger(__name__)

_SEQUENCE_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence,
                     collections.abc.Iterable, collections.abc.Collection)
_SET_ORIGINS = (set, collections.abc.Set, collections.abc.MutableSet)


@dataclass
class MemberBinding:
    name: str
    predicate: Optional[URIRef]
    kind: NativeKind
    python_type: Any = Any
    collection_type: Optional[type] = None
    is_list: bool = False
    language: Optional[str] = None
    lazy: bool = False
    xsd_uri: bool = False
    accessor: bool = False
    transient: bool = False
    is_id: bool = False
    id_namespace: Optional[str] = None

    @property
    def is_collection(self) -> bool:
        return self.collection_type is not None

    @property
    def is_mapped(self) -> bool:
        return not self.transient and self.predicate is not None


@dataclass
class TypeBinding:
    cls: type
    class_iri: URIRef
    namespaces: Tuple[Tuple[str, str], ...] = ()
    base_namespace: str = DEFAULT_NAMESPACE
    members: List[MemberBinding] = field(default_factory=list)
    by_predicate: Dict[URIRef, MemberBinding] = field(default_factory=dict)
    id_member: Optional[MemberBinding] = None

    def member_for(self, predicate: URIRef) -> Optional[MemberBinding]:
        return self.by_predicate.get(predicate)

    def mapped_members(self) -> List[MemberBinding]:
        return [m for m in self.members if m.is_mapped]


def namespace_of(iri: str) -> str:
    for sep in ("#", "/", ":"):
        idx = iri.rfind(sep)
        if idx > 0 and not iri[:idx + 1].endswith("//"):
            return iri[:idx + 1]
    return DEFAULT_NAMESPACE


def unwrap_annotation(tp: Any) -> Tuple[Any, Optional[type], bool]:
    """Return (element type, collection type, is class var) for an annotation."""
    origin = typing.get_origin(tp)
    if origin is ClassVar:
        return Any, None, True
    if origin is typing.Annotated:
        return unwrap_annotation(typing.get_args(tp)[0])
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return unwrap_annotation(args[0])
        return Any, None, False
    if origin is not None:
        args = typing.get_args(tp)
        element = args[0] if args else Any
        if origin is tuple:
            return element, tuple, False
        if origin is frozenset:
            return element, frozenset, False
        if origin in _SET_ORIGINS:
            return element, set, False
        if origin in _SEQUENCE_ORIGINS:
            return element, list, False
        return origin, None, False
    if tp in (list, tuple, set, frozenset):
        return Any, tp, False
    return tp, None, False


class BindingResolver:
    """
    Discovers and caches the member bindings of mappable types.

    Bindings are computed once per type and reused for the lifetime of the
    resolver; type names known to ``type_names`` resolve forward references.
    """

    def __init__(self, options: MappingOptions, ns: NamespaceRegistry,
                 type_names: Optional[Callable[[], Mapping[str, type]]] = None):
        self.options = options
        self.ns = ns
        self._type_names = type_names or (lambda: {})
        self._cache: Dict[type, TypeBinding] = {}
        self._lock = threading.RLock()

    def validate(self, cls: type) -> None:
        if not has_rdfs_class(cls):
            raise InvalidMappingError(f"Type '{getattr(cls, '__name__', cls)}' is not bound to an rdfs class")
        if self.options.enforce_entity_annotation and not is_entity(cls):
            raise InvalidMappingError(f"Type '{cls.__name__}' is not marked as an entity")
        if not issubclass(cls, SupportsRdfId):
            raise InvalidMappingError(
                f"Type '{cls.__name__}' does not implement SupportsRdfId, anonymous instances are not supported.")

    def resolve(self, cls: type) -> TypeBinding:
        if not isinstance(cls, type):
            cls = type(cls)
        with self._lock:
            cached = self._cache.get(cls)
            if cached is not None:
                return cached
            self.validate(cls)
            binding = self._build(cls)
            self._cache[cls] = binding
            logger.debug("Resolved %d members for %s", len(binding.members), cls.__name__)
            return binding

    def _hints(self, obj: Any, cls: type) -> Dict[str, Any]:
        localns = dict(self._type_names())
        localns[cls.__name__] = cls
        try:
            return typing.get_type_hints(obj, localns=localns)
        except (NameError, TypeError) as e:
            logger.debug("Could not resolve annotations of %s: %s", obj, e)
            return {}

    def _build(self, cls: type) -> TypeBinding:
        source_cls = getattr(cls, "__kgmap_generated_from__", cls)
        self.ns.register_once(source_cls)
        self.ns.register_once(cls)

        class_iri = self.ns.expand(cls.__rdfs_class__)
        base = getattr(cls, "__kgmap_base__", None)
        base_namespace = str(self.ns.expand(base)) if base else namespace_of(str(class_iri))
        inherit = getattr(cls, "__kgmap_inherit__", True)

        own = set(vars(source_cls)) | set(inspect.get_annotations(source_cls))
        if source_cls is not cls:
            own |= set(vars(cls))

        binding = TypeBinding(cls=cls, class_iri=class_iri,
                              namespaces=tuple(getattr(source_cls, "__kgmap_namespaces__", ())),
                              base_namespace=base_namespace)

        members: Dict[str, MemberBinding] = {}
        if dataclasses.is_dataclass(cls):
            hints = self._hints(cls, cls)
            for f in dataclasses.fields(cls):
                if not inherit and f.name not in own:
                    continue
                members[f.name] = self._member(f.name, hints.get(f.name, Any),
                                               f.metadata.get(METADATA_KEY), base_namespace, accessor=False)

        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if not isinstance(attr, property):
                    continue
                declared = getattr(attr.fget, "__rdf_property__", None)
                if declared is None or (not inherit and name not in own):
                    continue
                tp = self._hints(attr.fget, cls).get("return", Any)
                members[name] = self._member(name, tp, declared, base_namespace, accessor=True)

        for member in members.values():
            binding.members.append(member)
            if member.is_id:
                binding.id_member = member
            if member.is_mapped:
                binding.by_predicate[member.predicate] = member
        return binding

    def _member(self, name: str, tp: Any, declared: Optional[RdfProperty], base_namespace: str,
                accessor: bool) -> MemberBinding:
        element, collection, is_classvar = unwrap_annotation(tp)
        kind = kind_of_type(element)
        if kind is None:
            kind = NativeKind.RESOURCE
        declared = declared or RdfProperty()
        if declared.kind is not None:
            kind = declared.kind

        transient = declared.transient or is_classvar or name.startswith("_")
        predicate = None
        if declared.predicate:
            predicate = self.ns.expand(declared.predicate)
        elif declared != RdfProperty() or self.options.infer_bindings:
            predicate = URIRef(base_namespace + name)
        else:
            # no explicit binding and inference disabled
            transient = True

        return MemberBinding(
            name=name,
            predicate=predicate,
            kind=kind,
            python_type=element,
            collection_type=collection,
            is_list=declared.is_list,
            language=declared.language,
            lazy=declared.lazy,
            xsd_uri=declared.xsd_uri,
            accessor=accessor,
            transient=transient,
            is_id=declared.is_id,
            id_namespace=declared.id_namespace,
        )

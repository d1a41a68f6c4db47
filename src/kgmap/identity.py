from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from rdflib import URIRef

from kgmap.common.types import DEFAULT_NAMESPACE, ResourceId, is_uri, new_id, url_encode
from kgmap.errors import InvalidMappingError
from kgmap.model.annotations import SupportsRdfId
from kgmap.model.bindings import TypeBinding

logger = logging.getLogger(__name__)


def as_supports_rdf_id(obj: Any) -> SupportsRdfId:
    if not isinstance(obj, SupportsRdfId):
        raise InvalidMappingError(
            f"Object of type '{type(obj).__name__}' does not implement SupportsRdfId, "
            "anonymous instances are not supported.")
    return obj


def bind_id(obj: Any, key: ResourceId) -> None:
    """Set the identifier of ``obj``, bypassing a frozen dataclass ``__setattr__``."""
    SupportsRdfId.rdf_id.fset(as_supports_rdf_id(obj), key)


def assign_id(obj: Any, binding: TypeBinding) -> ResourceId:
    """
    Return the identifier of ``obj``, assigning one first if it has none.

    An identifier is derived from the identifying member when the type
    declares one, otherwise it is random. Calling this again returns the
    identifier assigned the first time.
    """
    support = as_supports_rdf_id(obj)
    if support.rdf_id is not None:
        return support.rdf_id

    member = binding.id_member
    if member is None:
        uri = URIRef(DEFAULT_NAMESPACE + new_id())
    else:
        value = getattr(obj, member.name, None)
        if value is None:
            raise InvalidMappingError(f"id member '{member.name}' of {type(obj).__name__} must have a value")
        namespace = member.id_namespace or DEFAULT_NAMESPACE
        text = str(value)
        uri = URIRef(text) if is_uri(text) and " " not in text else URIRef(namespace + url_encode(text))

    bind_id(support, uri)
    return uri


class ConstructionRegistry:
    """
    Instances currently under construction, keyed by resource identifier.

    An entry exists only while its resource is being materialized; a second
    request for the same identifier in that window gets the registered
    instance instead of starting another construction.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._instances: Dict[ResourceId, Any] = {}

    def get(self, key: ResourceId) -> Optional[Any]:
        with self._lock:
            return self._instances.get(key)

    def __contains__(self, key: ResourceId) -> bool:
        with self._lock:
            return key in self._instances

    def __len__(self) -> int:
        return len(self._instances)

    def replace(self, key: ResourceId, obj: Any) -> None:
        with self._lock:
            if key in self._instances:
                self._instances[key] = obj

    @contextmanager
    def constructing(self, key: ResourceId, obj: Any) -> Iterator[None]:
        with self._lock:
            self._instances[key] = obj
        try:
            yield
        finally:
            with self._lock:
                self._instances.pop(key, None)

from __future__ import annotations

import logging
import threading
from typing import Dict, Set

from rdflib import URIRef
from rdflib.namespace import RDF, RDFS, XSD, OWL

logger = logging.getLogger(__name__)

DEFAULT_PREFIXES = {
    "rdf": str(RDF),
    "rdfs": str(RDFS),
    "xsd": str(XSD),
    "owl": str(OWL),
}


class NamespaceRegistry:
    """
    Prefix to namespace table used to expand qualified names such as
    ``foaf:name`` found in type declarations.

    A prefix registered twice keeps the last namespace. This mirrors how
    declarations on unrelated types interact and is logged, not prevented.
    """

    def __init__(self, prefixes: Dict[str, str] | None = None):
        self._lock = threading.RLock()
        self._prefixes: Dict[str, str] = dict(DEFAULT_PREFIXES)
        self._registered_types: Set[type] = set()
        for prefix, uri in (prefixes or {}).items():
            self.register(prefix, uri)

    def register(self, prefix: str, uri: str) -> None:
        with self._lock:
            current = self._prefixes.get(prefix)
            if current is not None and current != uri:
                logger.warning("Namespace prefix '%s' rebound from %s to %s", prefix, current, uri)
            self._prefixes[prefix] = uri

    def register_once(self, cls: type) -> None:
        """Register the namespace declarations of a type, at most once per type."""
        if cls is None:
            return
        with self._lock:
            if cls in self._registered_types:
                return
            self._registered_types.add(cls)
            for prefix, uri in getattr(cls, "__kgmap_namespaces__", ()):
                self.register(prefix, uri)

    def is_registered(self, cls: type) -> bool:
        return cls in self._registered_types

    def namespace(self, prefix: str) -> str | None:
        return self._prefixes.get(prefix)

    def prefixes(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._prefixes)

    def expand(self, name: str) -> URIRef:
        """Expand a qname with a known prefix; anything else is taken as a full IRI."""
        if isinstance(name, URIRef):
            return name
        prefix, sep, local = str(name).partition(":")
        if sep and not local.startswith("//"):
            uri = self._prefixes.get(prefix)
            if uri is not None:
                return URIRef(uri + local)
        return URIRef(name)

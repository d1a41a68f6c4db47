# kgmap/common/types.py
from __future__ import annotations
import hashlib
from typing import Union
from urllib.parse import quote
from uuid import uuid4
from rdflib import URIRef, BNode

ResourceId = Union[URIRef, BNode]
"""
The identifier of a resource in the graph, named or anonymous.
"""

DEFAULT_NAMESPACE = "urn:kgmap:"

_SCHEMES = ("http://", "https://", "urn:", "file:", "mailto:", "tag:")


def is_uri(id: str) -> bool:
    return isinstance(id, URIRef) or str(id).startswith(_SCHEMES)


def new_id() -> str:
    return hashlib.md5(uuid4().hex.encode("utf-8")).hexdigest()


def url_encode(value: str) -> str:
    return quote(value, safe="")


def as_resource(key) -> ResourceId:
    """Coerce a key (URIRef, BNode, or string) into a resource identifier."""
    if isinstance(key, (URIRef, BNode)):
        return key
    if key is None:
        raise ValueError("A resource identifier cannot be None")
    text = str(key)
    if text.startswith("_:"):
        return BNode(text[2:])
    return URIRef(text)

# kgmap/tests/models.py
"""Mapped record types shared by the tests."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, ClassVar, Optional

from rdflib import URIRef

from kgmap import (
    SupportsRdfId, entity, namespaces, rdf_field, rdf_id_field, rdf_property, rdfs_class, transient_field,
)

EX = "http://example.org/ns#"
FOAF = "http://xmlns.com/foaf/0.1/"


@namespaces(foaf=FOAF, ex=EX)
@rdfs_class("foaf:Person")
@dataclass
class Person(SupportsRdfId):
    name: Optional[str] = rdf_field("foaf:name", default=None)
    age: Optional[int] = rdf_field("foaf:age", default=None)
    knows: list[Person] = rdf_field("foaf:knows", default_factory=list)
    homepage: Optional[URIRef] = rdf_field("foaf:homepage", default=None)
    nickname: Optional[str] = None
    cache: dict = transient_field(default_factory=dict)
    kind_label: ClassVar[str] = "person"


@rdfs_class("ex:Employee")
@dataclass
class Employee(Person):
    employer: Optional[str] = rdf_field("ex:employer", default=None)


@namespaces("ex", EX)
@rdfs_class("ex:Book")
@entity
@dataclass
class Book(SupportsRdfId):
    isbn: Optional[str] = rdf_id_field(namespace="urn:isbn:", default=None)
    title: Optional[str] = rdf_field("ex:title", default=None, language="en")
    local_title: Optional[str] = rdf_field("ex:localTitle", default=None, language="de")
    chapters: list[str] = rdf_field("ex:chapter", is_list=True, default_factory=list)
    tags: set[str] = rdf_field("ex:tag", default_factory=set)
    authors: list[Person] = rdf_field("ex:author", is_list=True, default_factory=list)
    editor: Optional[Person] = rdf_field("ex:editor", default=None, lazy=True)
    published: Optional[date] = rdf_field("ex:published", default=None)
    updated: Optional[datetime] = rdf_field("ex:updated", default=None)
    price: Optional[float] = rdf_field("ex:price", default=None)
    pages: Optional[int] = rdf_field("ex:pages", default=None)
    in_print: Optional[bool] = rdf_field("ex:inPrint", default=None)
    source: Optional[URIRef] = rdf_field("ex:source", default=None, xsd_uri=True)


@namespaces(ex=EX)
@rdfs_class("ex:Measurement")
@dataclass(frozen=True)
class Measurement(SupportsRdfId):
    value: Optional[float] = rdf_field("ex:value", default=None)
    unit: Optional[str] = rdf_field("ex:unit", default=None)


@namespaces(ex=EX)
@rdfs_class("ex:Document")
class Document(SupportsRdfId, ABC):
    @property
    @abstractmethod
    @rdf_property("ex:title")
    def title(self) -> str:
        ...

    @property
    @abstractmethod
    @rdf_property("ex:pageCount")
    def page_count(self) -> int:
        ...


class Unmapped:
    pass


@namespaces(ex=EX)
@rdfs_class("ex:Holder")
@dataclass
class Holder(SupportsRdfId):
    thing: Optional[Unmapped] = rdf_field("ex:thing", default=None)
    anything: Any = rdf_field("ex:anything", default=None)


@namespaces(ex=EX)
@rdfs_class("ex:Required")
@dataclass
class Required(SupportsRdfId):
    name: str = rdf_field("ex:name")


@rdfs_class("http://example.org/ns#Plain")
class NotIdentified:
    pass


@dataclass
class NoClass(SupportsRdfId):
    name: Optional[str] = None

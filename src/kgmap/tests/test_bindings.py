# kgmap/tests/test_bindings.py
import pytest
from rdflib import URIRef

from kgmap import Mapper, MappingOptions, NativeKind
from kgmap.errors import InvalidMappingError
from kgmap.tests.models import EX, FOAF, Book, Document, Employee, NoClass, NotIdentified, Person


def test_person_bindings():
    binding = Mapper().resolve_bindings(Person)
    assert binding.class_iri == URIRef(FOAF + "Person")

    by_name = {m.name: m for m in binding.members}
    assert by_name["name"].predicate == URIRef(FOAF + "name")
    assert by_name["name"].kind is NativeKind.STRING
    assert by_name["age"].kind is NativeKind.INT
    assert by_name["knows"].collection_type is list
    assert by_name["knows"].python_type is Person
    assert by_name["knows"].kind is NativeKind.RESOURCE
    assert by_name["homepage"].kind is NativeKind.URI
    # inferred under the namespace of the class IRI
    assert by_name["nickname"].predicate == URIRef(FOAF + "nickname")
    assert by_name["cache"].transient
    assert "kind_label" not in by_name

    assert binding.member_for(URIRef(FOAF + "knows")) is by_name["knows"]
    assert binding.member_for(URIRef(EX + "unknown")) is None


def test_inference_disabled():
    binding = Mapper(MappingOptions(infer_bindings=False)).resolve_bindings(Person)
    mapped = {m.name for m in binding.mapped_members()}
    assert mapped == {"name", "age", "knows", "homepage"}


def test_subclass_inherits_members():
    binding = Mapper().resolve_bindings(Employee)
    names = {m.name for m in binding.mapped_members()}
    assert {"name", "knows", "employer"} <= names
    assert binding.class_iri == URIRef(EX + "Employee")


def test_book_flags():
    binding = Mapper().resolve_bindings(Book)
    by_name = {m.name: m for m in binding.members}
    assert binding.id_member is by_name["isbn"]
    assert by_name["chapters"].is_list
    assert by_name["tags"].collection_type is set
    assert by_name["editor"].lazy
    assert by_name["source"].xsd_uri
    assert by_name["title"].language == "en"


def test_property_bindings():
    binding = Mapper().resolve_bindings(Document)
    by_name = {m.name: m for m in binding.members}
    assert by_name["title"].accessor
    assert by_name["title"].predicate == URIRef(EX + "title")
    assert by_name["page_count"].kind is NativeKind.INT


def test_bindings_are_cached():
    mapper = Mapper()
    assert mapper.resolve_bindings(Person) is mapper.resolve_bindings(Person)


def test_missing_capabilities():
    mapper = Mapper()
    with pytest.raises(InvalidMappingError):
        mapper.resolve_bindings(NoClass)
    with pytest.raises(InvalidMappingError):
        mapper.resolve_bindings(NotIdentified)


def test_entity_enforcement():
    mapper = Mapper(MappingOptions(enforce_entity_annotation=True))
    mapper.resolve_bindings(Book)
    with pytest.raises(InvalidMappingError):
        mapper.resolve_bindings(Person)

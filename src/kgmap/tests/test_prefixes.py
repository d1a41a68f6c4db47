# kgmap/tests/test_prefixes.py
import logging

from rdflib import URIRef

from kgmap import Mapper, MappingOptions
from kgmap.prefixes import NamespaceRegistry
from kgmap.tests.models import EX, FOAF, Person


def test_defaults_and_expand():
    ns = NamespaceRegistry()
    assert ns.expand("rdf:type") == URIRef("http://www.w3.org/1999/02/22-rdf-syntax-ns#type")
    assert ns.expand("xsd:int") == URIRef("http://www.w3.org/2001/XMLSchema#int")
    # unknown prefixes and full IRIs are kept as they are
    assert ns.expand("foo:bar") == URIRef("foo:bar")
    assert ns.expand("http://example.org/x") == URIRef("http://example.org/x")


def test_last_write_wins(caplog):
    ns = NamespaceRegistry()
    ns.register("ex", "http://one.example.org/")
    with caplog.at_level(logging.WARNING, logger="kgmap.prefixes"):
        ns.register("ex", "http://two.example.org/")
    assert ns.namespace("ex") == "http://two.example.org/"
    assert "rebound" in caplog.text


def test_register_once():
    ns = NamespaceRegistry()
    ns.register_once(Person)
    assert ns.is_registered(Person)
    assert ns.namespace("foaf") == FOAF
    assert ns.namespace("ex") == EX
    ns.register("foaf", "http://other.example.org/")
    ns.register_once(Person)
    assert ns.namespace("foaf") == "http://other.example.org/"


def test_mapper_registers_configured_namespaces():
    mapper = Mapper(MappingOptions(namespaces={"dc": "http://purl.org/dc/terms/"}))
    assert mapper.ns.expand("dc:title") == URIRef("http://purl.org/dc/terms/title")
    assert "dc" in mapper.ns.prefixes()


def test_namespaces_decorator_is_exported():
    import kgmap
    from kgmap.model import annotations

    assert kgmap.namespaces is annotations.namespaces
    assert callable(kgmap.namespaces)

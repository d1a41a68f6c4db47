# kgmap/tests/test_sources.py
import os
import tempfile

import pytest
from rdflib import BNode, Graph, Literal, RDF, URIRef

from kgmap import Mapper
from kgmap.source import (
    Dialect, RDFFileSource, RDFLibSource, create_source, get_available_sources, get_type, get_value,
)
from kgmap.tests.models import FOAF, Book, Person

ALICE = URIRef("http://example.org/people/alice")


def test_describe_includes_blank_node_closure():
    g = Graph()
    address = BNode()
    g.add((ALICE, URIRef(FOAF + "name"), Literal("Alice")))
    g.add((ALICE, URIRef(FOAF + "based_near"), address))
    g.add((address, URIRef(FOAF + "name"), Literal("Leipzig")))
    g.add((URIRef("http://example.org/other"), URIRef(FOAF + "name"), Literal("Other")))

    source = RDFLibSource(g)
    described = source.describe(ALICE)
    assert len(described) == 3
    assert len(source.describe(URIRef("http://example.org/nobody"))) == 0
    assert get_value(source, ALICE, URIRef(FOAF + "name")) == Literal("Alice")
    assert get_type(source, ALICE) is None


def test_select_and_construct():
    g = Graph()
    g.add((ALICE, RDF.type, URIRef(FOAF + "Person")))
    source = RDFLibSource(g)
    rows = source.select("SELECT ?s WHERE { ?s a <http://xmlns.com/foaf/0.1/Person> }")
    assert rows == [{"s": ALICE}]
    constructed = source.graph_query("CONSTRUCT { ?s ?p ?o } WHERE { ?s ?p ?o }")
    assert len(constructed) == 1
    assert get_type(source, ALICE) == URIRef(FOAF + "Person")


def test_file_source_persistence():
    """Records written through a file source can be read back after reopening it."""
    with tempfile.TemporaryDirectory() as temp_dir:
        file_path = os.path.join(temp_dir, "people.ttl")
        mapper = Mapper()
        alice = Person(name="Alice", age=36)

        source = RDFFileSource(file_path)
        assert source.format == "turtle"
        source.add(mapper.to_graph(alice))
        assert os.path.exists(file_path)

        reopened = RDFFileSource(file_path)
        assert len(reopened) == len(source)
        copy = mapper.from_graph(Person, alice.rdf_id, reopened)
        assert copy.name == "Alice"
        assert copy.age == 36

        print("✓ RDF file source test passed")


def test_file_source_ordered_list(tmp_path):
    mapper = Mapper()
    book = Book(isbn="42", chapters=["one", "two", "three"])
    path = tmp_path / "books.nt"
    RDFFileSource(path).add(mapper.to_graph(book))

    copy = mapper.from_graph(Book, book.rdf_id, RDFFileSource(path))
    assert copy.chapters == ["one", "two", "three"]


def test_unreadable_file_starts_empty(tmp_path):
    path = tmp_path / "broken.ttl"
    path.write_text("this is not turtle <<<")
    assert len(RDFFileSource(path)) == 0


def test_factory():
    assert {"memory", "file", "sparql"} <= set(get_available_sources())
    assert isinstance(create_source("memory"), RDFLibSource)
    with pytest.raises(ValueError):
        create_source("nosuch")


def test_dialect_terms():
    node = BNode("b0")
    assert Dialect.ARQ.as_query_string(node) == "<_:b0>"
    assert Dialect.SPARQL.as_query_string(node) == "_:b0"
    assert Dialect.SPARQL.as_query_string(ALICE) == f"<{ALICE}>"
    assert Dialect.ARQ.supports_stable_bnode_ids
    assert not Dialect.SPARQL.supports_stable_bnode_ids
    assert RDFLibSource().get_query_dialect() is Dialect.ARQ


def test_dialect_queries():
    assert Dialect.SPARQL.describe_query(ALICE) == f"DESCRIBE <{ALICE}>"
    assert Dialect.SPARQL.describe_query(BNode("b0")).startswith("CONSTRUCT { _:b0 ?p ?o }")
    assert Dialect.SERQL.describe_query(ALICE).startswith("construct * from")

    query = Dialect.SPARQL.list_query(ALICE, URIRef(FOAF + "knows"))
    assert query.startswith(f"CONSTRUCT {{ <{ALICE}> <{FOAF}knows> ?o")
    assert "rdf-syntax-ns#rest>+" in query


def test_list_query_runs_on_rdflib():
    mapper = Mapper()
    book = Book(isbn="7", chapters=["a", "b"])
    source = RDFLibSource(mapper.to_graph(book))
    query = Dialect.SPARQL.list_query(book.rdf_id, URIRef("http://example.org/ns#chapter"))
    fetched = source.graph_query(query)
    assert len(fetched) == len(source) - 2


class _FakeResponse:
    def __init__(self, status_code, text="", payload=None):
        self.status_code = status_code
        self.text = text
        self._payload = payload or {}

    def json(self):
        return self._payload


def test_sparql_source_with_digest_auth(monkeypatch):
    from kgmap.errors import GraphSourceError
    from kgmap.source.sparql import SparqlEndpointSource

    calls = []

    def fake_get(url, params=None, headers=None, auth=None, timeout=None):
        calls.append((url, params["query"], headers["Accept"]))
        if headers["Accept"] == "text/turtle":
            return _FakeResponse(200, f'<{ALICE}> <{FOAF}name> "Alice" .')
        return _FakeResponse(200, payload={"results": {"bindings": [
            {"s": {"type": "uri", "value": str(ALICE)},
             "n": {"type": "literal", "value": "Alice", "xml:lang": "en"}},
        ]}})

    monkeypatch.setattr("kgmap.source.sparql.requests.get", fake_get)
    source = create_source("sparql", endpoint="http://localhost/sparql", username="u", password="p")
    assert isinstance(source, SparqlEndpointSource)

    described = source.describe(ALICE)
    assert (ALICE, URIRef(FOAF + "name"), Literal("Alice")) in described
    assert calls[0][1] == f"DESCRIBE <{ALICE}>"

    rows = source.select("SELECT ?s ?n WHERE { ?s ?p ?n }")
    assert rows == [{"s": ALICE, "n": Literal("Alice", lang="en")}]

    monkeypatch.setattr("kgmap.source.sparql.requests.get",
                        lambda *args, **kwargs: _FakeResponse(500, "boom"))
    with pytest.raises(GraphSourceError):
        source.describe(ALICE)


def test_sparql_source_skips_unaddressable_blank_nodes(monkeypatch):
    from kgmap.source.sparql import SparqlEndpointSource

    queries = []

    def fake_get(url, params=None, headers=None, auth=None, timeout=None):
        queries.append(params["query"])
        return _FakeResponse(200, f'<{ALICE}> <{FOAF}name> "Alice" .')

    monkeypatch.setattr("kgmap.source.sparql.requests.get", fake_get)
    source = SparqlEndpointSource("http://localhost/sparql", username="u", password="p")
    node = BNode("b0")
    assert len(source.describe(node)) == 0
    assert get_type(source, node) is None
    assert get_value(source, node, URIRef(FOAF + "name")) is None
    assert queries == []

    arq = SparqlEndpointSource("http://localhost/sparql", username="u", password="p", dialect="arq")
    arq.describe(node)
    assert queries == ["CONSTRUCT { <_:b0> ?p ?o } WHERE { <_:b0> ?p ?o }"]

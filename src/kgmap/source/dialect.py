from __future__ import annotations

from enum import Enum

from rdflib import BNode, Literal, URIRef
from rdflib.term import Node


class Dialect(Enum):
    """
    Query dialect of a graph source.

    SPARQL is the broadly compatible default. ARQ is SPARQL with stable
    blank node references (``<_:id>``), which makes blank nodes returned by
    one request addressable in the next. SERQL is the Sesame query language.
    """
    SPARQL = "sparql"
    ARQ = "arq"
    SERQL = "serql"

    @property
    def supports_stable_bnode_ids(self) -> bool:
        return self is Dialect.ARQ

    def as_query_string(self, term: Node) -> str:
        if isinstance(term, BNode):
            if self is Dialect.ARQ:
                return f"<_:{term}>"
            return f"_:{term}"
        if isinstance(term, URIRef):
            return f"<{term}>"
        if isinstance(term, Literal):
            return term.n3()
        return str(term)

    def describe_query(self, resource: Node) -> str:
        term = self.as_query_string(resource)
        if self is Dialect.SERQL:
            return f"construct * from {{{term}}} p {{o}}"
        if isinstance(resource, URIRef):
            return f"DESCRIBE {term}"
        return f"CONSTRUCT {{ {term} ?p ?o }} WHERE {{ {term} ?p ?o }}"

    def list_query(self, resource: Node, predicate: URIRef) -> str:
        """Construct query fetching the neighbourhood of the value(s) of ``predicate``."""
        term = self.as_query_string(resource)
        if self is Dialect.SERQL:
            return f"construct * from {{{term}}} <{predicate}> {{o}}, {{o}} po {{oo}}"
        rdf = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
        return (
            f"CONSTRUCT {{ {term} <{predicate}> ?o . ?o ?po ?oo . ?n ?pn ?on }}\n"
            "WHERE\n"
            f"{{ {term} <{predicate}> ?o .\n"
            "  ?o ?po ?oo .\n"
            f"  OPTIONAL {{ ?o <{rdf}rest>+ ?n . ?n ?pn ?on }} }}"
        )

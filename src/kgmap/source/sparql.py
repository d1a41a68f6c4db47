from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional
from rdflib import Graph, Literal, URIRef, BNode
from rdflib.term import Node
from SPARQLWrapper import SPARQLWrapper, JSON, TURTLE, POST, GET
from SPARQLWrapper.SPARQLExceptions import SPARQLWrapperException
import requests
from requests.auth import HTTPDigestAuth
from kgmap.common.types import ResourceId
from kgmap.errors import GraphSourceError
from kgmap.source.base import GraphSource
from kgmap.source.dialect import Dialect

logger = logging.getLogger(__name__)


def _term(binding: Dict[str, Any]) -> Node:
    """Convert a SPARQL JSON result binding into an rdflib term."""
    kind = binding.get("type")
    value = binding.get("value", "")
    if kind == "uri":
        return URIRef(value)
    if kind == "bnode":
        return BNode(value)
    datatype = binding.get("datatype")
    return Literal(value, lang=binding.get("xml:lang"), datatype=URIRef(datatype) if datatype else None)


class SparqlEndpointSource(GraphSource):
    """Read-only graph source for a generic SPARQL endpoint."""

    def __init__(self, endpoint: str, username: str = None, password: str = None,
                 auth_type: str = "digest", use_get: bool = True,
                 dialect: Dialect | str = Dialect.SPARQL, timeout: Optional[int] = None,
                 verify: bool = False):
        self.endpoint = endpoint
        self.use_get = use_get
        self.query_dialect = Dialect(dialect)
        self.timeout = timeout
        self.sparql = SPARQLWrapper(endpoint)
        if timeout:
            self.sparql.setTimeout(timeout)

        # Store authentication credentials for use with requests
        self.username = username
        self.password = password
        self.auth_type = auth_type.lower() if auth_type else None

        if username and password and self.auth_type == "basic":
            self.sparql.setCredentials(username, password)
        # for digest auth, we'll use requests directly instead of SPARQLWrapper

        if verify:
            self._execute_select("SELECT * { ?s ?p ?o } LIMIT 1")

    @property
    def _use_requests(self) -> bool:
        return self.auth_type == "digest" and bool(self.username) and bool(self.password)

    def _request(self, query: str, accept: str) -> requests.Response:
        auth = HTTPDigestAuth(self.username, self.password)
        headers = {"Accept": accept}
        if self.use_get:
            response = requests.get(self.endpoint, params={"query": query}, headers=headers,
                                    auth=auth, timeout=self.timeout)
        else:
            response = requests.post(self.endpoint, data={"query": query}, headers=headers,
                                     auth=auth, timeout=self.timeout)
        if response.status_code != 200:
            raise GraphSourceError(
                f"Error evaluating query: {query}\n({response.status_code}) {response.text}")
        return response

    def _wrapper_query(self, query: str, return_format: str):
        self.sparql.setQuery(query)
        self.sparql.setMethod(GET if self.use_get else POST)
        self.sparql.setReturnFormat(return_format)
        try:
            return self.sparql.query().convert()
        except (SPARQLWrapperException, OSError) as e:
            raise GraphSourceError(f"Error evaluating query: {query}\n{e}") from e

    def _execute_graph(self, query: str) -> Graph:
        """Execute a CONSTRUCT or DESCRIBE query and parse the turtle response."""
        if self._use_requests:
            data = self._request(query, "text/turtle").text
        else:
            data = self._wrapper_query(query, TURTLE)
        if isinstance(data, Graph):
            return data
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        graph = Graph()
        if data and data.strip():
            try:
                graph.parse(data=data, format="turtle")
            except Exception as e:
                raise GraphSourceError(f"Error while parsing turtle query results: {e}") from e
        return graph

    def _execute_select(self, query: str) -> List[dict]:
        """Execute a SPARQL SELECT query and return the JSON bindings."""
        if self._use_requests:
            json_result = self._request(query, "application/sparql-results+json").json()
        else:
            json_result = self._wrapper_query(query, JSON)
        return json_result.get("results", {}).get("bindings", [])

    def describe(self, resource: ResourceId) -> Graph:
        if isinstance(resource, BNode) and not self.query_dialect.supports_stable_bnode_ids:
            # a blank node in a query pattern matches any subject
            logger.debug("Blank node %s is not addressable with %s", resource, self.query_dialect.name)
            return Graph()
        return self._execute_graph(self.query_dialect.describe_query(resource))

    def graph_query(self, query: str) -> Graph:
        return self._execute_graph(query)

    def select(self, query: str) -> List[Dict[str, Any]]:
        return [{name: _term(b) for name, b in row.items()} for row in self._execute_select(query)]

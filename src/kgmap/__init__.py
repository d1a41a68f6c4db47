"""
kgmap maps annotated Python records to RDF graphs and back.
"""
from kgmap.config import MappingOptions, ConfigLoader, load_options
from kgmap.errors import (
    MappingError,
    InvalidMappingError,
    AmbiguousValueError,
    UnsupportedLiteralError,
    UnknownTypeError,
    GraphSourceError,
)
from kgmap.literals import NativeKind
from kgmap.model.annotations import (
    SupportsRdfId,
    rdfs_class,
    namespaces,
    entity,
    rdf_field,
    rdf_id_field,
    transient_field,
    rdf_property,
)
from kgmap.proxy import LazyReference
from kgmap.source import GraphSource, RDFLibSource, RDFFileSource, Dialect, create_source
from kgmap.mapper import Mapper

__all__ = [
    "Mapper",
    "MappingOptions",
    "ConfigLoader",
    "load_options",
    "MappingError",
    "InvalidMappingError",
    "AmbiguousValueError",
    "UnsupportedLiteralError",
    "UnknownTypeError",
    "GraphSourceError",
    "NativeKind",
    "SupportsRdfId",
    "rdfs_class",
    "namespaces",
    "entity",
    "rdf_field",
    "rdf_id_field",
    "transient_field",
    "rdf_property",
    "LazyReference",
    "GraphSource",
    "RDFLibSource",
    "RDFFileSource",
    "Dialect",
    "create_source",
]

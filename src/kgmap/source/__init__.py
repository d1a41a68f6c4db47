# kgmap/source/__init__.py
from .base import GraphSource, get_value, get_type
from .dialect import Dialect
from .factory import create_source, register_source, get_available_sources, SourceFactory
from .memory import RDFLibSource
from .file import RDFFileSource

__all__ = [
    "GraphSource",
    "get_value",
    "get_type",
    "Dialect",
    "create_source",
    "register_source",
    "get_available_sources",
    "SourceFactory",
    "RDFLibSource",
    "RDFFileSource",
]

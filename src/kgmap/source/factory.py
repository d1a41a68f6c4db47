# kgmap/source/factory.py
from __future__ import annotations
from typing import Dict, Any
import importlib
from kgmap.source.base import GraphSource


class SourceFactory:
    """Factory for creating graph sources by name."""

    def __init__(self):
        self._sources: Dict[str, Dict[str, Any]] = {
            "memory": {
                "module": "kgmap.source.memory",
                "class": "RDFLibSource",
            },
            "file": {
                "module": "kgmap.source.file",
                "class": "RDFFileSource",
            },
            "sparql": {
                "module": "kgmap.source.sparql",
                "class": "SparqlEndpointSource",
            },
        }

    def register_source(self, name: str, module: str, class_name: str):
        """Register a new source type."""
        self._sources[name] = {
            "module": module,
            "class": class_name,
        }

    def get_available_sources(self) -> list[str]:
        """Get list of available source names."""
        return list(self._sources.keys())

    def create_source(self, source_name: str, **kwargs) -> GraphSource:
        """Create a source instance by name."""
        if source_name not in self._sources:
            available = ", ".join(self.get_available_sources())
            raise ValueError(f"Unknown source: {source_name}. Available sources: {available}")

        source_info = self._sources[source_name]

        try:
            module = importlib.import_module(source_info["module"])
        except ImportError as e:
            raise ImportError(f"Could not import {source_info['module']}.{source_info['class']}. "
                              f"Original error: {e}") from e
        try:
            source_class = getattr(module, source_info["class"])
        except AttributeError as e:
            raise AttributeError(f"Class {source_info['class']} not found in module "
                                 f"{source_info['module']}. Original error: {e}") from e

        return source_class(**kwargs)


# Global factory instance
_factory = SourceFactory()


def create_source(source_name: str, **kwargs) -> GraphSource:
    """Convenience function to create a source using the global factory."""
    return _factory.create_source(source_name, **kwargs)


def register_source(name: str, module: str, class_name: str):
    """Convenience function to register a source with the global factory."""
    _factory.register_source(name, module, class_name)


def get_available_sources() -> list[str]:
    """Convenience function to get available sources from the global factory."""
    return _factory.get_available_sources()

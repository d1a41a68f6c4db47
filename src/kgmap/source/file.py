from __future__ import annotations
import logging
from pathlib import Path
from rdflib import Graph
from rdflib.util import guess_format
from kgmap.source.memory import RDFLibSource

logger = logging.getLogger(__name__)


class RDFFileSource(RDFLibSource):
    """RDF graph source with file persistence capabilities."""

    def __init__(self, file_path: str | Path, format: str | None = None):
        super().__init__()
        self.file_path = Path(file_path)
        self.format = format or guess_format(str(self.file_path)) or "turtle"
        self._load_from_file()

    def _load_from_file(self) -> None:
        """Load existing RDF data from file if it exists."""
        if self.file_path.exists():
            try:
                self.g.parse(str(self.file_path), format=self.format)
            except Exception as e:
                # If parsing fails, start with empty graph
                logger.warning("Could not load RDF file %s: %s", self.file_path, e)
                self.g = Graph()

    def save_to_file(self, file_path: str | Path | None = None,
                     format: str | None = None) -> None:
        """Save the current graph to file."""
        target_path = Path(file_path) if file_path else self.file_path
        target_format = format or self.format

        # Ensure directory exists
        target_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            self.g.serialize(destination=str(target_path), format=target_format)
        except Exception as e:
            raise RuntimeError(f"Failed to save RDF to {target_path}: {e}") from e

    def add(self, graph) -> "RDFFileSource":
        """Add triples and auto-save to file."""
        super().add(graph)
        self.save_to_file()
        return self

"""
Exceptions raised by the marshalling engine.

Only the member-assignment step of the materializer decides whether a
low-level failure is fatal or merely logged; everything else propagates.
"""


class MappingError(Exception):
    """Base class of every kgmap error."""


class InvalidMappingError(MappingError):
    """A type or instance lacks a required mapping capability, or a value
    could not be assigned to its member."""


class AmbiguousValueError(InvalidMappingError):
    """More than one acceptable value remains for a single-valued member."""


class UnsupportedLiteralError(MappingError):
    """A literal cannot be decoded to any usable native value."""


class UnknownTypeError(MappingError):
    """An asserted rdf:type has no registered Python type."""


class GraphSourceError(MappingError):
    """A graph source could not answer a request."""

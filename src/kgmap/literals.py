"""
Conversion between native Python scalars and typed RDF literals.

The datatype tables below are fixed: a native value selects exactly one
datatype when encoded, and a datatype selects the parse path when decoded.
Several datatypes may decode to the same native kind.
"""
from __future__ import annotations

import logging
from datetime import datetime, date, time
from enum import Enum
from typing import Any, Callable, Dict, Optional

from rdflib import Literal, URIRef
from rdflib.namespace import RDF, RDFS, XSD

from kgmap.errors import UnsupportedLiteralError

logger = logging.getLogger(__name__)

INT_MIN, INT_MAX = -(2 ** 31), 2 ** 31 - 1


class NativeKind(Enum):
    BOOLEAN = "boolean"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    CHAR = "char"
    STRING = "string"
    DATETIME = "datetime"
    DATE = "date"
    TIME = "time"
    URI = "uri"
    RESOURCE = "resource"
    ANY = "any"

    @property
    def accepts_strings(self) -> bool:
        return self in (NativeKind.STRING, NativeKind.CHAR, NativeKind.ANY)

    @property
    def is_literal(self) -> bool:
        return self not in (NativeKind.URI, NativeKind.RESOURCE, NativeKind.ANY)


STRING_TYPES = {None, XSD.string, RDFS.Literal, RDF.langString}
INTEGER_TYPES = {XSD.int, XSD.integer, XSD.positiveInteger, XSD.negativeInteger,
                 XSD.nonNegativeInteger, XSD.nonPositiveInteger, XSD.unsignedInt}
LONG_TYPES = {XSD.long, XSD.unsignedLong}
FLOAT_TYPES = {XSD.float, XSD.decimal}
SHORT_TYPES = {XSD.short, XSD.unsignedShort}
BYTE_TYPES = {XSD.byte, XSD.unsignedByte}

ENCODE_DATATYPES: Dict[NativeKind, URIRef] = {
    NativeKind.BOOLEAN: XSD.boolean,
    NativeKind.BYTE: XSD.byte,
    NativeKind.SHORT: XSD.short,
    NativeKind.INT: XSD.int,
    NativeKind.LONG: XSD.long,
    NativeKind.FLOAT: XSD.float,
    NativeKind.DOUBLE: XSD.double,
    NativeKind.DATETIME: XSD.dateTime,
    NativeKind.DATE: XSD.date,
    NativeKind.TIME: XSD.time,
    NativeKind.URI: XSD.anyURI,
}

_INTEGER_KINDS = (NativeKind.BYTE, NativeKind.SHORT, NativeKind.INT, NativeKind.LONG)
_FLOAT_KINDS = (NativeKind.FLOAT, NativeKind.DOUBLE)


def kind_of_value(value: Any) -> Optional[NativeKind]:
    """Runtime kind of a scalar value, or None when it is not a scalar."""
    if isinstance(value, bool):
        return NativeKind.BOOLEAN
    if isinstance(value, int):
        return NativeKind.INT if INT_MIN <= value <= INT_MAX else NativeKind.LONG
    if isinstance(value, float):
        return NativeKind.DOUBLE
    if isinstance(value, URIRef):
        return NativeKind.URI
    if isinstance(value, str):
        return NativeKind.STRING
    if isinstance(value, datetime):
        return NativeKind.DATETIME
    if isinstance(value, date):
        return NativeKind.DATE
    if isinstance(value, time):
        return NativeKind.TIME
    return None


def kind_of_type(tp: Any) -> Optional[NativeKind]:
    """Kind declared by a Python annotation, or None for non-scalar types."""
    if tp is Any or tp is object or tp is None:
        return NativeKind.ANY
    if not isinstance(tp, type):
        return None
    if issubclass(tp, bool):
        return NativeKind.BOOLEAN
    if issubclass(tp, int):
        return NativeKind.INT
    if issubclass(tp, float):
        return NativeKind.DOUBLE
    if issubclass(tp, URIRef):
        return NativeKind.URI
    if issubclass(tp, str):
        return NativeKind.STRING
    if issubclass(tp, datetime):
        return NativeKind.DATETIME
    if issubclass(tp, date):
        return NativeKind.DATE
    if issubclass(tp, time):
        return NativeKind.TIME
    return None


def lexical_form(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def to_literal(value: Any, lang: Optional[str] = None, kind: Optional[NativeKind] = None) -> Literal:
    """Encode a native scalar as a literal.

    ``kind`` is the member's declared kind; it only narrows the choice among
    datatypes compatible with the runtime value (e.g. xsd:short for an int).
    """
    runtime = kind_of_value(value)
    if runtime is None:
        raise UnsupportedLiteralError(f"No literal datatype for value of type {type(value).__name__}")

    if runtime is NativeKind.STRING:
        if kind is NativeKind.CHAR or not lang:
            return Literal(value)
        return Literal(value, lang=lang)

    chosen = runtime
    if runtime in _INTEGER_KINDS and kind in _INTEGER_KINDS:
        # an explicit narrower width never hides an out-of-range value
        chosen = NativeKind.LONG if runtime is NativeKind.LONG else kind
    elif runtime is NativeKind.DOUBLE and kind in _FLOAT_KINDS:
        chosen = kind

    return Literal(lexical_form(value), datatype=ENCODE_DATATYPES[chosen])


def _parse_bool(label: str) -> bool:
    return label.strip().lower() in ("true", "1")


def _parse_datetime(label: str) -> datetime:
    text = label.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _parse_date(label: str) -> date:
    text = label.strip()
    return date.fromisoformat(text[:10])


def _parse_time(label: str) -> time:
    text = label.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return time.fromisoformat(text)


def _parse_uri(label: str) -> Optional[URIRef]:
    text = label.strip()
    if not text or any(c in text for c in ' <>"{}|\\^`'):
        logger.warning("Literal value is not a valid URI: %s", label)
        return None
    return URIRef(text)


def _decoder(datatype: Optional[URIRef]) -> Optional[Callable[[str], Any]]:
    if datatype in STRING_TYPES:
        return str
    if datatype == XSD.boolean:
        return _parse_bool
    if datatype in INTEGER_TYPES or datatype in LONG_TYPES \
            or datatype in SHORT_TYPES or datatype in BYTE_TYPES:
        return int
    if datatype == XSD.double or datatype in FLOAT_TYPES:
        return float
    if datatype == XSD.anyURI:
        return _parse_uri
    if datatype == XSD.dateTime:
        return _parse_datetime
    if datatype == XSD.date:
        return _parse_date
    if datatype == XSD.time:
        return _parse_time
    return None


def from_literal(literal: Literal, kind: NativeKind = NativeKind.ANY) -> Any:
    """Decode a literal for a member of the given kind.

    Unknown datatypes decode to the raw lexical form only when the member
    accepts strings, otherwise they raise UnsupportedLiteralError.
    """
    label = str(literal)
    datatype = literal.datatype if literal.language is None else None
    decode = _decoder(datatype)

    if decode is None:
        if kind.accepts_strings:
            return label
        raise UnsupportedLiteralError(f"Unsupported or unknown literal datatype {datatype} for {kind.value} value")

    try:
        return decode(label)
    except ValueError as e:
        raise UnsupportedLiteralError(f"Malformed {datatype} literal: {label!r}") from e

# kgmap/tests/test_literals.py
from datetime import date, datetime, time, timezone

import pytest
from rdflib import Literal, URIRef, XSD

from kgmap.errors import UnsupportedLiteralError
from kgmap.literals import NativeKind, from_literal, kind_of_type, kind_of_value, to_literal


def test_encode_scalars():
    assert to_literal(True) == Literal("true", datatype=XSD.boolean)
    assert to_literal(42) == Literal("42", datatype=XSD.int)
    assert to_literal(2 ** 40).datatype == XSD.long
    assert to_literal(1.5).datatype == XSD.double
    assert to_literal(date(2020, 1, 2)) == Literal("2020-01-02", datatype=XSD.date)
    assert to_literal(datetime(2020, 1, 2, 3, 4, 5)).datatype == XSD.dateTime
    assert to_literal(time(10, 30)).datatype == XSD.time
    assert to_literal(URIRef("http://example.org/x")).datatype == XSD.anyURI


def test_encode_strings():
    assert to_literal("hello") == Literal("hello")
    assert to_literal("hallo", lang="de") == Literal("hallo", lang="de")
    # characters never carry a language tag
    assert to_literal("x", lang="de", kind=NativeKind.CHAR) == Literal("x")


def test_declared_kind_narrows_width():
    assert to_literal(7, kind=NativeKind.SHORT).datatype == XSD.short
    assert to_literal(7, kind=NativeKind.BYTE).datatype == XSD.byte
    assert to_literal(2 ** 40, kind=NativeKind.SHORT).datatype == XSD.long
    assert to_literal(1.5, kind=NativeKind.FLOAT).datatype == XSD.float


def test_encode_unsupported():
    with pytest.raises(UnsupportedLiteralError):
        to_literal(object())


def test_decode_scalars():
    assert from_literal(Literal("true", datatype=XSD.boolean)) is True
    assert from_literal(Literal("0", datatype=XSD.boolean)) is False
    assert from_literal(Literal("12", datatype=XSD.integer)) == 12
    assert from_literal(Literal("12", datatype=XSD.unsignedShort)) == 12
    assert from_literal(Literal("2.5", datatype=XSD.decimal)) == 2.5
    assert from_literal(Literal("2020-01-02", datatype=XSD.date)) == date(2020, 1, 2)
    assert from_literal(Literal("10:30:00", datatype=XSD.time)) == time(10, 30)
    assert from_literal(Literal("plain")) == "plain"
    assert from_literal(Literal("tagged", lang="en")) == "tagged"


def test_decode_utc_datetime():
    value = from_literal(Literal("2020-01-02T03:04:05Z", datatype=XSD.dateTime))
    assert value == datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_decode_any_uri():
    assert from_literal(Literal("http://example.org/x", datatype=XSD.anyURI)) == URIRef("http://example.org/x")
    assert from_literal(Literal("not a uri", datatype=XSD.anyURI)) is None


def test_unknown_datatype_depends_on_target_kind():
    custom = Literal("abc", datatype=URIRef("http://example.org/custom"))
    assert from_literal(custom, NativeKind.STRING) == "abc"
    assert from_literal(custom, NativeKind.ANY) == "abc"
    with pytest.raises(UnsupportedLiteralError):
        from_literal(custom, NativeKind.INT)


def test_malformed_literal():
    with pytest.raises(UnsupportedLiteralError):
        from_literal(Literal("twelve", datatype=XSD.integer), NativeKind.INT)


def test_kinds():
    assert kind_of_value(True) is NativeKind.BOOLEAN
    assert kind_of_value(1) is NativeKind.INT
    assert kind_of_value(URIRef("urn:x")) is NativeKind.URI
    assert kind_of_value([]) is None
    assert kind_of_type(datetime) is NativeKind.DATETIME
    assert kind_of_type(date) is NativeKind.DATE
    assert kind_of_type(list) is None

"""Tests for the tagger output parser."""

import pytest

from postagger.errors import MalformedOutputError, TaggerProtocolError
from postagger.parser import is_delimiter, parse, parse_units, split_unit


def test_parse_pairs():
    """Units are split into surface and tag, in order."""
    assert parse("The/DT dog/NN runs/VBZ ./.") == [
        ("The", "DT"),
        ("dog", "NN"),
        ("runs", "VBZ"),
        (".", "."),
    ]


def test_parse_strips_delimiter():
    raw = "The/DT dog/NN\n<EOS>\n"
    assert parse(raw, delimiter="<EOS>") == [("The", "DT"), ("dog", "NN")]


def test_parse_strips_tagged_delimiter():
    """Taggers that tag the delimiter line emit it as DELIM/TAG."""
    assert parse("a/X <EOS>/SENT", delimiter="<EOS>") == [("a", "X")]


def test_split_on_first_separator():
    assert split_unit("and/or/CC") == ("and", "or/CC")


def test_slash_surface():
    assert split_unit("//SYM") == ("/", "SYM")


def test_unknown_tags_are_opaque():
    assert parse("word/Some-New_TAG+x") == [("word", "Some-New_TAG+x")]


@pytest.mark.parametrize("unit", ["broken", "word/", "/"])
def test_malformed_unit(unit):
    with pytest.raises(MalformedOutputError) as exc_info:
        split_unit(unit)
    assert exc_info.value.unit == unit


def test_malformed_is_protocol_error():
    with pytest.raises(TaggerProtocolError):
        parse("ok/X broken")


def test_parse_units_and_empty_output():
    assert parse_units(["a/X", "<EOS>"], "<EOS>") == [("a", "X")]
    assert parse("") == []


def test_is_delimiter():
    assert is_delimiter("<EOS>", "<EOS>")
    assert is_delimiter("<EOS>/SENT", "<EOS>")
    assert not is_delimiter("<EOS>x", "<EOS>")
    assert not is_delimiter("<EOS>", None)

from __future__ import annotations

import pytest

from posfmt.literals import parse_argument, parse_arguments


@pytest.mark.unit
@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("2", 2),
        ("-17", -17),
        ("+3", 3),
        ("2.5", 2.5),
        ("1e3", 1000.0),
        ("true", True),
        ("false", False),
        ('"quoted text"', "quoted text"),
        ('"2"', "2"),
        ('"say \\"hi\\""', 'say "hi"'),
        (" 4 ", 4),
    ],
)
def test_literal_forms(text, expected):
    value = parse_argument(text)
    assert value == expected
    assert type(value) is type(expected)


@pytest.mark.unit
def test_null_literal():
    assert parse_argument("null") is None


@pytest.mark.unit
@pytest.mark.parametrize("text", ["one", "", "truex", "1 2", "{0}", "abc def"])
def test_plain_text_passes_through(text):
    assert parse_argument(text) == text


@pytest.mark.unit
def test_typed_arguments_feed_the_formatter(format_from_text):
    assert format_from_text("{1}+{1} = {0}", "2", "one") == "one+one = 2"
    assert format_from_text("{0} {1}", "2.50", "true") == "2.5 True"


@pytest.mark.unit
def test_parse_arguments_keeps_order():
    assert parse_arguments(["1", "x", "false"]) == [1, "x", False]


@pytest.mark.unit
def test_integer_beyond_conversion_limit_stays_text():
    digits = "1" * 5000
    assert parse_argument(digits) == digits
    assert parse_argument("-" + digits) == "-" + digits


@pytest.mark.unit
def test_parse_arguments_only_reads_strings():
    marker = object()
    assert parse_arguments(["2", 2, None, marker]) == [2, 2, None, marker]

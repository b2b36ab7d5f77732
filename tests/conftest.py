"""
Pytest configuration and shared fixtures for jread tests.

Provides immutable test data fixtures covering documents the reader must
accept, documents it must reject, and expected value trees.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pytest


@dataclass(frozen=True)
class JsonTestCase:
    """
    Immutable container for JSON test case data.

    Holds test input and expected behavior for consistent test execution.
    """

    description: str
    input_data: str | bytes
    should_fail: bool = False
    expected_output: Any = None


def byte_feeder(data: bytes) -> Callable[[], int | None]:
    """Wraps ``data`` as a pull-based byte source yielding None when spent."""
    it = iter(data)
    return lambda: next(it, None)


@pytest.fixture
def json_fail_cases() -> list[JsonTestCase]:
    """
    Provides documents that must fail parsing.

    Adapted from the json.org JSON_checker failures to an object-rooted,
    unsigned-integer grammar, plus truncated and mistyped inputs.
    """
    fail_docs = [
        '"A JSON payload should be an object, not a string."',
        '["Unclosed array"',
        '["An array root is not accepted"]',
        '{unquoted_key: "keys must be quoted"}',
        '{"extra comma": [1,]}',
        '{"double extra comma": [1,,]}',
        '{"missing value": [   , 1]}',
        '{"Comma after the close": 1},',
        '{"Extra close": [1]]}',
        '{"Extra comma": true,}',
        '{"Extra value after close": true} "misplaced quoted value"',
        '{"Illegal expression": 1 + 2}',
        '{"Illegal invocation": alert()}',
        '{"Numbers cannot be negative": -1}',
        '{"Numbers cannot be hex": 0x14}',
        '{"Numbers cannot have fractions": 1.5}',
        '{"Missing colon" null}',
        '{"Double colon":: null}',
        '{"Comma instead of colon", null}',
        '{"Colon instead of comma": [1: 2]}',
        '{"Bad value": truth}',
        "{'single quote': 1}",
        '{"Comma instead if closing brace": true,',
        '{"mismatch": [1}',
        '{"Unterminated string}',
        "",
        "   ",
    ]

    return [
        JsonTestCase(
            description=f"fail{idx + 1}", input_data=doc, should_fail=True
        )
        for idx, doc in enumerate(fail_docs)
    ]


@pytest.fixture
def json_pass_cases() -> list[JsonTestCase]:
    """
    Provides documents that must parse successfully.

    Exercises nesting, keywords, raw string contents and free whitespace.
    """
    return [
        JsonTestCase(
            description="pass1 - complex nested structure",
            input_data="""{
    "JSON Test Pattern pass1": [
        {"object with 1 member":["array with 1 element"]},
        {},
        [],
        42,
        true,
        false,
        null
    ],
    "integer": 1234567890,
    "zero": 0,
    "one": 1,
    "space": " ",
    "quote": "\\"",
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
    "url": "https://www.JSON.org/",
    "comment": "// /* <!-- --",
    "# -- --> */": " ",
    " s p a c e d " :[1,2 , 3

,

4 , 5        ,          6           ,7        ],"compact":[1,2,3,4,5,6,7],
    "jsontext": "{\\"object with 1 member\\":[\\"array with 1 element\\"]}"
}""",
        ),
        JsonTestCase(
            description="pass2 - deep nesting",
            input_data='{"a":[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]}',
        ),
        JsonTestCase(
            description="pass3 - simple object",
            input_data='{"JSON Test Pattern pass3": {"The outermost value": "must be an object.", "In this test": "It is an object."}}',
        ),
        JsonTestCase(
            description="pass4 - utf-8 bytes",
            input_data='{"κλειδί": "値🎉"}'.encode(),
        ),
    ]


@pytest.fixture
def basic_json_values() -> list[JsonTestCase]:
    """
    Provides object-rooted documents with their plain Python rendition.

    Numbers come back as single-precision floats and strings keep their
    escape sequences verbatim.
    """
    return [
        JsonTestCase("empty object", "{}", False, {}),
        JsonTestCase("one number", '{"a":1}', False, {"a": 1.0}),
        JsonTestCase(
            "ordered array", '{"a":[1,2,3]}', False, {"a": [1.0, 2.0, 3.0]}
        ),
        JsonTestCase(
            "keywords",
            '{"a":true,"b":false,"c":null}',
            False,
            {"a": True, "b": False, "c": None},
        ),
        JsonTestCase("string", '{"key": "value"}', False, {"key": "value"}),
        JsonTestCase("empty string", '{"": ""}', False, {"": ""}),
        JsonTestCase("duplicate keys", '{"a":1,"a":2}', False, {"a": 2.0}),
        JsonTestCase("leading zeros", '{"n":007}', False, {"n": 7.0}),
        JsonTestCase("multi digit", '{"n":1234}', False, {"n": 1234.0}),
        JsonTestCase(
            "single precision", '{"n":16777217}', False, {"n": 16777216.0}
        ),
        JsonTestCase(
            "raw escaped quote", '{"s":"b\\"c"}', False, {"s": 'b\\"c'}
        ),
        JsonTestCase(
            "raw escape sequence", '{"s":"x\\ny"}', False, {"s": "x\\ny"}
        ),
        JsonTestCase(
            "nested",
            '{"a":{"b":{"c":[]}},"d":[{}]}',
            False,
            {"a": {"b": {"c": []}}, "d": [{}]},
        ),
        JsonTestCase(
            "unicode", '{"κλειδί":"値🎉"}', False, {"κλειδί": "値🎉"}
        ),
    ]

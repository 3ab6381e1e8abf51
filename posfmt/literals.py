"""
posfmt argument literals - typed values for command-line and API arguments

Accepted literal forms: signed numbers, true, false, null and double-quoted
strings. Anything else is taken as plain text.
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, List

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedInput

_INTEGER = re.compile(r"[+-]?\d+")

grammar = r"""
    ?start: value

    ?value: SIGNED_NUMBER -> number
          | "true" -> true
          | "false" -> false
          | "null" -> null
          | ESCAPED_STRING -> string

    %import common.SIGNED_NUMBER
    %import common.ESCAPED_STRING
    %import common.WS
    %ignore WS
"""


class LiteralTransformer(Transformer):
    """Transform literal parse trees into Python values"""

    @v_args(inline=True)
    def number(self, token):
        text = str(token)
        if _INTEGER.fullmatch(text):
            try:
                return int(text)
            except ValueError:
                # beyond the interpreter's int conversion digit limit
                return text
        return float(text)

    def true(self, _children):
        return True

    def false(self, _children):
        return False

    def null(self, _children):
        return None

    @v_args(inline=True)
    def string(self, token):
        try:
            return json.loads(token)
        except ValueError:
            # lark accepts escapes JSON does not, e.g. "\q"
            return str(token)[1:-1]


parser = Lark(
    grammar,
    start="start",
    parser="lalr",
    transformer=LiteralTransformer(),
)


def parse_argument(text: str) -> Any:
    """
    Read one argument as a typed literal

    Args:
        text: Raw argument text

    Returns:
        int, float, bool, None or str for literal input; `text` itself otherwise
    """
    try:
        return parser.parse(text)
    except UnexpectedInput:
        return text


def parse_arguments(values: Iterable[Any]) -> List[Any]:
    """Read every string in `values` as a literal; other values pass through."""
    return [parse_argument(value) if isinstance(value, str) else value for value in values]

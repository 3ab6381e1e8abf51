"""posfmt - positional {n} template formatting"""

from posfmt.errors import (
    ArgumentIndexOutOfRange,
    FormatDiagnostic,
    FormatError,
    MalformedPlaceholder,
    UnmatchedClosingBrace,
)
from posfmt.formatter import Renderable, format_string, format_template, render_segments
from posfmt.parser import Literal, ParsedTemplate, Placeholder, escape, iter_segments, parse_template
from posfmt.version import __version__

__all__ = [
    "ArgumentIndexOutOfRange",
    "FormatDiagnostic",
    "FormatError",
    "Literal",
    "MalformedPlaceholder",
    "ParsedTemplate",
    "Placeholder",
    "Renderable",
    "UnmatchedClosingBrace",
    "__version__",
    "escape",
    "format_string",
    "format_template",
    "iter_segments",
    "parse_template",
    "render_segments",
]

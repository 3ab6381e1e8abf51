"""
posfmt Parser module - positional placeholder templates

Grammar (brace doubling is the only escape):

    template    := (text | "{{" | "}}" | placeholder)*
    placeholder := "{" digit+ "}"
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Callable, Iterator, Optional, Sequence, Tuple, Union

from posfmt.config import resolve_max_argument_index
from posfmt.errors import MalformedPlaceholder, UnmatchedClosingBrace

if TYPE_CHECKING:
    from posfmt.formatter import Renderable

logger = logging.getLogger("posfmt.parser")

_DIGITS = frozenset("0123456789")


@dataclass(frozen=True)
class Literal:
    """Verbatim text with escaped braces already collapsed"""

    text: str

    def __str__(self) -> str:
        return self.text

    def to_syntax(self) -> str:
        return escape(self.text)


@dataclass(frozen=True)
class Placeholder:
    """Reference to a positional argument"""

    index: int
    position: Optional[int] = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.to_syntax()

    def to_syntax(self) -> str:
        return f"{{{self.index}}}"


Segment = Union[Literal, Placeholder]


@dataclass(frozen=True)
class ParsedTemplate:
    """A fully validated template, reusable across argument lists"""

    segments: Tuple[Segment, ...]

    @property
    def placeholders(self) -> Tuple[Placeholder, ...]:
        return tuple(seg for seg in self.segments if isinstance(seg, Placeholder))

    @property
    def referenced_indices(self) -> Tuple[int, ...]:
        """Distinct argument indices in first-occurrence order"""
        seen: dict[int, None] = {}
        for placeholder in self.placeholders:
            seen.setdefault(placeholder.index, None)
        return tuple(seen)

    @property
    def required_arguments(self) -> int:
        """Minimum argument count that renders without an index error"""
        indices = self.referenced_indices
        return max(indices) + 1 if indices else 0

    def render(
        self, arguments: Sequence[Renderable], render: Callable[[Renderable], str] = str
    ) -> str:
        from posfmt.formatter import render_segments

        return render_segments(self.segments, arguments, render=render)

    def to_syntax(self) -> str:
        return "".join(seg.to_syntax() for seg in self.segments)

    def __str__(self) -> str:
        return self.to_syntax()


def escape(text: str) -> str:
    """Double every brace so that `text` formats back to itself."""
    return text.replace("{", "{{").replace("}", "}}")


def iter_segments(template: str, *, max_index: Optional[int] = None) -> Iterator[Segment]:
    """
    Scan a template left to right, yielding segments as they complete

    Args:
        template: Template text
        max_index: Largest accepted placeholder index; resolved from the
            environment when omitted

    Yields:
        Literal and Placeholder segments in template order. Adjacent literal
        text, including collapsed escapes, is merged into one Literal.

    Raises:
        MalformedPlaceholder: brace content is not digits closed by `}`
        UnmatchedClosingBrace: a bare `}` outside a placeholder
    """
    ceiling = resolve_max_argument_index() if max_index is None else max_index
    ceiling_width = len(str(ceiling))
    length = len(template)
    pending: list[str] = []
    cursor = 0

    while cursor < length:
        char = template[cursor]

        if char == "{":
            if template.startswith("{{", cursor):
                pending.append("{")
                cursor += 2
                continue

            start = cursor
            end = cursor + 1
            while end < length and template[end] in _DIGITS:
                end += 1
            digits = template[start + 1:end]

            if end >= length:
                raise MalformedPlaceholder("Unterminated placeholder", start)
            if not digits:
                raise MalformedPlaceholder(
                    f"Placeholder must start with a decimal digit, found {template[end]!r}",
                    start,
                )
            if template[end] != "}":
                raise MalformedPlaceholder(
                    f"Expected '}}' after placeholder index, found {template[end]!r}",
                    start,
                )
            # Width check first so huge digit runs never reach int()
            significant = digits.lstrip("0")
            if len(significant) > ceiling_width or int(digits) > ceiling:
                raise MalformedPlaceholder(
                    f"Placeholder index exceeds maximum of {ceiling}",
                    start,
                )

            if pending:
                yield Literal("".join(pending))
                pending = []
            yield Placeholder(int(digits), start)
            cursor = end + 1
            continue

        if char == "}":
            if template.startswith("}}", cursor):
                pending.append("}")
                cursor += 2
                continue
            raise UnmatchedClosingBrace(cursor)

        pending.append(char)
        cursor += 1

    if pending:
        yield Literal("".join(pending))


def parse_template(template: str, *, max_index: Optional[int] = None) -> ParsedTemplate:
    """
    Parse and validate a whole template

    Args:
        template: Template text
        max_index: Largest accepted placeholder index

    Returns:
        A ParsedTemplate holding every segment
    """
    parsed = ParsedTemplate(tuple(iter_segments(template, max_index=max_index)))
    logger.debug(
        "Parsed template: %d segments, %d placeholders",
        len(parsed.segments),
        len(parsed.placeholders),
    )
    return parsed

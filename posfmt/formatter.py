"""Positional formatting of `{n}` templates."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Protocol, Sequence, runtime_checkable

from posfmt.errors import ArgumentIndexOutOfRange
from posfmt.parser import Literal, Segment, iter_segments

logger = logging.getLogger("posfmt.formatter")


@runtime_checkable
class Renderable(Protocol):
    """Anything with a text representation can be an argument."""

    def __str__(self) -> str: ...


def render_segments(
    segments: Iterable[Segment],
    arguments: Sequence[Renderable],
    render: Callable[[Renderable], str] = str,
) -> str:
    """Concatenate segments, substituting rendered arguments for placeholders.

    `segments` may be lazy; an index error is raised as soon as its
    placeholder is reached and nothing built so far is returned.
    """
    available = len(arguments)
    rendered: dict[int, str] = {}
    parts: list[str] = []

    for segment in segments:
        if isinstance(segment, Literal):
            parts.append(segment.text)
            continue
        index = segment.index
        if index >= available:
            raise ArgumentIndexOutOfRange(index, available, segment.position)
        # Arguments are fixed for the call, so each one renders at most once
        if index not in rendered:
            rendered[index] = render(arguments[index])
        parts.append(rendered[index])

    return "".join(parts)


def format_template(
    template: str,
    arguments: Sequence[Renderable],
    *,
    render: Callable[[Renderable], str] = str,
    max_index: int | None = None,
) -> str:
    """Substitute `arguments` into the `{n}` placeholders of `template`.

    Example:
    - `format_template("{1}+{1} = {0}", [2, "one"])` -> `"one+one = 2"`

    Raises the first MalformedPlaceholder, UnmatchedClosingBrace or
    ArgumentIndexOutOfRange met in a left-to-right scan.
    """
    result = render_segments(
        iter_segments(template, max_index=max_index),
        arguments,
        render=render,
    )
    logger.debug(
        "Formatted template of %d chars with %d arguments", len(template), len(arguments)
    )
    return result


def format_string(template: str, *arguments: Renderable) -> str:
    """Variadic form of `format_template`."""
    return format_template(template, arguments)

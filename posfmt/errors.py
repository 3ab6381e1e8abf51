"""Format error taxonomy and machine-friendly diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class FormatDiagnostic:
    """Machine-friendly description of a rejected template or argument list."""

    code: str
    message: str
    position: int | None = None
    index: int | None = None
    available: int | None = None


class FormatError(ValueError):
    """Base error raised when a template cannot be formatted."""

    code = "E_FORMAT"

    def __init__(self, message: str, position: int | None = None):
        self.message = message
        self.position = position
        super().__init__(self.format_message())

    def format_message(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (at offset {self.position})"

    def to_diagnostic(self) -> FormatDiagnostic:
        return FormatDiagnostic(
            code=self.code,
            message=self.message,
            position=self.position,
        )


class MalformedPlaceholder(FormatError):
    """Brace content is not one or more digits followed by `}`."""

    code = "E_MALFORMED_PLACEHOLDER"


class UnmatchedClosingBrace(FormatError):
    """A `}` appeared without an opening `{` and is not escaped as `}}`."""

    code = "E_UNMATCHED_CLOSING_BRACE"

    def __init__(self, position: int | None = None):
        super().__init__("Unmatched closing brace '}'", position)


class ArgumentIndexOutOfRange(FormatError):
    """A placeholder references an argument that was not supplied."""

    code = "E_ARGUMENT_INDEX_OUT_OF_RANGE"

    def __init__(self, index: int, available: int, position: int | None = None):
        self.index = index
        self.available = available
        super().__init__(
            f"Argument index {index} out of range ({available} available)",
            position,
        )

    def to_diagnostic(self) -> FormatDiagnostic:
        return FormatDiagnostic(
            code=self.code,
            message=self.message,
            position=self.position,
            index=self.index,
            available=self.available,
        )


def diagnostics_payload(diagnostics: Iterable[FormatDiagnostic]) -> list[dict[str, Any]]:
    """Convert diagnostics to JSON-ready dictionaries, dropping unset fields."""
    payload: list[dict[str, Any]] = []
    for diagnostic in diagnostics:
        item: dict[str, Any] = {"code": diagnostic.code, "message": diagnostic.message}
        if diagnostic.position is not None:
            item["position"] = diagnostic.position
        if diagnostic.index is not None:
            item["index"] = diagnostic.index
        if diagnostic.available is not None:
            item["available"] = diagnostic.available
        payload.append(item)
    return payload


def diagnostics_from_exception(exc: Exception) -> list[dict[str, Any]]:
    if isinstance(exc, FormatError):
        return diagnostics_payload([exc.to_diagnostic()])
    return diagnostics_payload(
        [FormatDiagnostic(code="E_INTERNAL", message=str(exc) or type(exc).__name__)]
    )

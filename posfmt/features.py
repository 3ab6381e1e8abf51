"""
This module defines all posfmt features using a unified registry system.
The CLI and the HTTP API both dispatch through it.
"""

from typing import (
    Dict,
    Any,
    Callable,
    List,
    Optional,
    Sequence,
    TypeVar,
    Generic,
)
from dataclasses import dataclass
import logging

from posfmt.errors import FormatError, diagnostics_payload
from posfmt.formatter import format_template
from posfmt.literals import parse_arguments
from posfmt.parser import Literal, parse_template

logger = logging.getLogger("posfmt.features")

T = TypeVar("T")


class OperationResult(Generic[T]):
    """Wrapper for operation results with success/error handling"""

    def __init__(
        self,
        success: bool,
        data: Optional[T] = None,
        error: Optional[str] = None,
        diagnostics: Optional[List[Dict[str, Any]]] = None,
    ):
        self.success = success
        self.data = data
        self.error = error
        self.diagnostics = diagnostics or []

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "OperationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls, error: str, diagnostics: Optional[List[Dict[str, Any]]] = None
    ) -> "OperationResult[T]":
        return cls(success=False, error=error, diagnostics=diagnostics)

    @classmethod
    def from_format_error(cls, exc: FormatError) -> "OperationResult[T]":
        return cls.fail(str(exc), diagnostics_payload([exc.to_diagnostic()]))


@dataclass
class Feature:
    """Base class for all posfmt features"""

    name: str
    description: str
    handler: Callable
    cli_options: Optional[Dict[str, Any]] = None
    api_endpoint: Optional[Dict[str, Any]] = None


class FeatureRegistry:
    """Registry for all posfmt features"""

    _features: Dict[str, Feature] = {}

    @classmethod
    def register(cls, feature: Feature) -> Feature:
        """Register a new feature"""
        cls._features[feature.name] = feature
        return feature

    @classmethod
    def get_feature(cls, name: str) -> Optional[Feature]:
        """Get a feature by name"""
        return cls._features.get(name)

    @classmethod
    def get_all_features(cls) -> Dict[str, Feature]:
        """Get all registered features"""
        return cls._features.copy()


# ----------------- Feature Handlers -----------------


def handle_version(**kwargs) -> OperationResult[Dict[str, str]]:
    """Handle version request"""
    from posfmt.version import get_version

    return OperationResult[Dict[str, str]](
        success=True, data={"version": get_version()}
    )


def handle_format(
    template: str,
    arguments: Optional[Sequence[Any]] = None,
    typed: bool = False,
    **kwargs,
) -> OperationResult[Dict[str, Any]]:
    """Format a template against positional arguments"""
    values: List[Any] = list(arguments or [])
    if typed:
        values = parse_arguments(values)

    try:
        text = format_template(template, values)
    except FormatError as exc:
        logger.info("Format rejected: %s", exc)
        return OperationResult.from_format_error(exc)

    return OperationResult.ok(
        {
            "result": text,
            "arguments": len(values),
        }
    )


def handle_parse(template: str, **kwargs) -> OperationResult[Dict[str, Any]]:
    """Parse a template and describe its segments"""
    try:
        parsed = parse_template(template)
    except FormatError as exc:
        logger.info("Parse rejected: %s", exc)
        return OperationResult.from_format_error(exc)

    segments: List[Dict[str, Any]] = []
    for segment in parsed.segments:
        if isinstance(segment, Literal):
            segments.append({"kind": "literal", "text": segment.text})
        else:
            segments.append(
                {"kind": "placeholder", "index": segment.index, "position": segment.position}
            )

    return OperationResult.ok(
        {
            "segments": segments,
            "referenced_indices": list(parsed.referenced_indices),
            "required_arguments": parsed.required_arguments,
            "syntax": parsed.to_syntax(),
        }
    )


# Register all features
version_feature = FeatureRegistry.register(
    Feature(
        name="version",
        description="Get the posfmt version",
        handler=handle_version,
        api_endpoint={
            "path": "/version",
            "methods": ["GET"],
            "response_model": Dict[str, str],
        },
    )
)

format_feature = FeatureRegistry.register(
    Feature(
        name="format",
        description="Substitute positional arguments into a template",
        handler=handle_format,
        cli_options={
            "template": {
                "type": str,
                "required": True,
                "help": "Template with {n} placeholders",
            },
            "arguments": {
                "type": List[str],
                "required": False,
                "help": "Positional arguments, index 0 first",
            },
            "typed": {
                "type": bool,
                "required": False,
                "default": False,
                "help": "Read arguments as numbers, booleans, null or quoted strings",
            },
        },
        api_endpoint={
            "path": "/format",
            "methods": ["POST"],
            "request_model": {
                "template": (str, "Template with {n} placeholders"),
                "arguments": (List[Any], "Positional arguments"),
                "typed": (Optional[bool], "Read string arguments as typed literals"),
            },
            "response_model": Dict[str, Any],
        },
    )
)

parse_feature = FeatureRegistry.register(
    Feature(
        name="parse",
        description="Parse a template into literal and placeholder segments",
        handler=handle_parse,
        cli_options={
            "template": {
                "type": str,
                "required": True,
                "help": "Template with {n} placeholders",
            },
        },
        api_endpoint={
            "path": "/parse",
            "methods": ["POST"],
            "request_model": {
                "template": (str, "Template with {n} placeholders"),
            },
            "response_model": Dict[str, Any],
        },
    )
)

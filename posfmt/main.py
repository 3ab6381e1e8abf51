"""
posfmt Main module - command line and HTTP entry points
"""

import logging
from pathlib import Path
from typing import Any, List, Optional
import time

import typer
import uvicorn
from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRouter
from pydantic import BaseModel, Field

from posfmt.config import resolve_serve_host, resolve_serve_port
from posfmt.errors import diagnostics_from_exception
from posfmt.features import Feature, FeatureRegistry, OperationResult
from posfmt.version import get_version

# Module-level logger
logger = logging.getLogger("posfmt.main")


# Create CLI app with Typer
app = typer.Typer(
    name="posfmt",
    help="posfmt - positional {n} template formatting",
    add_completion=False,
)

# Create FastAPI app for API server
api_app = FastAPI(
    title="posfmt API",
    description="API for positional template formatting",
    version=get_version(),
)

# Add CORS middleware
api_app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API router for versioned endpoints
api_router = APIRouter(prefix="/api/v1")


# Request models
class FormatRequest(BaseModel):
    template: str
    arguments: List[Any] = Field(default_factory=list)
    typed: Optional[bool] = False


class ParseRequest(BaseModel):
    template: str


# ----------------- Helper Functions -----------------


class ElapsedMsFormatter(logging.Formatter):
    """Formatter that shows milliseconds since program start, right-aligned for up to 9999 seconds."""
    def __init__(self, fmt=None, datefmt=None, *args, **kwargs):
        super().__init__(fmt, datefmt, *args, **kwargs)
        self.start_time = time.monotonic()
        self.width = 8

    def format(self, record):
        elapsed_ms = int((time.monotonic() - self.start_time) * 1000)
        if elapsed_ms < 10**7:
            elapsed = f"[{elapsed_ms:>{self.width}}ms]"
        else:
            elapsed = f"[{elapsed_ms}ms]"
        record.elapsed = elapsed
        return super().format(record)


VERBOSE_LEVEL = 15  # Between INFO (20) and DEBUG (10)
logging.addLevelName(VERBOSE_LEVEL, "VERBOSE")

def verbose(self, message, *args, **kwargs):
    if self.isEnabledFor(VERBOSE_LEVEL):
        self._log(VERBOSE_LEVEL, message, args, **kwargs)
logging.Logger.verbose = verbose  # type: ignore[attr-defined]


def setup_logging(debug: bool = False, verbose: bool = False) -> None:
    """Set up logging configuration"""
    if debug:
        log_level = logging.DEBUG
    elif verbose:
        log_level = VERBOSE_LEVEL
    else:
        log_level = logging.INFO
    formatter = ElapsedMsFormatter('%(elapsed)s %(message)s')
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers = []  # Remove any existing handlers
    root.addHandler(handler)
    root.setLevel(log_level)

    # uvicorn installs its own handlers; keep its access log quiet unless debugging
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(logging.DEBUG if debug else logging.WARNING)


def _feature_or_exit(feature_name: str) -> Feature:
    feature = FeatureRegistry.get_feature(feature_name)
    if not feature:
        logger.error("Unknown feature: %s", feature_name)
        raise typer.Exit(code=1)
    return feature


def _handle_cli_result(feature_name: str, result: OperationResult) -> Any:
    """Log a failed result and exit, or hand back its data"""
    if not result.success:
        logger.error("%s failed: %s", feature_name, result.error or "Unknown error")
        for diagnostic in result.diagnostics:
            logger.verbose("  %s", diagnostic)  # type: ignore[attr-defined]
        raise typer.Exit(code=1)
    return result.data


def _api_result(result: Any) -> Any:
    if hasattr(result, "success"):
        if not result.success:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": result.error or "An error occurred",
                    "diagnostics": result.diagnostics,
                },
            )
        return result.data
    return result


def _api_feature(feature_name: str) -> Feature:
    feature = FeatureRegistry.get_feature(feature_name)
    if not feature:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{feature_name.capitalize()} feature not found",
        )
    return feature


# ----------------- CLI Commands -----------------


@app.command()
def version() -> None:
    """Show the posfmt version"""
    setup_logging(False)
    data = _handle_cli_result("version", _feature_or_exit("version").handler())
    logger.info("posfmt version: %s", data.get("version", "unknown"))


@app.command("format", context_settings={"ignore_unknown_options": True})
def format_command(
    template: Optional[str] = typer.Argument(None, help="Template with {n} placeholders"),
    arguments: Optional[List[str]] = typer.Argument(None, help="Positional arguments, index 0 first"),
    template_file: Optional[Path] = typer.Option(
        None, "--template-file", "-f", help="Read the template from a file"
    ),
    typed: bool = typer.Option(
        False,
        "--typed/--no-typed",
        help="Read arguments as numbers, booleans, null or quoted strings",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging (between info and debug)"),
) -> None:
    """Substitute positional arguments into a template"""
    setup_logging(debug, verbose)

    values = list(arguments or [])
    if template_file is not None:
        # Every positional is an argument once the template comes from a file
        if template is not None:
            values.insert(0, template)
        try:
            template = template_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.error("File not found: %s", template_file)
            raise typer.Exit(code=1)
        except OSError as e:
            logger.error("Error reading file %s: %s", template_file, str(e))
            raise typer.Exit(code=1)

    if template is None:
        logger.error("A template or --template-file is required")
        raise typer.Exit(code=1)

    logger.debug("Formatting with %d arguments", len(values))
    result = _feature_or_exit("format").handler(
        template=template, arguments=values, typed=typed
    )
    data = _handle_cli_result("format", result)
    print(data["result"])


@app.command("parse")
def parse_command(
    template: str = typer.Argument(..., help="Template with {n} placeholders"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
) -> None:
    """Show the literal and placeholder segments of a template"""
    setup_logging(debug)

    data = _handle_cli_result("parse", _feature_or_exit("parse").handler(template=template))
    for segment in data["segments"]:
        if segment["kind"] == "literal":
            print(f"  literal      {segment['text']!r}")
        else:
            print(f"  placeholder  {segment['index']:<6} at {segment['position']}")
    print(f"Required arguments: {data['required_arguments']}")


# ----------------- API Endpoints -----------------


@api_router.get("/version")
async def get_version_endpoint():
    """Get posfmt version"""
    try:
        return _api_result(_api_feature("version").handler())
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error in version endpoint: %s", str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "diagnostics": diagnostics_from_exception(e),
            },
        ) from e


@api_router.post("/format")
async def format_endpoint(request: FormatRequest):
    """Format a template against positional arguments"""
    try:
        feature = _api_feature("format")
        return _api_result(feature.handler(**request.model_dump()))
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error in format endpoint: %s", str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "diagnostics": diagnostics_from_exception(e),
            },
        ) from e


@api_router.post("/parse")
async def parse_endpoint(request: ParseRequest):
    """Parse a template into segments"""
    try:
        feature = _api_feature("parse")
        return _api_result(feature.handler(**request.model_dump()))
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error in parse endpoint: %s", str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "diagnostics": diagnostics_from_exception(e),
            },
        ) from e


@api_app.get("/")
async def root():
    """Identify the service"""
    return {"name": "posfmt", "version": get_version(), "docs": "/docs"}


# Include the router in the FastAPI app
api_app.include_router(api_router)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Host to bind the API server"),
    port: Optional[int] = typer.Option(None, help="Port to bind the API server"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
):
    """Start the posfmt API server"""
    setup_logging(debug)

    host = host or resolve_serve_host()
    port = port or resolve_serve_port()
    logger.info(f"Starting posfmt API server version {get_version()} on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(api_app, host=host, port=port)


if __name__ == "__main__":
    app()

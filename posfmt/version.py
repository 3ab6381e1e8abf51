"""posfmt version information"""

__version__ = "0.3.0"


def get_version() -> str:
    """Return the posfmt version string"""
    return __version__

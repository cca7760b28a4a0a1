"""Installed idlforge version."""

from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    """Version from the installed distribution metadata."""
    try:
        return version("idlforge")
    except PackageNotFoundError:
        # Running from a source checkout without an install.
        return "0.0.0+unknown"

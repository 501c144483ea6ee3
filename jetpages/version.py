"""Library version."""

VERSION = "1.0.1"


def get_version():
    """Return the library version string."""
    return VERSION
"""strongids - Strongly-typed identifier code generator."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("strongids")
except PackageNotFoundError:
    __version__ = "(local)"

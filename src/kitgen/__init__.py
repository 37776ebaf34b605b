"""kitgen package root."""

from kitgen.exceptions import KitgenError, MissingDependencyVersionsError

__all__ = ["__version__", "KitgenError", "MissingDependencyVersionsError"]

__version__ = "0.1.0"

"""TruPath domain scoring tools."""

__version__ = "0.1.0"

"""Code Playground workspace client."""

__version__ = "0.1.0"

"""Read-only directory size and layout reports."""

__version__ = "0.1.0"

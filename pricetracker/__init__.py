"""Price tracking core for Argentine retail sites."""

__version__ = "0.1.0"

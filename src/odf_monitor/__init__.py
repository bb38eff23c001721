"""Query and comparison of ODF competition result documents."""

__version__ = "1.0.0"

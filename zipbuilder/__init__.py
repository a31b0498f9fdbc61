"""Release assembly for distributable SDK zip files."""

__version__ = "0.1.0"

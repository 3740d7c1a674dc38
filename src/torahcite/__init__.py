"""Citation detection and source suggestions for Torah and Talmud writing."""

__version__ = "0.1.0"

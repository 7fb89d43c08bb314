"""Educational story generator: concept + interest in, illustrated story out."""

__version__ = "0.1.0"

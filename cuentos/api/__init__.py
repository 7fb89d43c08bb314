"""API layer for the educational story generator."""

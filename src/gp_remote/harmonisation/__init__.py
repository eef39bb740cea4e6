"""Canonicalisation, reshaping and joining of the loaded tables."""

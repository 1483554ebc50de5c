"""Retrieval-augmented question answering over a single PDF."""

__version__ = "0.1.0"

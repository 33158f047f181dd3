"""Folio: front-matter parsing, indexing and listing for a Markdown blog."""

__version__ = "0.1.0"

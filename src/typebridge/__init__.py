"""typebridge — Typesense client façade and API key administration."""

__version__ = "0.1.0"

"""Client exceptions."""

from __future__ import annotations


class TypesenseError(Exception):
    """Raised for every failure surfaced by the Typesense server or the transport.

    Args:
        message: Human-readable description.
        code: Numeric code of the underlying failure (HTTP status when there
              is one), or ``None``.

    The underlying exception is kept as ``__cause__`` by raising with
    ``raise TypesenseError(...) from exc``.
    """

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} (code {self.code})"
        return self.message

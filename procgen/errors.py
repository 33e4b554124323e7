from __future__ import annotations

"""Exceptions shared by the noise and terrain layers."""


class InvalidInputError(ValueError):
    """Raised when a point, seed label or construction parameter violates a field's contract."""


__all__ = ["InvalidInputError"]

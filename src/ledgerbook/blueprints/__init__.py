"""Blueprint exports."""

from . import cheques, statements

__all__ = ["cheques", "statements"]

"""Exceptions shared across the dashboard."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.validators import FormError


class ValidationError(Exception):
    """A form rule was violated; nothing was sent to the database."""

    def __init__(self, error: "FormError"):
        super().__init__(f"{error.title}: {error.description}")
        self.error = error


class GatewayError(Exception):
    """A remote table operation failed."""


class ParseError(ValueError):
    """A number or date string could not be parsed."""

"""Fault kinds raised while constructing cable models."""

from __future__ import annotations


class CableModelError(ValueError):
    """Base class for construction faults.

    Parameters
    ----------
    entity : str
        Name of the entity type being built (e.g. ``"Tubular"``).
    message : str
        Human-readable description of the violation.
    field : str | None
        The offending field, when one can be named.
    """

    def __init__(self, entity: str, message: str, field: str | None = None):
        self.entity = entity
        self.field = field
        super().__init__(f"[{entity}] {message}")


class InvalidArgumentError(CableModelError):
    """Wrong arity, missing field, wrong kind, inadmissible proxy or ordering violation."""


class NumericDomainError(CableModelError):
    """A normalized value lies outside its numeric domain (non-finite, negative, ...)."""


class PromotionWarning(UserWarning):
    """An append returned a promoted copy instead of mutating the aggregate in place."""

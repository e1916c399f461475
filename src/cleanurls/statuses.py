"""Enumerations shared by the cleaning pipeline."""

from __future__ import annotations

from enum import StrEnum


class ParamRule(StrEnum):
    """Which tier of the generic classifier decided a query parameter."""
    EXACT = "exact"
    PREFIX = "prefix"
    PRESERVE = "preserve"
    SHAPE = "shape"
    DEFAULT = "default"

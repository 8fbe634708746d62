"""Shared Pydantic base models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CadenceBase(BaseModel):
    """Base model with shared config for all Cadence schemas."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class FrozenBase(CadenceBase):
    """Immutable value object. Rebuilt, never edited in place."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )

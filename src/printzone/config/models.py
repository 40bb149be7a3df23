"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, printzone.toml only contains
overrides. An empty file (or no file at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from printzone.domain.types import PositioningMode


class ResolverConfig(BaseModel):
    """[resolver] section."""

    model_config = {"frozen": True}

    placeholder_url: str = "/placeholder-product.jpg"


class PlacementDefaults(BaseModel):
    """[placement] section.

    Applies when a product carries no placement config of its own.
    """

    model_config = {"frozen": True}

    default_mode: PositioningMode = PositioningMode.CENTER
    default_scale: float = Field(default=1.0, gt=0)
    auto_fit: bool = False
    fit_padding_ratio: float = Field(default=0.1, ge=0, lt=0.5)


class ZonesConfig(BaseModel):
    """[zones] section — bounds-inspection thresholds."""

    model_config = {"frozen": True}

    min_side_px: float = 10.0
    max_area_ratio: float = 0.5
    max_aspect_ratio: float = 5.0

"""Classification enums shared across the domain.

Values match the upstream catalog's string literals so JSON payloads
validate without translation.
"""

from __future__ import annotations

from enum import StrEnum


class CoordinateType(StrEnum):
    """How a delimitation's numbers are expressed."""

    PERCENTAGE = "PERCENTAGE"
    ABSOLUTE = "ABSOLUTE"

    @classmethod
    def _missing_(cls, value: object) -> CoordinateType | None:
        # Older catalog payloads spell absolute coordinates "PIXEL".
        if isinstance(value, str) and value.upper() in {"PIXEL", "ABSOLUTE"}:
            return cls.ABSOLUTE
        if isinstance(value, str) and value.upper() == "PERCENTAGE":
            return cls.PERCENTAGE
        return None


class PositioningMode(StrEnum):
    """Anchor used to place a design inside its zone."""

    CENTER = "CENTER"
    TOP_LEFT = "TOP_LEFT"
    CUSTOM = "CUSTOM"


class SourceKind(StrEnum):
    """Provenance of a resolved image, in resolution priority order."""

    SELECTION = "selection"
    DESIGN_VIEW = "design_view"
    VIEW = "view"
    DESIGN_ASSET = "design_asset"
    INLINE_PAYLOAD = "inline_payload"
    COLOR_VARIANT = "color_variant"
    DEFAULT = "default"

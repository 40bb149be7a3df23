"""Overlay placement — where and how a design is drawn inside a mapped zone.

The design is scaled uniformly, centered on an anchor derived from the
zone, then rotated about its own center. It is never clipped to the zone:
a design larger than its zone bleeds past the edges.
"""

from __future__ import annotations

from printzone.domain.errors import InvalidDesignAsset
from printzone.domain.geometry import Point, Rect
from printzone.domain.models import DesignAsset, PlacementConfig, PlacementResult
from printzone.domain.types import PositioningMode

DEFAULT_PADDING_RATIO = 0.1


def _require_intrinsic_size(design: DesignAsset) -> None:
    if design.intrinsic_width <= 0 or design.intrinsic_height <= 0:
        raise InvalidDesignAsset(
            f"Design {design.name or design.id!r} has no usable intrinsic size",
            design_id=design.id,
            intrinsic_width=design.intrinsic_width,
            intrinsic_height=design.intrinsic_height,
        )


def anchor_point(zone: Rect, config: PlacementConfig) -> Point:
    """Point the design's center is placed on."""
    match config.positioning_mode:
        case PositioningMode.CENTER:
            return zone.center
        case PositioningMode.TOP_LEFT:
            return zone.top_left
        case PositioningMode.CUSTOM:
            center = zone.center
            return Point(x=center.x + config.manual_offset_x, y=center.y + config.manual_offset_y)
    msg = f"Unsupported positioning mode: {config.positioning_mode!r}"
    raise ValueError(msg)


def compute_placement(
    zone: Rect,
    design: DesignAsset,
    config: PlacementConfig,
) -> PlacementResult:
    """Compute the draw transform for *design* inside *zone*.

    Rotation is ``config.rotation_degrees_override``, 0 when unset. The
    zone's own rotation stays on *zone* and is not applied to the design.

    Raises:
        InvalidDesignAsset: the design's intrinsic width or height is not positive.
    """
    _require_intrinsic_size(design)

    design_width = design.intrinsic_width * config.scale
    design_height = design.intrinsic_height * config.scale
    anchor = anchor_point(zone, config)

    rotation = config.rotation_degrees_override or 0.0

    return PlacementResult(
        offset_x=anchor.x - design_width / 2,
        offset_y=anchor.y - design_height / 2,
        rendered_width=design_width,
        rendered_height=design_height,
        rotation_degrees=rotation,
    )


def fit_scale(zone: Rect, design: DesignAsset, padding: float | None = None) -> float:
    """Largest uniform scale that fits *design* inside *zone* with *padding*.

    *padding* is in zone pixels on every side and defaults to
    ``DEFAULT_PADDING_RATIO`` of the zone's shorter side.

    Raises:
        InvalidDesignAsset: the design's intrinsic width or height is not positive.
    """
    _require_intrinsic_size(design)
    if padding is None:
        padding = min(zone.width, zone.height) * DEFAULT_PADDING_RATIO
    available_width = max(zone.width - 2 * padding, 0.0)
    available_height = max(zone.height - 2 * padding, 0.0)
    return min(
        available_width / design.intrinsic_width,
        available_height / design.intrinsic_height,
    )


def overflows(zone: Rect, placement: PlacementResult) -> bool:
    """Whether the drawn (rotated) design extends past the zone's box."""
    return not zone.contains(placement.bounds())

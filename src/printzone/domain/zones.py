"""Delimitation mapping — from authored print zones to rendered-image pixels.

A zone is authored against a reference image either as percentages or as
absolute pixels. Rendering happens at whatever size the base image is
currently displayed, so every zone is re-expressed in that pixel space
before a design can be placed in it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from printzone.domain.errors import InvalidReference
from printzone.domain.geometry import Rect, Size
from printzone.domain.models import (
    AbsoluteDelimitation,
    Delimitation,
    EntityId,
    PercentageDelimitation,
)

# Bounds-inspection thresholds (overridable per call).
MIN_SIDE_PX = 10.0
MAX_AREA_RATIO = 0.5
MAX_ASPECT_RATIO = 5.0


def map_zone(delimitation: Delimitation, rendered: Size) -> Rect:
    """Express *delimitation* in pixels of an image rendered at *rendered*.

    Raises:
        InvalidReference: the reference dimensions are missing or not positive,
            so the zone's scale factor is undefined.
    """
    if not delimitation.has_valid_reference:
        raise InvalidReference(
            f"Zone {delimitation.label} has no usable reference size",
            zone_id=delimitation.id,
            reference_width=delimitation.reference_width,
            reference_height=delimitation.reference_height,
        )

    match delimitation:
        case AbsoluteDelimitation():
            assert delimitation.reference_width and delimitation.reference_height
            scale_x = rendered.width / delimitation.reference_width
            scale_y = rendered.height / delimitation.reference_height
            return Rect(
                x=delimitation.x * scale_x,
                y=delimitation.y * scale_y,
                width=delimitation.width * scale_x,
                height=delimitation.height * scale_y,
                rotation_degrees=delimitation.rotation_degrees,
            )
        case PercentageDelimitation():
            return Rect(
                x=delimitation.x / 100 * rendered.width,
                y=delimitation.y / 100 * rendered.height,
                width=delimitation.width / 100 * rendered.width,
                height=delimitation.height / 100 * rendered.height,
                rotation_degrees=delimitation.rotation_degrees,
            )
    msg = f"Unsupported delimitation type: {type(delimitation).__name__}"
    raise TypeError(msg)


@dataclass(frozen=True)
class MappedZone:
    """Outcome of mapping one zone: a rect, or the error that prevented it."""

    delimitation: Delimitation
    rect: Rect | None = None
    error: InvalidReference | None = None

    @property
    def ok(self) -> bool:
        return self.rect is not None


def map_zones(delimitations: Sequence[Delimitation], rendered: Size) -> list[MappedZone]:
    """Map every zone independently; one bad zone never hides the others."""
    results: list[MappedZone] = []
    for delimitation in delimitations:
        try:
            results.append(MappedZone(delimitation, rect=map_zone(delimitation, rendered)))
        except InvalidReference as exc:
            results.append(MappedZone(delimitation, error=exc))
    return results


def select_zone(
    delimitations: Sequence[Delimitation],
    *,
    zone_id: EntityId | None = None,
    name: str | None = None,
) -> Delimitation | None:
    """Choose the zone a design applies to.

    By id, then by name (case-insensitive); with neither given, the first
    (usually the sole) zone.
    """
    if zone_id is not None:
        return next((d for d in delimitations if d.id == zone_id), None)
    if name is not None:
        wanted = name.casefold()
        return next((d for d in delimitations if (d.name or "").casefold() == wanted), None)
    return delimitations[0] if delimitations else None


def to_percentage(delimitation: Delimitation) -> PercentageDelimitation:
    """Re-author an ABSOLUTE zone as percentages of its own reference frame.

    PERCENTAGE zones are returned unchanged.

    Raises:
        InvalidReference: for an ABSOLUTE zone without a usable reference.
        pydantic.ValidationError: the zone extends outside its reference frame,
            so it has no 0-100 percentage form.
    """
    if isinstance(delimitation, PercentageDelimitation):
        return delimitation
    if not delimitation.has_valid_reference:
        raise InvalidReference(
            f"Zone {delimitation.label} has no usable reference size",
            zone_id=delimitation.id,
        )
    assert delimitation.reference_width and delimitation.reference_height
    ref_w = delimitation.reference_width
    ref_h = delimitation.reference_height
    return PercentageDelimitation(
        id=delimitation.id,
        name=delimitation.name,
        x=delimitation.x / ref_w * 100,
        y=delimitation.y / ref_h * 100,
        width=delimitation.width / ref_w * 100,
        height=delimitation.height / ref_h * 100,
        rotation_degrees=delimitation.rotation_degrees,
        reference_width=ref_w,
        reference_height=ref_h,
    )


def contain_fit(natural: Size, container: Size) -> Rect:
    """Box an image of size *natural* occupies when fitted "contain" in *container*.

    The image keeps its aspect ratio and is centered; the returned rect's
    origin is the letterbox offset inside the container.
    """
    if natural.width <= 0 or natural.height <= 0 or container.height <= 0:
        return Rect(x=0.0, y=0.0, width=container.width, height=container.height)

    image_ratio = natural.width / natural.height
    container_ratio = container.width / container.height
    if image_ratio > container_ratio:
        width = container.width
        height = container.width / image_ratio
        return Rect(x=0.0, y=(container.height - height) / 2, width=width, height=height)
    height = container.height
    width = container.height * image_ratio
    return Rect(x=(container.width - width) / 2, y=0.0, width=width, height=height)


# ---------------------------------------------------------------------------
# Bounds inspection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ZoneReport:
    """Result of checking a mapped zone against its image."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    area_ratio: float = 0.0


def inspect_zone(
    rect: Rect,
    image: Size,
    *,
    min_side_px: float = MIN_SIDE_PX,
    max_area_ratio: float = MAX_AREA_RATIO,
    max_aspect_ratio: float = MAX_ASPECT_RATIO,
) -> ZoneReport:
    """Flag zones that leave the image or are awkward to print into.

    Errors: negative origin, overflow past the right or bottom edge.
    Warnings: a side under *min_side_px*, area above *max_area_ratio* of the
    image, aspect ratio beyond *max_aspect_ratio* (either orientation).
    """
    errors: list[str] = []
    warnings: list[str] = []

    if rect.x < 0:
        errors.append(f"Negative x position: {rect.x:.0f}px")
    if rect.y < 0:
        errors.append(f"Negative y position: {rect.y:.0f}px")
    if rect.right > image.width:
        errors.append(f"Overflows right edge by {rect.right - image.width:.0f}px")
    if rect.bottom > image.height:
        errors.append(f"Overflows bottom edge by {rect.bottom - image.height:.0f}px")

    if rect.width < min_side_px or rect.height < min_side_px:
        warnings.append(f"Very small zone: {rect.width:.0f}x{rect.height:.0f}px")

    area_ratio = rect.size.area / image.area if image.area > 0 else 0.0
    if area_ratio > max_area_ratio:
        warnings.append(f"Very large zone: {area_ratio * 100:.1f}% of the image")

    if rect.height > 0:
        aspect = rect.width / rect.height
        if aspect > max_aspect_ratio or aspect < 1 / max_aspect_ratio:
            warnings.append(f"Extreme aspect ratio: {aspect:.2f}")

    return ZoneReport(valid=not errors, errors=errors, warnings=warnings, area_ratio=area_ratio)

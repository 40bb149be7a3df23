"""Catalog entity snapshots and the value objects passed between pipeline stages.

Every model is frozen: entities are fetched from the upstream catalog per
render request and only ever read here. Upstream JSON uses camelCase keys;
models accept those aliases as well as the snake_case field names.

Delimitations are a tagged variant discriminated by ``coordinateType`` so
that PERCENTAGE and ABSOLUTE zones are distinct types and every consumer
has to handle both.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar

from pydantic import (
    AliasChoices,
    BaseModel,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from printzone.domain.geometry import AffineTransform, Point, Rect, Size, bounding_rect
from printzone.domain.types import CoordinateType, PositioningMode, SourceKind

EntityId = int | str

_CATALOG_CONFIG: dict[str, Any] = {
    "frozen": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
}


# ---------------------------------------------------------------------------
# Delimitations (print zones)
# ---------------------------------------------------------------------------


class _DelimitationBase(BaseModel):
    model_config = _CATALOG_CONFIG

    kind: ClassVar[CoordinateType]

    id: EntityId | None = None
    name: str | None = None
    x: float
    y: float
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    rotation_degrees: float = Field(
        default=0.0,
        validation_alias=AliasChoices("rotationDegrees", "rotation", "rotation_degrees"),
    )
    reference_width: float | None = None
    reference_height: float | None = None

    @field_validator("rotation_degrees", mode="before")
    @classmethod
    def _null_rotation(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("coordinate_type", mode="before", check_fields=False)
    @classmethod
    def _normalize_coordinate_type(cls, value: Any) -> Any:
        if value is None:
            return cls.kind
        if isinstance(value, str):
            return CoordinateType(value)
        return value

    @model_validator(mode="after")
    def _check_kind(self) -> _DelimitationBase:
        actual = getattr(self, "coordinate_type", None)
        if actual != self.kind:
            msg = f"coordinateType {actual!r} does not match {self.kind.value}"
            raise ValueError(msg)
        return self

    @property
    def has_valid_reference(self) -> bool:
        return (self.reference_width or 0) > 0 and (self.reference_height or 0) > 0

    @property
    def label(self) -> str:
        """Human-readable zone label for logs and reports."""
        if self.name:
            return self.name
        return f"zone-{self.id}" if self.id is not None else "zone"


class PercentageDelimitation(_DelimitationBase):
    """Zone expressed as 0-100 percentages of the reference image."""

    kind: ClassVar[CoordinateType] = CoordinateType.PERCENTAGE

    coordinate_type: CoordinateType = CoordinateType.PERCENTAGE

    @model_validator(mode="after")
    def _check_percent_range(self) -> PercentageDelimitation:
        for field_name in ("x", "y", "width", "height"):
            value = getattr(self, field_name)
            if not 0 <= value <= 100:
                msg = f"{field_name}={value} outside 0-100 for a PERCENTAGE zone"
                raise ValueError(msg)
        return self


class AbsoluteDelimitation(_DelimitationBase):
    """Zone expressed in pixels of the reference resolution."""

    kind: ClassVar[CoordinateType] = CoordinateType.ABSOLUTE

    coordinate_type: CoordinateType = CoordinateType.ABSOLUTE


def _coordinate_tag(value: Any) -> str:
    """Pick the union member from raw input or an already-built model."""
    if isinstance(value, dict):
        raw = value.get("coordinateType", value.get("coordinate_type"))
    else:
        raw = getattr(value, "coordinate_type", None)
    if raw is None:
        return CoordinateType.PERCENTAGE.value
    try:
        return CoordinateType(raw).value
    except ValueError:
        return str(raw)


Delimitation = Annotated[
    Annotated[PercentageDelimitation, Tag(CoordinateType.PERCENTAGE.value)]
    | Annotated[AbsoluteDelimitation, Tag(CoordinateType.ABSOLUTE.value)],
    Discriminator(_coordinate_tag),
]


# ---------------------------------------------------------------------------
# Catalog entities
# ---------------------------------------------------------------------------


class ProductImage(BaseModel):
    """One photographed view of one color variant."""

    model_config = _CATALOG_CONFIG

    id: EntityId | None = None
    view_label: str | None = Field(
        default=None,
        validation_alias=AliasChoices("viewLabel", "view", "view_label"),
    )
    url: str | None = None
    natural_width: float | None = None
    natural_height: float | None = None
    is_design_view: bool = False
    delimitations: tuple[Delimitation, ...] = ()

    @property
    def natural_size(self) -> Size | None:
        if not self.natural_width or not self.natural_height:
            return None
        return Size(width=self.natural_width, height=self.natural_height)


class ColorVariant(BaseModel):
    """A color option of a product with its own set of photographed views."""

    model_config = _CATALOG_CONFIG

    id: EntityId | None = None
    name: str = ""
    color_code: str | None = None
    images: tuple[ProductImage, ...] = ()


class DesignAsset(BaseModel):
    """Vendor graphic placed into a print zone."""

    model_config = _CATALOG_CONFIG

    id: EntityId | None = None
    name: str = ""
    image_url: str | None = None
    intrinsic_width: float = 0.0
    intrinsic_height: float = 0.0


class PlacementConfig(BaseModel):
    """How a design is anchored, scaled, and rotated inside its zone."""

    model_config = _CATALOG_CONFIG

    positioning_mode: PositioningMode = PositioningMode.CENTER
    scale: float = Field(default=1.0, gt=0)
    manual_offset_x: float = 0.0
    manual_offset_y: float = 0.0
    rotation_degrees_override: float | None = None


class CatalogProduct(BaseModel):
    """Product-shaped entity as the upstream catalog serializes it.

    Carries every image field the catalog has ever used. Only
    :mod:`printzone.infrastructure.catalog` knows how these fields rank.
    """

    model_config = _CATALOG_CONFIG

    id: EntityId | None = None
    name: str = ""
    views: tuple[ProductImage, ...] = ()
    design_view: ProductImage | None = None
    design_url: str | None = None
    design_payload: str | None = Field(
        default=None,
        validation_alias=AliasChoices("designPayload", "designBase64", "design_payload"),
    )
    color_variants: tuple[ColorVariant, ...] = Field(
        default=(),
        validation_alias=AliasChoices("colorVariants", "colorVariations", "color_variants"),
    )
    selected_color_id: EntityId | None = None
    image_url: str | None = None
    design: DesignAsset | None = None
    placement: PlacementConfig | None = None

    def all_images(self) -> list[ProductImage]:
        """Every ProductImage reachable from this product, views first."""
        images = list(self.views)
        if self.design_view is not None:
            images.append(self.design_view)
        for variant in self.color_variants:
            images.extend(variant.images)
        return images

    def find_color_variant(self, color_id: EntityId | None) -> ColorVariant | None:
        if color_id is None:
            return None
        for variant in self.color_variants:
            if variant.id == color_id:
                return variant
        return None


# ---------------------------------------------------------------------------
# Pipeline values
# ---------------------------------------------------------------------------


class ImageCandidate(BaseModel):
    """One optional image source in the resolver's ordered candidate list."""

    model_config = {"frozen": True}

    kind: SourceKind
    url: str | None = None
    image_id: EntityId | None = None
    color_variant_id: EntityId | None = None
    view_label: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.url is None or self.url == ""


class ResolvedImage(BaseModel):
    """The winning image and why it was chosen."""

    model_config = {"frozen": True}

    url: str
    source_kind: SourceKind
    image_id: EntityId | None = None
    color_variant_id: EntityId | None = None
    view_label: str | None = None


class NoImageAvailable(BaseModel):
    """Resolver outcome when every candidate was empty."""

    model_config = {"frozen": True}

    candidates_tried: int = 0


class PlacementResult(BaseModel):
    """Final draw transform for a design, in rendered-image pixels.

    ``offset_x``/``offset_y`` is the top-left of the unrotated design box;
    rotation is about the box's own center.
    """

    model_config = {"frozen": True}

    offset_x: float
    offset_y: float
    rendered_width: float
    rendered_height: float
    rotation_degrees: float = 0.0

    @property
    def center(self) -> Point:
        return Point(
            x=self.offset_x + self.rendered_width / 2,
            y=self.offset_y + self.rendered_height / 2,
        )

    def transform(self) -> AffineTransform:
        """Transform stack mapping design-local pixels onto the base image.

        translate(offset) -> translate(half size) -> rotate -> translate(-half size).
        The design is then drawn at ``(0, 0, rendered_width, rendered_height)``.
        """
        half = Point(x=self.rendered_width / 2, y=self.rendered_height / 2)
        return AffineTransform.translation(self.offset_x, self.offset_y) @ (
            AffineTransform.rotation_about(self.rotation_degrees, half)
        )

    def corners(self) -> list[Point]:
        """Corners of the drawn design, clockwise from the local top-left."""
        t = self.transform()
        w, h = self.rendered_width, self.rendered_height
        local = [Point(x=0, y=0), Point(x=w, y=0), Point(x=w, y=h), Point(x=0, y=h)]
        return [t.apply(p) for p in local]

    def bounds(self) -> Rect:
        """Axis-aligned box around the rotated design."""
        return bounding_rect(self.corners())

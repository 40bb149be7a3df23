"""Catalog integration — turn product-shaped payloads into resolver input.

The upstream catalog has accumulated many overlapping image fields. This
module is the only place that knows how they rank; the resolver itself
only sees the ordered :class:`ImageCandidate` list built here.

Order (after any interactive selection):
  1. views flagged as the dedicated design view (and ``designView``)
  2. every view, in order
  3. the design asset url (``designUrl``, then ``design.imageUrl``)
  4. the inline design payload
  5. the selected color variant's first image, then the first variant's
  6. the generic product image
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from printzone.domain.models import (
    CatalogProduct,
    ColorVariant,
    EntityId,
    ImageCandidate,
    ProductImage,
)
from printzone.domain.types import SourceKind

DATA_URI_PREFIX = "data:"
DEFAULT_PAYLOAD_MIME = "image/png"


def as_data_uri(payload: str | None, mime: str = DEFAULT_PAYLOAD_MIME) -> str | None:
    """Wrap a bare base64 payload as a data URI; pass through existing URIs."""
    if not payload:
        return payload
    if payload.startswith(DATA_URI_PREFIX):
        return payload
    return f"data:{mime};base64,{payload}"


def _image_candidate(
    kind: SourceKind,
    image: ProductImage | None,
    color_variant_id: EntityId | None = None,
) -> ImageCandidate:
    if image is None:
        return ImageCandidate(kind=kind, color_variant_id=color_variant_id)
    return ImageCandidate(
        kind=kind,
        url=image.url,
        image_id=image.id,
        color_variant_id=color_variant_id,
        view_label=image.view_label,
    )


def _variant_candidate(variant: ColorVariant | None) -> ImageCandidate:
    if variant is None:
        return ImageCandidate(kind=SourceKind.COLOR_VARIANT)
    first = variant.images[0] if variant.images else None
    return _image_candidate(SourceKind.COLOR_VARIANT, first, color_variant_id=variant.id)


def _color_owner(product: CatalogProduct, image: ProductImage) -> EntityId | None:
    for variant in product.color_variants:
        if any(candidate is image for candidate in variant.images):
            return variant.id
    return None


def build_candidates(product: CatalogProduct) -> list[ImageCandidate]:
    """Unify every image field of *product* into one fixed-order list."""
    candidates: list[ImageCandidate] = []

    for view in product.views:
        if view.is_design_view:
            candidates.append(_image_candidate(SourceKind.DESIGN_VIEW, view))
    if product.design_view is not None:
        candidates.append(_image_candidate(SourceKind.DESIGN_VIEW, product.design_view))

    candidates.extend(_image_candidate(SourceKind.VIEW, view) for view in product.views)

    candidates.append(ImageCandidate(kind=SourceKind.DESIGN_ASSET, url=product.design_url))
    if product.design is not None:
        candidates.append(
            ImageCandidate(kind=SourceKind.DESIGN_ASSET, url=product.design.image_url)
        )

    candidates.append(
        ImageCandidate(kind=SourceKind.INLINE_PAYLOAD, url=as_data_uri(product.design_payload))
    )

    selected = product.find_color_variant(product.selected_color_id)
    if selected is not None:
        candidates.append(_variant_candidate(selected))
    if product.color_variants:
        candidates.append(_variant_candidate(product.color_variants[0]))

    candidates.append(ImageCandidate(kind=SourceKind.DEFAULT, url=product.image_url))
    return candidates


def selection_candidate(
    product: CatalogProduct,
    *,
    view_index: int | None = None,
    color_id: EntityId | None = None,
) -> ImageCandidate | None:
    """Candidate for what the user is currently hovering or clicking.

    A view index takes precedence over a color id. Out-of-range indexes and
    unknown colors yield an empty candidate, which the resolver skips.
    """
    if view_index is not None:
        images = product.views
        variant = product.find_color_variant(color_id)
        if variant is not None and variant.images:
            images = variant.images
        image = images[view_index] if 0 <= view_index < len(images) else None
        owner = variant.id if variant is not None and variant.images else None
        if image is not None and owner is None:
            owner = _color_owner(product, image)
        return _image_candidate(SourceKind.SELECTION, image, color_variant_id=owner)
    if color_id is not None:
        variant = product.find_color_variant(color_id)
        candidate = _variant_candidate(variant)
        return candidate.model_copy(update={"kind": SourceKind.SELECTION})
    return None


def find_image(
    product: CatalogProduct,
    image_id: EntityId | None,
    url: str,
    color_variant_id: EntityId | None = None,
) -> ProductImage | None:
    """Locate the ProductImage behind a resolved image.

    Images of the variant named by *color_variant_id* are searched first.
    Ids are only unique per catalog table, so an id match must also agree
    on *url* when one is given; failing that, the url alone decides.
    """
    images = product.all_images()
    variant = product.find_color_variant(color_variant_id)
    if variant is not None:
        images = [*variant.images, *images]
    if image_id is not None:
        for image in images:
            if image.id == image_id and (not url or image.url == url):
                return image
    for image in images:
        if image.url and image.url == url:
            return image
    return None


def parse_product(data: Any) -> CatalogProduct:
    """Validate a decoded catalog payload.

    Accepts either the bare product or a ``{"data": {...}}`` envelope.

    Raises:
        pydantic.ValidationError: the payload does not describe a product.
    """
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        data = data["data"]
    return CatalogProduct.model_validate(data)


def load_product(path: Path) -> CatalogProduct:
    """Read and validate a product JSON file.

    Raises:
        OSError: the file cannot be read.
        json.JSONDecodeError: the file is not JSON.
        pydantic.ValidationError: the payload does not describe a product.
    """
    raw = path.read_text(encoding="utf-8")
    return parse_product(json.loads(raw))

"""CompositionService — runs resolve → map → place for one product.

Each public method returns a :class:`ServiceResult`. Every recoverable
condition (no image, no design, no zone, bad zone reference, bad design
size) degrades to "show the base image without an overlay": the result
stays ``ok`` and ``data["fallback"]`` names the condition.
"""

from __future__ import annotations

from typing import Any

from printzone.domain.errors import InvalidDesignAsset, InvalidReference
from printzone.domain.geometry import Rect, Size
from printzone.domain.models import (
    CatalogProduct,
    EntityId,
    NoImageAvailable,
    PlacementConfig,
    ProductImage,
    ResolvedImage,
)
from printzone.domain.placement import compute_placement, fit_scale, overflows
from printzone.domain.resolver import resolve
from printzone.domain.zones import contain_fit, inspect_zone, map_zone, map_zones, select_zone
from printzone.infrastructure.catalog import build_candidates, find_image, selection_candidate
from printzone.services.base import BaseService
from printzone.services.result import ServiceResult
from printzone.services.telemetry import trace_span, traced

FALLBACK_NO_IMAGE = "NO_IMAGE"
FALLBACK_NO_DESIGN = "NO_DESIGN"
FALLBACK_NO_ZONE = "NO_ZONE"
FALLBACK_UNKNOWN_SIZE = "UNKNOWN_IMAGE_SIZE"


class CompositionService(BaseService):
    """Plans composite product images for an external renderer."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def resolve_image(
        self,
        product: CatalogProduct,
        *,
        view_index: int | None = None,
        color_id: EntityId | None = None,
    ) -> ServiceResult:
        """Pick the image to display, substituting the placeholder when none exists."""
        warnings: list[str] = []
        resolved = self._resolve(product, view_index=view_index, color_id=color_id)
        data = self._image_data(product, resolved, warnings)
        return ServiceResult(ok=True, op="resolve_image", data=data, warnings=warnings)

    @traced
    def plan_overlay(
        self,
        product: CatalogProduct,
        *,
        rendered: Size | None = None,
        container: Size | None = None,
        view_index: int | None = None,
        color_id: EntityId | None = None,
        zone_id: EntityId | None = None,
        zone_name: str | None = None,
    ) -> ServiceResult:
        """Resolve the base image and compute where the design is drawn on it.

        The rendered size is, in order: *rendered*; the "contain" fit of the
        image inside *container*; the image's natural size.
        """
        warnings: list[str] = []
        resolved = self._resolve(product, view_index=view_index, color_id=color_id)
        data = self._image_data(product, resolved, warnings)
        data["overlay"] = None
        if isinstance(resolved, NoImageAvailable):
            return ServiceResult(ok=True, op="plan_overlay", data=data, warnings=warnings)

        image = find_image(
            product, resolved.image_id, resolved.url, color_variant_id=resolved.color_variant_id
        )
        size, image_box = self._rendered_size(image, rendered, container)
        if image_box is not None:
            data["image_box"] = image_box.model_dump()

        design = product.design
        if design is None:
            data["fallback"] = self._record_fallback(
                FALLBACK_NO_DESIGN,
                "Product has no design asset; showing base image only",
                warnings,
                product_id=product.id,
            )
            return ServiceResult(ok=True, op="plan_overlay", data=data, warnings=warnings)

        delimitations = image.delimitations if image is not None else ()
        zone = select_zone(delimitations, zone_id=zone_id, name=zone_name)
        if zone is None:
            data["fallback"] = self._record_fallback(
                FALLBACK_NO_ZONE,
                "No print zone on the resolved image; showing base image only",
                warnings,
                product_id=product.id,
                image_url=resolved.url,
                zone_id=zone_id,
                zone_name=zone_name,
            )
            return ServiceResult(ok=True, op="plan_overlay", data=data, warnings=warnings)

        if size is None:
            data["fallback"] = self._record_fallback(
                FALLBACK_UNKNOWN_SIZE,
                "Rendered size unknown and image has no natural size",
                warnings,
                product_id=product.id,
                image_url=resolved.url,
            )
            return ServiceResult(ok=True, op="plan_overlay", data=data, warnings=warnings)
        data["rendered_size"] = size.model_dump()

        try:
            with trace_span("map_zone") as span:
                zone_rect = map_zone(zone, size)
                if span:
                    span.annotate("coordinate_type", zone.coordinate_type.value)
        except InvalidReference as exc:
            data["fallback"] = self._record_fallback(
                exc.code, exc.message, warnings, product_id=product.id, **exc.detail
            )
            return ServiceResult(ok=True, op="plan_overlay", data=data, warnings=warnings)
        data["zone"] = {"id": zone.id, "name": zone.name, "rect": zone_rect.model_dump()}

        try:
            with trace_span("compute_placement") as span:
                config = self._placement_config(product, zone_rect)
                placement = compute_placement(zone_rect, design, config)
                if span:
                    span.annotate("mode", config.positioning_mode.value)
        except InvalidDesignAsset as exc:
            data["fallback"] = self._record_fallback(
                exc.code, exc.message, warnings, product_id=product.id, **exc.detail
            )
            return ServiceResult(ok=True, op="plan_overlay", data=data, warnings=warnings)

        data["overlay"] = {
            "design_url": design.image_url,
            "scale": config.scale,
            "placement": placement.model_dump(),
            "transform": list(placement.transform().as_tuple()),
            "bleeds": overflows(zone_rect, placement),
        }
        return ServiceResult(ok=True, op="plan_overlay", data=data, warnings=warnings)

    @traced
    def plan_batch(
        self,
        product: CatalogProduct,
        *,
        rendered: Size | None = None,
    ) -> ServiceResult:
        """Plan one overlay per color variant.

        A fallback on one variant is reported on its item and never stops
        the others.
        """
        items: list[dict[str, Any]] = []
        warnings: list[str] = []
        variants = list(product.color_variants)

        targets: list[tuple[EntityId | None, str]] = [(v.id, v.name) for v in variants]
        if not targets:
            targets = [(None, "")]

        for color_id, color_name in targets:
            result = self.plan_overlay(product, rendered=rendered, color_id=color_id)
            label = (color_name or str(color_id)) if color_id is not None else "default"
            warnings.extend(f"[{label}] {w}" for w in result.warnings)
            items.append(
                {
                    "color_variant_id": color_id,
                    "color": color_name,
                    "url": result.data.get("url"),
                    "overlay": result.data.get("overlay"),
                    "fallback": result.fallback,
                }
            )

        fallback_count = sum(1 for item in items if item["fallback"])
        return ServiceResult(
            ok=True,
            op="plan_batch",
            data={"items": items, "count": len(items), "fallback_count": fallback_count},
            warnings=warnings,
        )

    @traced
    def check_zones(
        self,
        product: CatalogProduct,
        *,
        rendered: Size | None = None,
    ) -> ServiceResult:
        """Map and bounds-check every zone on every image of *product*."""
        thresholds = self._settings.zones
        items: list[dict[str, Any]] = []

        for image in product.all_images():
            if not image.delimitations:
                continue
            size = rendered or image.natural_size
            if size is None:
                for zone in image.delimitations:
                    items.append(
                        self._zone_item(
                            image, zone.id, zone.label, errors=["Image size unknown"]
                        )
                    )
                continue

            with trace_span("map_zones"):
                mapped = map_zones(image.delimitations, size)
            for entry in mapped:
                zone = entry.delimitation
                if entry.rect is None:
                    message = entry.error.message if entry.error else "Zone could not be mapped"
                    items.append(self._zone_item(image, zone.id, zone.label, errors=[message]))
                    continue
                report = inspect_zone(
                    entry.rect,
                    size,
                    min_side_px=thresholds.min_side_px,
                    max_area_ratio=thresholds.max_area_ratio,
                    max_aspect_ratio=thresholds.max_aspect_ratio,
                )
                items.append(
                    self._zone_item(
                        image,
                        zone.id,
                        zone.label,
                        rect=entry.rect,
                        errors=report.errors,
                        warnings=report.warnings,
                    )
                )

        error_count = sum(len(item["errors"]) for item in items)
        warning_count = sum(len(item["warnings"]) for item in items)
        return ServiceResult(
            ok=True,
            op="check_zones",
            data={
                "items": items,
                "count": len(items),
                "error_count": error_count,
                "warning_count": warning_count,
                "healthy": error_count == 0,
            },
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve(
        self,
        product: CatalogProduct,
        *,
        view_index: int | None,
        color_id: EntityId | None,
    ) -> ResolvedImage | NoImageAvailable:
        with trace_span("resolve") as span:
            candidates = build_candidates(product)
            selection = selection_candidate(product, view_index=view_index, color_id=color_id)
            resolved = resolve(candidates, selection)
            if span:
                span.annotate("candidates", len(candidates) + (selection is not None))
        return resolved

    def _image_data(
        self,
        product: CatalogProduct,
        resolved: ResolvedImage | NoImageAvailable,
        warnings: list[str],
    ) -> dict[str, Any]:
        if isinstance(resolved, NoImageAvailable):
            code = self._record_fallback(
                FALLBACK_NO_IMAGE,
                f"No image available after {resolved.candidates_tried} candidates; "
                "using placeholder",
                warnings,
                product_id=product.id,
            )
            return {
                "url": self._settings.resolver.placeholder_url,
                "source_kind": None,
                "placeholder": True,
                "fallback": code,
            }
        data = resolved.model_dump(mode="json")
        data["placeholder"] = False
        return data

    @staticmethod
    def _rendered_size(
        image: ProductImage | None,
        rendered: Size | None,
        container: Size | None,
    ) -> tuple[Size | None, Rect | None]:
        natural = image.natural_size if image is not None else None
        if rendered is not None:
            return rendered, None
        if container is not None:
            if natural is None:
                box = Rect(x=0.0, y=0.0, width=container.width, height=container.height)
            else:
                box = contain_fit(natural, container)
            return box.size, box
        return natural, None

    def _placement_config(self, product: CatalogProduct, zone_rect: Rect) -> PlacementConfig:
        defaults = self._settings.placement
        config = product.placement or PlacementConfig(
            positioning_mode=defaults.default_mode,
            scale=defaults.default_scale,
        )
        if defaults.auto_fit and product.design is not None:
            padding = min(zone_rect.width, zone_rect.height) * defaults.fit_padding_ratio
            scale = fit_scale(zone_rect, product.design, padding=padding)
            if scale > 0:
                config = config.model_copy(update={"scale": scale})
        return config

    @staticmethod
    def _zone_item(
        image: ProductImage,
        zone_id: EntityId | None,
        label: str,
        *,
        rect: Rect | None = None,
        errors: list[str] | None = None,
        warnings: list[str] | None = None,
    ) -> dict[str, Any]:
        return {
            "image_id": image.id,
            "view": image.view_label,
            "zone_id": zone_id,
            "zone": label,
            "rect": rect.model_dump() if rect is not None else None,
            "valid": not errors,
            "errors": list(errors or []),
            "warnings": list(warnings or []),
        }


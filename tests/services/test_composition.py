"""Tests for CompositionService — resolve, map, and place end to end."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from printzone.config.settings import PrintzoneSettings
from printzone.domain.geometry import Size
from printzone.services.composition import CompositionService
from printzone.services.telemetry import _current_span, disable_telemetry, enable_telemetry
from tests.conftest import make_product, product_payload


@pytest.fixture
def service() -> CompositionService:
    return CompositionService(PrintzoneSettings())


class TestResolveImage:
    def test_first_view(self, service: CompositionService) -> None:
        result = service.resolve_image(make_product())
        assert result.ok
        assert result.data["url"] == "https://cdn.example.com/tee-front.png"
        assert result.data["source_kind"] == "view"
        assert result.data["placeholder"] is False
        assert result.warnings == []

    def test_color_selection(self, service: CompositionService) -> None:
        result = service.resolve_image(make_product(), color_id=8)
        assert result.data["source_kind"] == "selection"
        assert result.data["color_variant_id"] == 8

    def test_placeholder_when_nothing_resolves(self, service: CompositionService) -> None:
        product = make_product(views=[], design=None, colorVariants=[], imageUrl=None)
        result = service.resolve_image(product)
        assert result.ok
        assert result.data["url"] == "/placeholder-product.jpg"
        assert result.data["placeholder"] is True
        assert result.fallback == "NO_IMAGE"
        assert len(result.warnings) == 1

    def test_placeholder_configurable(self) -> None:
        settings = PrintzoneSettings(resolver={"placeholder_url": "/blank.png"})
        product = make_product(views=[], design=None, colorVariants=[], imageUrl="")
        result = CompositionService(settings).resolve_image(product)
        assert result.data["url"] == "/blank.png"


class TestPlanOverlay:
    def test_natural_size_placement(self, service: CompositionService) -> None:
        result = service.plan_overlay(make_product())
        assert result.ok
        assert result.fallback is None
        assert result.data["zone"]["rect"]["x"] == pytest.approx(300)
        overlay = result.data["overlay"]
        placement = overlay["placement"]
        assert (placement["offset_x"], placement["offset_y"]) == pytest.approx((400, 350))
        assert (placement["rendered_width"], placement["rendered_height"]) == (200, 100)
        assert overlay["design_url"] == "https://cdn.example.com/designs/sunset.png"
        assert overlay["bleeds"] is False
        assert overlay["transform"] == pytest.approx([1, 0, 0, 1, 400, 350])

    def test_explicit_rendered_size(self, service: CompositionService) -> None:
        result = service.plan_overlay(make_product(), rendered=Size(width=500, height=500))
        placement = result.data["overlay"]["placement"]
        assert (placement["offset_x"], placement["offset_y"]) == pytest.approx((150, 150))
        assert result.data["rendered_size"] == {"width": 500, "height": 500}

    def test_container_contain_fit(self, service: CompositionService) -> None:
        result = service.plan_overlay(make_product(), container=Size(width=400, height=200))
        box = result.data["image_box"]
        assert (box["x"], box["y"], box["width"], box["height"]) == (100, 0, 200, 200)
        overlay = result.data["overlay"]
        assert (overlay["placement"]["offset_x"], overlay["placement"]["offset_y"]) == (
            pytest.approx((0, 30))
        )
        assert overlay["bleeds"] is True

    def test_absolute_zone_on_color_variant(self, service: CompositionService) -> None:
        result = service.plan_overlay(make_product(), color_id=7)
        rect = result.data["zone"]["rect"]
        assert (rect["x"], rect["width"]) == pytest.approx((160, 320))
        placement = result.data["overlay"]["placement"]
        assert (placement["offset_x"], placement["offset_y"]) == pytest.approx((220, 270))

    def test_colliding_image_ids_use_variant_image(self, service: CompositionService) -> None:
        variant = {
            "id": 5,
            "name": "Red",
            "images": [
                {
                    "id": 1,
                    "url": "https://cdn.example.com/tee-red.png",
                    "naturalWidth": 500,
                    "naturalHeight": 500,
                    "delimitations": [
                        {
                            "id": 20,
                            "x": 10,
                            "y": 10,
                            "width": 50,
                            "height": 50,
                            "referenceWidth": 500,
                            "referenceHeight": 500,
                        }
                    ],
                }
            ],
        }
        result = service.plan_overlay(make_product(colorVariants=[variant]), color_id=5)
        assert result.data["url"] == "https://cdn.example.com/tee-red.png"
        assert result.data["zone"]["id"] == 20
        assert result.data["rendered_size"] == {"width": 500, "height": 500}

    def test_zone_by_name(self, service: CompositionService) -> None:
        result = service.plan_overlay(make_product(), zone_name="CHEST")
        assert result.data["zone"]["id"] == 10

    def test_product_placement_config(self, service: CompositionService) -> None:
        product = make_product(placement={"positioningMode": "TOP_LEFT"})
        placement = service.plan_overlay(product).data["overlay"]["placement"]
        assert (placement["offset_x"], placement["offset_y"]) == pytest.approx((200, 200))

    def test_auto_fit(self) -> None:
        settings = PrintzoneSettings(placement={"auto_fit": True})
        result = CompositionService(settings).plan_overlay(make_product())
        overlay = result.data["overlay"]
        assert overlay["scale"] == pytest.approx(1.7)
        assert overlay["bleeds"] is False

    def test_zone_rotation_stays_on_zone(self, service: CompositionService) -> None:
        payload = product_payload()
        payload["views"][0]["delimitations"][0]["rotation"] = 90
        result = service.plan_overlay(make_product(**payload))
        assert result.data["zone"]["rect"]["rotation_degrees"] == 90
        overlay = result.data["overlay"]
        assert overlay["placement"]["rotation_degrees"] == 0
        assert overlay["transform"] == pytest.approx([1, 0, 0, 1, 400, 350])

    def test_rotation_override_reaches_transform(self, service: CompositionService) -> None:
        product = make_product(placement={"rotationDegreesOverride": 90})
        overlay = service.plan_overlay(product).data["overlay"]
        assert overlay["placement"]["rotation_degrees"] == 90
        a, b, c, d, _, _ = overlay["transform"]
        assert (a, b, c, d) == pytest.approx((0, 1, -1, 0))


class TestPlanOverlayFallbacks:
    def test_no_image(self, service: CompositionService) -> None:
        product = make_product(views=[], design=None, colorVariants=[], imageUrl=None)
        result = service.plan_overlay(product)
        assert result.ok
        assert result.fallback == "NO_IMAGE"
        assert result.data["overlay"] is None

    def test_no_design(self, service: CompositionService) -> None:
        result = service.plan_overlay(make_product(design=None))
        assert result.ok
        assert result.fallback == "NO_DESIGN"
        assert result.data["url"] == "https://cdn.example.com/tee-front.png"
        assert result.data["overlay"] is None

    def test_no_zone_on_view(self, service: CompositionService) -> None:
        result = service.plan_overlay(make_product(), view_index=1)
        assert result.fallback == "NO_ZONE"
        assert result.data["url"] == "https://cdn.example.com/tee-back.png"

    def test_unknown_zone_id(self, service: CompositionService) -> None:
        assert service.plan_overlay(make_product(), zone_id=999).fallback == "NO_ZONE"

    def test_invalid_reference(self, service: CompositionService) -> None:
        result = service.plan_overlay(make_product(), color_id=8)
        assert result.ok
        assert result.fallback == "INVALID_REFERENCE"
        assert result.data["url"] == "https://cdn.example.com/tee-black-front.png"
        assert result.data["overlay"] is None
        assert len(result.warnings) == 1

    def test_invalid_design_asset(self, service: CompositionService) -> None:
        design = {"id": 5, "imageUrl": "https://cdn.example.com/d.png", "intrinsicWidth": 0}
        result = service.plan_overlay(make_product(design=design))
        assert result.ok
        assert result.fallback == "INVALID_DESIGN_ASSET"
        assert result.data["zone"] is not None
        assert result.data["overlay"] is None

    def test_unknown_image_size(self, service: CompositionService) -> None:
        payload = product_payload()
        del payload["views"][0]["naturalWidth"]
        result = service.plan_overlay(make_product(**payload))
        assert result.fallback == "UNKNOWN_IMAGE_SIZE"

    def test_unknown_size_resolved_by_rendered(self, service: CompositionService) -> None:
        payload = product_payload()
        del payload["views"][0]["naturalWidth"]
        result = service.plan_overlay(make_product(**payload), rendered=Size(width=10, height=10))
        assert result.fallback is None
        assert result.data["overlay"] is not None


class TestPlanBatch:
    def test_one_item_per_variant(self, service: CompositionService) -> None:
        result = service.plan_batch(make_product())
        assert result.ok
        assert result.data["count"] == 2
        white, black = result.data["items"]
        assert white["color"] == "White"
        assert white["overlay"] is not None
        assert white["fallback"] is None
        assert black["fallback"] == "INVALID_REFERENCE"
        assert result.data["fallback_count"] == 1
        assert all(w.startswith("[Black] ") for w in result.warnings)

    def test_without_variants(self, service: CompositionService) -> None:
        result = service.plan_batch(make_product(colorVariants=[]))
        assert result.data["count"] == 1
        item = result.data["items"][0]
        assert item["color_variant_id"] is None
        assert item["url"] == "https://cdn.example.com/tee-front.png"


class TestCheckZones:
    def test_reports_every_zone(self, service: CompositionService) -> None:
        result = service.check_zones(make_product())
        assert result.ok
        assert result.data["count"] == 3
        assert result.data["error_count"] == 1
        assert result.data["healthy"] is False
        by_zone = {item["zone_id"]: item for item in result.data["items"]}
        assert by_zone[10]["valid"] is True
        assert by_zone[71]["rect"]["width"] == pytest.approx(320)
        assert by_zone[81]["valid"] is False
        assert by_zone[81]["rect"] is None

    def test_healthy_product(self, service: CompositionService) -> None:
        result = service.check_zones(make_product(colorVariants=[]))
        assert result.data["healthy"] is True
        assert result.data["count"] == 1

    def test_thresholds_from_settings(self) -> None:
        settings = PrintzoneSettings(zones={"max_area_ratio": 0.1})
        result = CompositionService(settings).check_zones(make_product(colorVariants=[]))
        assert result.data["warning_count"] == 1
        assert result.data["healthy"] is True


class TestTelemetry:
    @pytest.fixture(autouse=True)
    def _telemetry(self) -> Generator[None]:
        enable_telemetry()
        yield
        disable_telemetry()
        _current_span.set(None)

    def test_plan_overlay_span_tree(self, service: CompositionService) -> None:
        result = service.plan_overlay(make_product())
        assert result.meta is not None
        tree = result.meta["telemetry"]
        assert tree["name"] == "CompositionService.plan_overlay"
        stages = [child["name"] for child in tree["children"]]
        assert stages == ["resolve", "map_zone", "compute_placement"]
        assert tree["children"][1]["annotations"] == {"coordinate_type": "PERCENTAGE"}

    def test_batch_nests_plans(self, service: CompositionService) -> None:
        result = service.plan_batch(make_product())
        assert result.meta is not None
        children = result.meta["telemetry"]["children"]
        assert [c["name"] for c in children] == ["CompositionService.plan_overlay"] * 2

"""Shared pytest fixtures and test helpers for printzone tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from printzone.domain.models import CatalogProduct


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep config discovery away from the developer's real printzone.toml."""
    monkeypatch.delenv("PRINTZONE_CONFIG", raising=False)
    for var in ("JSON_OUTPUT", "QUIET", "VERBOSE", "LOG_JSON"):
        monkeypatch.delenv(f"PRINTZONE_{var}", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_runtime_state() -> Generator[None]:
    """Undo telemetry and logging changes made by verbose CLI invocations."""
    from printzone.services.telemetry import _current_span, disable_telemetry

    root = logging.getLogger()
    handlers = root.handlers[:]
    level = logging.getLogger("printzone").level
    yield
    disable_telemetry()
    _current_span.set(None)
    root.handlers = handlers
    logging.getLogger("printzone").setLevel(level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def product_payload(**overrides: Any) -> dict[str, Any]:
    """A tee-shirt as the upstream catalog serializes it (camelCase JSON).

    Two views, two color variants; the front view carries a PERCENTAGE chest
    zone, the white variant's front an ABSOLUTE zone authored at 500x500.
    """
    payload: dict[str, Any] = {
        "id": 42,
        "name": "Classic Tee",
        "views": [
            {
                "id": 1,
                "viewLabel": "FRONT",
                "url": "https://cdn.example.com/tee-front.png",
                "naturalWidth": 1000,
                "naturalHeight": 1000,
                "delimitations": [
                    {
                        "id": 10,
                        "name": "chest",
                        "x": 30,
                        "y": 25,
                        "width": 40,
                        "height": 30,
                        "coordinateType": "PERCENTAGE",
                        "referenceWidth": 1000,
                        "referenceHeight": 1000,
                    }
                ],
            },
            {
                "id": 2,
                "viewLabel": "BACK",
                "url": "https://cdn.example.com/tee-back.png",
                "naturalWidth": 1000,
                "naturalHeight": 1000,
            },
        ],
        "colorVariants": [
            {
                "id": 7,
                "name": "White",
                "colorCode": "#ffffff",
                "images": [
                    {
                        "id": 70,
                        "viewLabel": "FRONT",
                        "url": "https://cdn.example.com/tee-white-front.png",
                        "naturalWidth": 800,
                        "naturalHeight": 800,
                        "delimitations": [
                            {
                                "id": 71,
                                "x": 100,
                                "y": 100,
                                "width": 200,
                                "height": 200,
                                "coordinateType": "ABSOLUTE",
                                "referenceWidth": 500,
                                "referenceHeight": 500,
                            }
                        ],
                    }
                ],
            },
            {
                "id": 8,
                "name": "Black",
                "colorCode": "#000000",
                "images": [
                    {
                        "id": 80,
                        "viewLabel": "FRONT",
                        "url": "https://cdn.example.com/tee-black-front.png",
                        "naturalWidth": 800,
                        "naturalHeight": 800,
                        "delimitations": [
                            {
                                "id": 81,
                                "x": 10,
                                "y": 10,
                                "width": 20,
                                "height": 20,
                                "coordinateType": "PERCENTAGE",
                                "referenceWidth": 0,
                                "referenceHeight": 0,
                            }
                        ],
                    }
                ],
            },
        ],
        "imageUrl": "https://cdn.example.com/tee-default.png",
        "design": {
            "id": 5,
            "name": "Sunset",
            "imageUrl": "https://cdn.example.com/designs/sunset.png",
            "intrinsicWidth": 200,
            "intrinsicHeight": 100,
        },
    }
    payload.update(overrides)
    return payload


def make_product(**overrides: Any) -> CatalogProduct:
    """Validated CatalogProduct built from :func:`product_payload`."""
    return CatalogProduct.model_validate(product_payload(**overrides))


def write_product(path: Path, **overrides: Any) -> Path:
    """Write :func:`product_payload` as JSON to *path*."""
    path.write_text(json.dumps(product_payload(**overrides)), encoding="utf-8")
    return path


@pytest.fixture
def product() -> CatalogProduct:
    return make_product()


@pytest.fixture
def product_file(tmp_path: Path) -> Path:
    return write_product(tmp_path / "product.json")

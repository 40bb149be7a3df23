"""Command: plan the design overlay for one product image."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from printzone.commands._base import ENTITY_ID, SIZE, PzCommand

if TYPE_CHECKING:
    from printzone.commands._context import AppContext
    from printzone.domain.geometry import Size


@click.command(
    cls=PzCommand,
    examples="""\
  printzone plan product.json
  printzone plan product.json --size 1000x1000
  printzone plan product.json --container 400x300
  printzone plan product.json --color 12 --zone-name chest
  printzone --json plan product.json --size 600x600""",
)
@click.argument("product_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--size", "rendered", type=SIZE, default=None, help="Rendered image size (WxH).")
@click.option(
    "--container",
    type=SIZE,
    default=None,
    help="Container the image is fitted into (WxH); ignored with --size.",
)
@click.option(
    "--view", "view_index", type=int, default=None, help="Interactively selected view index."
)
@click.option(
    "--color", "color_id", type=ENTITY_ID, default=None, help="Selected color variant id."
)
@click.option("--zone", "zone_id", type=ENTITY_ID, default=None, help="Print zone id.")
@click.option("--zone-name", default=None, help="Print zone name (e.g. chest).")
@click.pass_obj
def plan(
    app: AppContext,
    product_file: Path,
    rendered: Size | None,
    container: Size | None,
    view_index: int | None,
    color_id: Any,
    zone_id: Any,
    zone_name: str | None,
) -> None:
    """Compute where the design of PRODUCT_FILE is drawn on its image."""
    product = app.load_product(product_file)
    app.emit(
        app.service.plan_overlay(
            product,
            rendered=rendered,
            container=container,
            view_index=view_index,
            color_id=color_id,
            zone_id=zone_id,
            zone_name=zone_name,
        )
    )

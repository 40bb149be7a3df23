"""Command: plan overlays for every color variant of a product."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from printzone.commands._base import SIZE, PzCommand

if TYPE_CHECKING:
    from printzone.commands._context import AppContext
    from printzone.domain.geometry import Size


@click.command(
    cls=PzCommand,
    examples="""\
  printzone batch product.json
  printzone batch product.json --size 1200x1200
  printzone -q batch product.json""",
)
@click.argument("product_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--size", "rendered", type=SIZE, default=None, help="Rendered image size (WxH).")
@click.pass_obj
def batch(app: AppContext, product_file: Path, rendered: Size | None) -> None:
    """Plan one overlay per color variant of PRODUCT_FILE."""
    product = app.load_product(product_file)
    app.emit(app.service.plan_batch(product, rendered=rendered))

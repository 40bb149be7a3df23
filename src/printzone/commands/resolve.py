"""Command: show which image a product resolves to."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from printzone.commands._base import ENTITY_ID, PzCommand

if TYPE_CHECKING:
    from printzone.commands._context import AppContext


@click.command(
    cls=PzCommand,
    examples="""\
  printzone resolve product.json
  printzone resolve product.json --view 1
  printzone resolve product.json --color 12
  printzone -q resolve product.json""",
)
@click.argument("product_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--view", "view_index", type=int, default=None, help="Interactively selected view index."
)
@click.option(
    "--color", "color_id", type=ENTITY_ID, default=None, help="Selected color variant id."
)
@click.pass_obj
def resolve(app: AppContext, product_file: Path, view_index: int | None, color_id: Any) -> None:
    """Resolve the image to display for PRODUCT_FILE."""
    product = app.load_product(product_file)
    app.emit(app.service.resolve_image(product, view_index=view_index, color_id=color_id))

"""Command: bounds-check every print zone of a product."""

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
  printzone check product.json
  printzone check product.json --size 1000x1000
  printzone check product.json --strict""",
)
@click.argument("product_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--size", "rendered", type=SIZE, default=None, help="Check against this size (WxH).")
@click.option("--strict", is_flag=True, help="Exit 1 when any zone has errors.")
@click.pass_obj
def check(app: AppContext, product_file: Path, rendered: Size | None, strict: bool) -> None:
    """Map and bounds-check the print zones of PRODUCT_FILE."""
    product = app.load_product(product_file)
    result = app.service.check_zones(product, rendered=rendered)
    app.emit(result)
    if strict and not result.data.get("healthy", True):
        raise SystemExit(1)

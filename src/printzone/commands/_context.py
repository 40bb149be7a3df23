"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides product loading and centralized result
emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click
from pydantic import ValidationError

from printzone.output.formatters import OutputSettings, format_result
from printzone.services.result import ServiceResult

if TYPE_CHECKING:
    from printzone.config.settings import PrintzoneSettings
    from printzone.domain.models import CatalogProduct
    from printzone.services.composition import CompositionService


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: PrintzoneSettings) -> None:
        self.settings = settings

        from printzone.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from printzone.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def service(self) -> CompositionService:
        from printzone.services.composition import CompositionService

        return CompositionService(self.settings)

    def load_product(self, path: Path) -> CatalogProduct:
        """Read a product JSON file, emitting a failed result on bad input."""
        from printzone.infrastructure.catalog import load_product

        try:
            return load_product(path)
        except (OSError, json.JSONDecodeError) as exc:
            failure = ServiceResult.failure(
                "load_product", "UNREADABLE_PRODUCT", str(exc), path=str(path)
            )
        except ValidationError as exc:
            failure = ServiceResult.failure(
                "load_product",
                "INVALID_PRODUCT",
                f"{path} is not a valid product: {exc.error_count()} validation error(s)",
                path=str(path),
                errors=[
                    {"loc": ".".join(str(p) for p in e["loc"]), "msg": e["msg"]}
                    for e in exc.errors()
                ],
            )
        self.emit(failure)
        raise SystemExit(1)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

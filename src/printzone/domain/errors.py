"""Recoverable domain errors raised by the zone mapper and placement calculator.

Each carries a stable ``code`` used by the service layer when it turns
the error into a fallback warning.
"""

from __future__ import annotations

from typing import Any


class PrintzoneError(Exception):
    """Base class for conditions a caller is expected to recover from."""

    code = "PRINTZONE_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail


class InvalidReference(PrintzoneError):
    """A delimitation's reference dimensions are zero, negative, or missing."""

    code = "INVALID_REFERENCE"


class InvalidDesignAsset(PrintzoneError):
    """A design asset has no usable intrinsic size."""

    code = "INVALID_DESIGN_ASSET"

"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
The CLI and any embedding renderer consume this type. Recoverable
pipeline conditions (no image, bad zone reference, bad design asset)
are reported as warnings on a successful result, never as errors.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"plan_overlay"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues, including every fallback taken.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry span tree when verbose).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Build a failed result carrying a single structured error."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))

    @property
    def fallback(self) -> str | None:
        """Code of the fallback the pipeline took, if any (``data["fallback"]``)."""
        value = self.data.get("fallback")
        return str(value) if value else None

"""BaseService — foundation for printzone services.

Every service receives the resolved :class:`PrintzoneSettings` at
construction time. Services hold no per-call state, so one instance can
serve concurrent render requests.
"""

from __future__ import annotations

import logging
from typing import Any

from printzone.config.settings import PrintzoneSettings

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class CompositionService(BaseService):
            def plan_overlay(self, product, ...) -> ServiceResult:
                ...
    """

    def __init__(self, settings: PrintzoneSettings | None = None) -> None:
        self._settings = settings if settings is not None else PrintzoneSettings()

    @property
    def settings(self) -> PrintzoneSettings:
        return self._settings

    def _record_fallback(
        self,
        code: str,
        message: str,
        warnings: list[str],
        **fields: Any,
    ) -> str:
        """Log a recoverable pipeline condition and add it to *warnings*.

        INVARIANT: fallbacks are warnings, never errors.
        """
        logger.warning("Pipeline fallback %s: %s %s", code, message, fields)
        warnings.append(message)
        return code

"""Image source resolution — pick exactly one displayable image.

The caller hands over a fixed-order list of candidates (see
:func:`printzone.infrastructure.catalog.build_candidates`). The resolver
knows nothing about product field names: the first candidate with a
non-empty url wins.

INVARIANT: an explicit interactive selection, when given, is tried before
every other candidate.
"""

from __future__ import annotations

from collections.abc import Sequence

from printzone.domain.models import ImageCandidate, NoImageAvailable, ResolvedImage


def resolve(
    candidates: Sequence[ImageCandidate],
    interactive_selection: ImageCandidate | None = None,
) -> ResolvedImage | NoImageAvailable:
    """Return the first candidate with a usable url.

    ``None`` and ``""`` both count as absent. Returns
    :class:`NoImageAvailable` when nothing qualifies.
    """
    ordered: list[ImageCandidate] = []
    if interactive_selection is not None:
        ordered.append(interactive_selection)
    ordered.extend(candidates)

    for candidate in ordered:
        if candidate.is_empty:
            continue
        assert candidate.url is not None
        return ResolvedImage(
            url=candidate.url,
            source_kind=candidate.kind,
            image_id=candidate.image_id,
            color_variant_id=candidate.color_variant_id,
            view_label=candidate.view_label,
        )
    return NoImageAvailable(candidates_tried=len(ordered))

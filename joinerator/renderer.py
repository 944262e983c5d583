"""Glyph rendering for Joinerator.

Consumes the pending-mark table produced by the pass executor and
assembles the decorated string. For every character the base character
is emitted first, followed by the drawn marks of each configured
category in generator order.

Glyph selection per character and category:
- allow_unreadable: any glyph of the category
- otherwise: only glyphs whose applicability rule accepts the character
- no applicable glyph: the category is skipped for that character

Marks are drawn uniformly with replacement. When a length budget is
given, each category applies at most the remaining budget and the
budget shrinks by what was applied, so the output never exceeds it.

Characters are visited in a random order and reassembled by position,
so a tight budget is spread over the whole string.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import numpy as np
import structlog

from .executor import Bucket
from .repertoire import Category, Glyph

logger = structlog.get_logger(__name__)


class _ApplicableGlyphs:
    """Memoized applicable-glyph subsets for one render call."""

    def __init__(self, glyphs: Mapping[Category, Sequence[Glyph]], allow_unreadable: bool):
        self._glyphs = glyphs
        self._allow_unreadable = allow_unreadable
        self._cache: dict[tuple[Category, str], list[str]] = {}

    def get(self, category: Category, char: str) -> list[str]:
        key = (category, char)
        if key not in self._cache:
            candidates = self._glyphs.get(category, ())
            if not self._allow_unreadable:
                candidates = [g for g in candidates if g.is_applicable(char)]
            self._cache[key] = [g.codepoint for g in candidates]
        return self._cache[key]


def render(
    bucket: Bucket,
    glyphs: Mapping[Category, Sequence[Glyph]],
    rng: np.random.Generator,
    allow_unreadable: bool = False,
    budget: int | None = None,
) -> str:
    """Render the decorated string.

    Args:
        bucket: Pending marks per character and category.
        glyphs: Glyphs available per category.
        rng: Random source.
        allow_unreadable: Ignore applicability rules.
        budget: Maximum number of marks to append, or None for no cap.

    Returns:
        The input characters, in order, each followed by its marks.
    """
    applicable = _ApplicableGlyphs(glyphs, allow_unreadable)
    segments: list[str] = [""] * len(bucket)
    applied = 0

    for position in rng.permutation(len(bucket)):
        item = bucket.item(position)
        char = item.char
        segment = [char]

        for category, count in item.pending.items():
            if count < 1:
                continue

            candidates = applicable.get(category, char)
            if not candidates:
                continue

            if budget is not None:
                count = min(count, budget)
                budget -= count
                if count == 0:
                    continue

            for index in rng.integers(len(candidates), size=count):
                segment.append(candidates[index])
            applied += count

        segments[position] = "".join(segment)

    logger.debug("marks_rendered", chars=len(bucket), applied=applied, budget_left=budget)
    return "".join(segments)

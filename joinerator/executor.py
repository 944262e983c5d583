"""Pass execution for the glyph distribution engine.

Each pass picks exactly ``bound`` distinct character positions
uniformly at random and gives every picked character one more pending
mark in the pass's category. Positions are picked by filling a boolean
mask with ``bound`` leading True values and shuffling it, which always
yields an exact count with no duplicate draws.

Pending counts are kept column-wise: one integer array per category,
indexed by character position.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np
import structlog

from .planner import PassDescriptor, PassPlan
from .repertoire import Category

logger = structlog.get_logger(__name__)


@dataclass
class BucketItem:
    """Working state of one input character.

    Attributes:
        position: Index of the character in the input.
        char: The base character.
        pending: Pending mark count per category.
    """

    position: int
    char: str
    pending: dict[Category, int]


@dataclass
class Bucket:
    """Pending marks for every character of one input string.

    Attributes:
        chars: Input characters in order.
        pending: Per-category arrays of pending mark counts.
    """

    chars: list[str]
    pending: dict[Category, np.ndarray] = field(default_factory=dict)

    @classmethod
    def create(cls, text: str, categories: Iterable[Category]) -> Bucket:
        """Create an empty bucket with a zeroed counter per category."""
        chars = list(text)
        pending = {c: np.zeros(len(chars), dtype=np.int64) for c in categories}
        return cls(chars=chars, pending=pending)

    def __len__(self) -> int:
        return len(self.chars)

    def item(self, position: int) -> BucketItem:
        return BucketItem(
            position=position,
            char=self.chars[position],
            pending={c: int(counts[position]) for c, counts in self.pending.items()},
        )

    def total_pending(self) -> int:
        """Sum of pending marks over all characters and categories."""
        return int(sum(int(counts.sum()) for counts in self.pending.values()))


def choose_positions(rng: np.random.Generator, size: int, count: int) -> np.ndarray:
    """Choose exactly ``min(count, size)`` of ``size`` positions uniformly at random.

    Args:
        rng: Random source.
        size: Number of positions.
        count: Number of positions to select.

    Returns:
        Boolean mask of length ``size``.
    """
    mask = np.zeros(size, dtype=bool)
    mask[: max(0, count)] = True
    rng.shuffle(mask)
    return mask


def run_pass(
    bucket: Bucket,
    descriptor: PassDescriptor,
    modifier: float,
    rng: np.random.Generator,
) -> int:
    """Run one pass of one category.

    Args:
        bucket: Working state to update in place.
        descriptor: Category descriptor; its remaining passes are decremented.
        modifier: Budget scaling factor applied to the target count.
        rng: Random source.

    Returns:
        Number of characters that received a pending mark.
    """
    if descriptor.remaining_passes <= 0:
        return 0

    descriptor.remaining_passes -= 1
    bound = int(descriptor.target_count * modifier)
    if bound <= 0:
        return 0

    mask = choose_positions(rng, len(bucket), bound)
    bucket.pending[descriptor.category] += mask
    return int(mask.sum())


def run_passes(
    bucket: Bucket,
    plan: PassPlan,
    modifier: float,
    rng: np.random.Generator,
) -> None:
    """Run every planned pass, round by round, updating ``bucket`` in place."""
    for _ in range(plan.total_iterations):
        for descriptor in plan.descriptors:
            run_pass(bucket, descriptor, modifier, rng)

    logger.debug(
        "passes_executed",
        rounds=plan.total_iterations,
        modifier=modifier,
        pending_marks=bucket.total_pending(),
    )

"""Pass planning for the glyph distribution engine.

Turns the per-category generator settings into concrete pass
descriptors for one input string:

    target_count        = frequency realized against the input length
    remaining_passes    = stacking
    total_target_marks  = sum(target_count * stacking)
    total_iterations    = max(stacking)

Categories with zero stacking or a zero target contribute nothing; the
executor simply skips them once their passes run out.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from .options import GeneratorOptions
from .repertoire import Category

logger = structlog.get_logger(__name__)


@dataclass
class PassDescriptor:
    """Scheduling state of one category.

    Attributes:
        category: Attachment category.
        remaining_passes: Passes still to run; decremented by the executor.
        target_count: Characters picked per pass before budget scaling.
    """

    category: Category
    remaining_passes: int
    target_count: int

    @property
    def planned_marks(self) -> int:
        """Marks this category contributes across all of its passes."""
        return self.target_count * self.remaining_passes


@dataclass
class PassPlan:
    """Pass descriptors for one input, in generator order.

    Attributes:
        descriptors: One descriptor per configured category.
        total_target_marks: Sum of planned marks across categories.
        total_iterations: Number of outer scheduling rounds.
    """

    descriptors: list[PassDescriptor] = field(default_factory=list)
    total_target_marks: int = 0
    total_iterations: int = 0


def plan_passes(char_count: int, generator: Iterable[GeneratorOptions]) -> PassPlan:
    """Build the pass plan for an input of ``char_count`` characters.

    Args:
        char_count: Number of characters (code points) in the input.
        generator: Generator settings, one entry per category.

    Returns:
        PassPlan with freshly initialized descriptors.
    """
    plan = PassPlan()

    for options in generator:
        descriptor = PassDescriptor(
            category=options.category,
            remaining_passes=options.stacking,
            target_count=options.frequency.realize(char_count),
        )
        plan.descriptors.append(descriptor)
        plan.total_target_marks += descriptor.planned_marks
        plan.total_iterations = max(plan.total_iterations, descriptor.remaining_passes)

    logger.debug(
        "passes_planned",
        char_count=char_count,
        categories=len(plan.descriptors),
        total_target_marks=plan.total_target_marks,
        total_iterations=plan.total_iterations,
    )
    return plan

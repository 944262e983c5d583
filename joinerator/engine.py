"""The Joinerator engine.

Wires the planner, executor and renderer into a single call:

    plan passes -> run passes -> render -> return

The engine keeps no state between calls other than its random source.
It is not safe to share one instance between threads; create one engine
per thread instead.
"""

from __future__ import annotations

import numpy as np
import structlog

from .executor import Bucket, run_passes
from .options import Options
from .planner import plan_passes
from .renderer import render
from .repertoire import Category, Glyph

logger = structlog.get_logger(__name__)


class Joinerator:
    """Adds Unicode combining glyphs to strings.

    Args:
        options: Validated options from build_options().
        rng: Random source. Pass a seeded generator for reproducible output.
    """

    def __init__(self, options: Options, rng: np.random.Generator | None = None):
        self.options = options
        self.rng = rng if rng is not None else np.random.default_rng()
        self._glyphs: dict[Category, tuple[Glyph, ...]] = {
            g.category: options.repertoire.glyphs_for(g.category) for g in options.generator
        }

    def modifier(self, char_count: int, total_target_marks: int) -> float:
        """Scale factor applied to every per-pass target.

        Without a limit the targets are used as configured. With a limit
        they are scaled by the budget left after the base characters
        divided by the planned marks, which grows them when the limit
        leaves more room than the plan needs.
        """
        if self.options.limit is None:
            return 1.0
        if total_target_marks == 0:
            return 0.0
        remaining = self.options.limit - char_count
        return remaining / total_target_marks

    def process(self, text: str) -> str:
        """Return a copy of ``text`` with combining glyphs added.

        The frequency and distribution of the glyphs follow the generator
        options. If a length limit is set and the input already reaches
        it, the input is returned unchanged.
        """
        char_count = len(text)
        limit = self.options.limit
        if limit is not None and limit <= char_count:
            logger.debug("limit_reached", char_count=char_count, limit=limit)
            return text

        plan = plan_passes(char_count, self.options.generator)
        bucket = Bucket.create(text, self._glyphs.keys())
        run_passes(bucket, plan, self.modifier(char_count, plan.total_target_marks), self.rng)

        budget = None if limit is None else limit - char_count
        return render(
            bucket,
            self._glyphs,
            self.rng,
            allow_unreadable=self.options.allow_unreadable,
            budget=budget,
        )

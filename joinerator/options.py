"""Generator configuration for Joinerator.

Options are built once per run and are immutable afterwards. All
validation happens here so the engine can assume well-formed input:
a frequency outside its domain, a duplicated or unknown category, or a
non-positive length limit is rejected with a ConfigurationError before
any text is processed.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .repertoire import Category, Repertoire


class ConfigurationError(ValueError):
    """Raised when generator options are outside their documented domain."""


@dataclass(frozen=True)
class Percentage:
    """A per-pass target expressed as a fraction of the input length.

    Attributes:
        value: Fraction in (0, 1].
    """

    value: float

    def __post_init__(self) -> None:
        if not (0.0 < self.value <= 1.0):
            raise ConfigurationError(f"Percentage must be in (0, 1], got {self.value}")

    def realize(self, char_count: int) -> int:
        """Target mark count for one pass over ``char_count`` characters (truncated)."""
        return int(self.value * char_count)


@dataclass(frozen=True)
class Fixed:
    """A per-pass target expressed as an absolute mark count.

    Attributes:
        count: Positive number of characters picked per pass.
    """

    count: int

    def __post_init__(self) -> None:
        if self.count <= 0:
            raise ConfigurationError(f"Fixed frequency must be positive, got {self.count}")

    def realize(self, char_count: int) -> int:
        return self.count


Frequency = Percentage | Fixed


@dataclass(frozen=True)
class GeneratorOptions:
    """Mark generation settings for one category.

    Attributes:
        category: Attachment category the marks are drawn from.
        frequency: Per-pass target count.
        stacking: Number of passes; 0 disables the category.
    """

    category: Category
    frequency: Frequency
    stacking: int = 1


@dataclass(frozen=True)
class Options:
    """Validated engine input. Construct with build_options()."""

    repertoire: Repertoire
    generator: tuple[GeneratorOptions, ...]
    allow_unreadable: bool = False
    limit: int | None = None


# Marks above 60% of the characters; below disabled
DEFAULT_GENERATOR: tuple[GeneratorOptions, ...] = (
    GeneratorOptions(category=Category.ABOVE, frequency=Percentage(0.6), stacking=1),
    GeneratorOptions(category=Category.BELOW, frequency=Percentage(0.6), stacking=0),
)


def parse_frequency(text: str) -> Frequency:
    """Parse a frequency from its textual form.

    Args:
        text: Either a percentage ("60%") or a positive integer ("3").

    Returns:
        Percentage or Fixed.

    Raises:
        ConfigurationError: If the text is not a valid frequency.
    """
    clean = text.strip()
    try:
        if clean.endswith("%"):
            return Percentage(float(clean[:-1]) / 100)
        return Fixed(int(clean))
    except ConfigurationError:
        raise
    except ValueError as e:
        raise ConfigurationError(f"Invalid frequency '{text}'. Use a percentage (60%) or a count (3)") from e


def build_options(
    repertoire: Repertoire,
    generator: Iterable[GeneratorOptions] = DEFAULT_GENERATOR,
    allow_unreadable: bool = False,
    limit: int | None = None,
) -> Options:
    """Validate settings and build an Options value.

    Args:
        repertoire: Loaded repertoire to draw glyphs from.
        generator: One entry per category in use.
        allow_unreadable: Attach glyphs regardless of their applicability rule.
        limit: Maximum output length in characters, or None for no cap.

    Returns:
        Immutable Options.

    Raises:
        ConfigurationError: If any setting is out of its domain.
    """
    entries = tuple(generator)
    seen: set[Category] = set()

    for entry in entries:
        if not isinstance(entry.category, Category):
            valid = ", ".join(c.value for c in Category)
            raise ConfigurationError(f"Unknown category '{entry.category}'. Valid categories: {valid}")
        if entry.category in seen:
            raise ConfigurationError(f"Category {entry.category.value} configured more than once")
        if not isinstance(entry.frequency, (Percentage, Fixed)):
            raise ConfigurationError(f"Invalid frequency for {entry.category.value}: {entry.frequency!r}")
        if entry.stacking < 0:
            raise ConfigurationError(f"Stacking for {entry.category.value} must be non-negative, got {entry.stacking}")
        seen.add(entry.category)

    if limit is not None and limit <= 0:
        raise ConfigurationError(f"Length limit must be a positive integer, got {limit}")

    return Options(
        repertoire=repertoire,
        generator=entries,
        allow_unreadable=allow_unreadable,
        limit=limit,
    )

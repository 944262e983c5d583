"""Glyph repertoires for Joinerator.

A repertoire is a named, immutable collection of combining glyphs. Each
glyph carries the category it attaches in (above, below or through the
base character) and a regular expression deciding which base characters
it may be combined onto.

Built-in repertoires are defined here and looked up by name. Additional
repertoires can be loaded from JSON documents; malformed documents are
rejected at load time so the engine never sees an invalid glyph.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = structlog.get_logger(__name__)


class Category(str, enum.Enum):
    """Attachment position of a combining glyph relative to its base character."""

    ABOVE = "ABOVE"
    BELOW = "BELOW"
    THROUGH = "THROUGH"


@dataclass(frozen=True)
class Glyph:
    """A combining glyph.

    Attributes:
        codepoint: The combining character itself (a one-character string).
        position: Attachment category.
        combines: Compiled pattern tested against a single base character.
    """

    codepoint: str
    position: Category
    combines: re.Pattern

    def is_applicable(self, char: str) -> bool:
        """True if this glyph may be attached to the base character ``char``."""
        return self.combines.search(char) is not None


@dataclass(frozen=True)
class Repertoire:
    """A named collection of glyphs.

    Attributes:
        name: Unique name used to select the repertoire.
        description: One-line human-readable description.
        glyphs: Glyphs in declaration order.
    """

    name: str
    description: str
    glyphs: tuple[Glyph, ...]

    def glyphs_for(self, category: Category) -> tuple[Glyph, ...]:
        """All glyphs of one category, in declaration order. May be empty."""
        return tuple(g for g in self.glyphs if g.position == category)

    def category_counts(self) -> dict[str, int]:
        """Number of glyphs per category name."""
        return {c.value: len(self.glyphs_for(c)) for c in Category}


# Combining marks grouped by attachment position (U+0300 block)
ABOVE_CODEPOINTS = [
    0x0300, 0x0301, 0x0302, 0x0303, 0x0304, 0x0305, 0x0306, 0x0307,
    0x0308, 0x0309, 0x030A, 0x030B, 0x030C, 0x030D, 0x030E, 0x030F,
    0x0310, 0x0311, 0x0312, 0x0313, 0x0314, 0x0315, 0x031A, 0x031B,
    0x033D, 0x033E, 0x033F, 0x0340, 0x0341, 0x0342, 0x0343, 0x0344,
    0x0346, 0x034A, 0x034B, 0x034C, 0x0350, 0x0351, 0x0352, 0x0357,
    0x0358, 0x035B, 0x0363, 0x0364, 0x0365, 0x0366, 0x0367, 0x0368,
    0x0369, 0x036A, 0x036B, 0x036C, 0x036D, 0x036E, 0x036F,
]

BELOW_CODEPOINTS = [
    0x0316, 0x0317, 0x0318, 0x0319, 0x031C, 0x031D, 0x031E,
    0x031F, 0x0320, 0x0321, 0x0323, 0x0324, 0x0325, 0x0326, 0x0327,
    0x0328, 0x0329, 0x032A, 0x032B, 0x032C, 0x032D, 0x032E, 0x032F,
    0x0330, 0x0331, 0x0332, 0x0333, 0x0339, 0x033A, 0x033B, 0x033C,
    0x0345, 0x0347, 0x0348, 0x0349, 0x034D, 0x034E, 0x0353, 0x0354,
    0x0355, 0x0356, 0x0359, 0x035A,
]

THROUGH_CODEPOINTS = [0x0334, 0x0335, 0x0336, 0x0337, 0x0338]

# Applicability rules
ANY = re.compile(r"(?s).")
VISIBLE = re.compile(r"\S")
ALPHANUMERIC = re.compile(r"[^\W_]")


def _glyphs(codepoints: list[int], position: Category, combines: re.Pattern) -> list[Glyph]:
    """Build one glyph per code point with a shared category and rule."""
    return [Glyph(codepoint=chr(cp), position=position, combines=combines) for cp in codepoints]


def _standard_glyphs(combines: re.Pattern) -> tuple[Glyph, ...]:
    return tuple(
        _glyphs(ABOVE_CODEPOINTS, Category.ABOVE, combines)
        + _glyphs(BELOW_CODEPOINTS, Category.BELOW, combines)
        + _glyphs(THROUGH_CODEPOINTS, Category.THROUGH, combines)
    )


REPERTOIRES: list[Repertoire] = [
    Repertoire(
        name="default",
        description="Marks above, below and through visible characters",
        glyphs=_standard_glyphs(VISIBLE),
    ),
    Repertoire(
        name="full",
        description="Marks above, below and through every character, whitespace included",
        glyphs=_standard_glyphs(ANY),
    ),
    Repertoire(
        name="light",
        description="Marks above letters and digits only",
        glyphs=tuple(_glyphs(ABOVE_CODEPOINTS, Category.ABOVE, ALPHANUMERIC)),
    ),
    Repertoire(
        name="strike",
        description="Overlay strokes through visible characters",
        glyphs=tuple(_glyphs(THROUGH_CODEPOINTS, Category.THROUGH, VISIBLE)),
    ),
]

REPERTOIRE_INDEX: dict[str, Repertoire] = {r.name: r for r in REPERTOIRES}


def select_repertoire(name: str, index: dict[str, Repertoire] | None = None) -> Repertoire:
    """Select a repertoire by name.

    Args:
        name: Repertoire name (default, full, light, strike, or any name
              present in ``index``).
        index: Name-to-repertoire mapping. Defaults to the built-ins.

    Returns:
        The requested Repertoire.

    Raises:
        ValueError: If name is not recognized.
    """
    index = REPERTOIRE_INDEX if index is None else index
    if name not in index:
        valid = ", ".join(index.keys())
        raise ValueError(f"Unknown repertoire '{name}'. Valid repertoires: {valid}")
    return index[name]


# --------------------------------------------------------------------------
# JSON loading
# --------------------------------------------------------------------------


class GlyphModel(BaseModel):
    """Schema of one glyph in a repertoire document."""

    codepoint: str = Field(..., description="Combining character, or U+XXXX notation")
    position: Category
    combines: str = Field(default=".", description="Regex matched against one base character")

    @field_validator("codepoint")
    @classmethod
    def _single_codepoint(cls, value: str) -> str:
        if value[:2].upper() == "U+":
            try:
                value = chr(int(value[2:], 16))
            except (ValueError, OverflowError) as e:
                raise ValueError(f"Invalid code point notation '{value}'") from e
        if len(value) != 1:
            raise ValueError(f"Code point must be a single character, got {len(value)}")
        return value

    @field_validator("combines")
    @classmethod
    def _valid_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"Invalid combines pattern '{value}': {e}") from e
        return value


class RepertoireModel(BaseModel):
    """Schema of a repertoire document."""

    name: str = Field(..., min_length=1)
    description: str = ""
    glyphs: list[GlyphModel]


def load_repertoire(data: str | bytes) -> Repertoire:
    """Load a repertoire from a JSON document.

    Args:
        data: JSON text of the form
              ``{"name": ..., "description": ..., "glyphs": [...]}``.

    Returns:
        An immutable Repertoire with pre-compiled applicability rules.

    Raises:
        ValueError: If the document is malformed.
    """
    try:
        model = RepertoireModel.model_validate_json(data)
    except ValidationError as e:
        raise ValueError(f"Invalid repertoire: {e}") from e

    glyphs = tuple(
        Glyph(codepoint=g.codepoint, position=g.position, combines=re.compile(g.combines))
        for g in model.glyphs
    )
    logger.debug("repertoire_loaded", name=model.name, glyphs=len(glyphs))
    return Repertoire(name=model.name, description=model.description, glyphs=glyphs)


def build_index(*repertoires: Repertoire) -> dict[str, Repertoire]:
    """Combine the built-ins with extra repertoires into a name index.

    Raises:
        ValueError: If two repertoires share a name.
    """
    index = dict(REPERTOIRE_INDEX)
    for rep in repertoires:
        if rep.name in index:
            raise ValueError(f"Duplicate repertoire name '{rep.name}'")
        index[rep.name] = rep
    return index

"""Text transformers applied before glyphs are added.

Every transformer is a plain ``str -> str`` function. They run in the
order the caller lists them and their output becomes the engine's
input.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

import numpy as np

Transformer = Callable[[str, np.random.Generator], str]

# (pattern, replacement) pairs, applied in order
UWU_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"([aeuio])cky\b", re.IGNORECASE), r"\g<1>cky-w\g<1>cky"),
    (re.compile(r"\b(f)(u)", re.IGNORECASE), r"\g<1>w\g<2>"),
    (re.compile(r"\blo+ve\b", re.IGNORECASE), "wuv"),
    (re.compile(r"\b(n)o(t)\b", re.IGNORECASE), r"\g<1>aw\g<2>"),
    (re.compile(r"\bwould\b", re.IGNORECASE), "wud"),
    (re.compile(r"\b(c)al(l)", re.IGNORECASE), r"\g<1>aw\g<2>"),
    (re.compile(r"\bl(i)", re.IGNORECASE), r"w\g<1>"),
    (re.compile(r"tt", re.IGNORECASE), "dd"),
    (re.compile(r"e(r+)y", re.IGNORECASE), r"e\g<1>\g<1>y"),
    (re.compile(r"\bbu(t)", re.IGNORECASE), r"bwu\g<1>"),
    (re.compile(r"r\B", re.IGNORECASE), "w"),
    (re.compile(r"loo", re.IGNORECASE), "woo"),
    (re.compile(r"\bwha", re.IGNORECASE), "wu"),
    (re.compile(r"\boh\b", re.IGNORECASE), "owh"),
    (re.compile(r"\Bvy\b", re.IGNORECASE), "vwy"),
    (re.compile(r"\bgod", re.IGNORECASE), "gawd"),
    (re.compile(r"\B(s)(es)\b", re.IGNORECASE), r"\g<1>i\g<2>"),
    (re.compile(r"\B(le)s\b", re.IGNORECASE), r"\g<1>z"),
    (re.compile(r"\bun\B", re.IGNORECASE), "uwn"),
    (re.compile(r"\Bpos\B", re.IGNORECASE), "paws"),
]


def upper_case(text: str, rng: np.random.Generator | None = None) -> str:
    return text.upper()


def lower_case(text: str, rng: np.random.Generator | None = None) -> str:
    return text.lower()


def random_case(text: str, rng: np.random.Generator | None = None) -> str:
    """Upper- or lower-case each character with equal probability."""
    rng = rng if rng is not None else np.random.default_rng()
    flips = rng.random(len(text)) < 0.5
    return "".join(c.upper() if flip else c.lower() for c, flip in zip(text, flips))


def uwuize(text: str, rng: np.random.Generator | None = None) -> str:
    """UwU-ize text with a fixed sequence of regex substitutions."""
    for pattern, replacement in UWU_RULES:
        text = pattern.sub(replacement, text)
    return text


TRANSFORMERS: dict[str, Transformer] = {
    "upper": upper_case,
    "lower": lower_case,
    "random": random_case,
    "uwu": uwuize,
}


def select_transformer(name: str) -> Transformer:
    """Select a transformer by name.

    Raises:
        ValueError: If name is not recognized.
    """
    if name not in TRANSFORMERS:
        valid = ", ".join(TRANSFORMERS.keys())
        raise ValueError(f"Unknown transformer '{name}'. Valid transformers: {valid}")
    return TRANSFORMERS[name]


def apply_transformers(
    text: str,
    names: Iterable[str],
    rng: np.random.Generator | None = None,
) -> str:
    """Apply the named transformers to ``text`` in order."""
    for name in names:
        text = select_transformer(name)(text, rng)
    return text

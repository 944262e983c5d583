#!/usr/bin/env python3
"""Basic usage example for Joinerator.

Demonstrates decorating text with combining glyphs under different
generator settings, length limits and transformers.

Usage:
    python examples/basic_usage.py
"""

import json
import os
import sys

import numpy as np

# Add parent directory to path for direct script execution
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from joinerator.engine import Joinerator
from joinerator.options import Fixed, GeneratorOptions, Percentage, build_options
from joinerator.repertoire import Category, build_index, load_repertoire, select_repertoire
from joinerator.transform import apply_transformers


def example_defaults():
    """Decorate text with the default settings."""
    print("=" * 60)
    print("Example 1: Default Settings")
    print("=" * 60)

    text = "hello world"
    engine = Joinerator(build_options(select_repertoire("default")), np.random.default_rng(1))
    result = engine.process(text)
    print(f"  Input:   {text}")
    print(f"  Output:  {result}")
    print(f"  Length:  {len(text)} -> {len(result)}")
    print()


def example_stacking():
    """Stack several passes in every category."""
    print("=" * 60)
    print("Example 2: Heavy Stacking")
    print("=" * 60)

    generator = [
        GeneratorOptions(Category.ABOVE, Percentage(0.8), 4),
        GeneratorOptions(Category.BELOW, Percentage(0.8), 4),
        GeneratorOptions(Category.THROUGH, Fixed(2), 1),
    ]
    engine = Joinerator(build_options(select_repertoire("default"), generator), np.random.default_rng(2))
    print(f"  Output:  {engine.process('he comes')}")
    print()


def example_length_limit():
    """Keep the output within a length budget."""
    print("=" * 60)
    print("Example 3: Length Limits")
    print("=" * 60)

    text = "limited"
    generator = [GeneratorOptions(Category.ABOVE, Percentage(1.0), 5)]
    for limit in [5, 10, 20, 40]:
        options = build_options(select_repertoire("full"), generator, limit=limit)
        result = Joinerator(options, np.random.default_rng(3)).process(text)
        print(f"  limit={limit:3d}  length={len(result):3d}  {result}")
    print()


def example_custom_repertoire():
    """Load a repertoire from JSON and transform text first."""
    print("=" * 60)
    print("Example 4: Custom Repertoire and Transformers")
    print("=" * 60)

    document = json.dumps(
        {
            "name": "vowels",
            "description": "Rings over vowels",
            "glyphs": [{"codepoint": "U+030A", "position": "ABOVE", "combines": "[aeiouAEIOU]"}],
        }
    )
    index = build_index(load_repertoire(document))
    generator = [GeneratorOptions(Category.ABOVE, Percentage(1.0), 1)]
    engine = Joinerator(build_options(select_repertoire("vowels", index), generator))

    text = apply_transformers("I would love some coffee", ["uwu", "upper"])
    print(f"  Transformed: {text}")
    print(f"  Output:      {engine.process(text)}")
    print()


if __name__ == "__main__":
    example_defaults()
    example_stacking()
    example_length_limit()
    example_custom_repertoire()
    print("All examples completed successfully.")

"""Joinerator -- decorate text with stacked Unicode combining marks.

Layers combining glyphs above, below and through each base character of
an input string. Mark density is controlled per attachment category by a
frequency (how many characters are picked in one pass) and a stacking
depth (how many passes run), with an optional cap on the output length.

The engine is a pure text-in, text-out pipeline:
plan passes -> run passes -> render marks.
"""

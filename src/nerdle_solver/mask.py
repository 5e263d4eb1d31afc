"""
mask.py

Equation alphabet and Nerdle-style feedback masks.

Mask states:
- 2 = exact (green), 1 = present elsewhere (purple), 0 = absent (black)

Human input accepts either alphabet, one character per tile:
  G/2, P/1, B/0   e.g. "GBPPBGGB" or "20110220"
"""

from __future__ import annotations

import enum
from collections import Counter
from typing import Iterable, Tuple

from .errors import LengthMismatch, MalformedGuess, MalformedMask

DIGITS = "0123456789"
OPERATORS = "+-*/"
POWERS = "²³"
EQUALS = "="
PARENS = "()"
ALPHABET = frozenset(DIGITS + OPERATORS + POWERS + EQUALS + PARENS)

# ASCII stand-ins for the superscript tiles, easier to type on a keyboard
POWER_SUBSTITUTES = {"s": "²", "c": "³"}


class MaskState(enum.IntEnum):
    ABSENT = 0
    PRESENT = 1
    EXACT = 2


Mask = Tuple[MaskState, ...]

_MASK_CHARS = {
    "g": MaskState.EXACT,
    "2": MaskState.EXACT,
    "p": MaskState.PRESENT,
    "1": MaskState.PRESENT,
    "b": MaskState.ABSENT,
    "0": MaskState.ABSENT,
}

_GLYPHS = {
    MaskState.EXACT: "\U0001f7e9",
    MaskState.PRESENT: "\U0001f7ea",
    MaskState.ABSENT: "⬛",
}


# compute Nerdle feedback for a guess against the true equation
def compute_mask(guess: str, truth: str) -> Mask:
    """
    Repeated characters are handled like Wordle does: exact matches claim their
    character first, then misplaced ones take whatever is left of truth's count.
    """
    if len(guess) != len(truth):
        raise LengthMismatch(guess, truth)

    # first pass: exact
    res = [MaskState.ABSENT] * len(guess)
    available = Counter(truth)

    for i, (g_ch, t_ch) in enumerate(zip(guess, truth)):
        if g_ch == t_ch:
            res[i] = MaskState.EXACT
            available[g_ch] -= 1

    # second pass: present (only for non-exact)
    for i, g_ch in enumerate(guess):
        if res[i] != MaskState.EXACT and available[g_ch] > 0:
            res[i] = MaskState.PRESENT
            available[g_ch] -= 1

    return tuple(res)


def solved_mask(length: int) -> Mask:
    return (MaskState.EXACT,) * length


# normalize_guess turns typed input like '3s+1=10' into the candidate file's form '3²+1=10'
def normalize_guess(s: str, length: int) -> str:
    guess = "".join(POWER_SUBSTITUTES.get(ch, ch) for ch in s.strip())
    bad = sorted({ch for ch in guess if ch not in ALPHABET})
    if bad:
        raise MalformedGuess(f"guess: invalid character(s) {' '.join(repr(ch) for ch in bad)} in {s.strip()!r}")
    if len(guess) != length:
        raise MalformedGuess(f"guess: {guess!r} has {len(guess)} characters, expected {length}")
    return guess


# parse_mask converts a string like 'GBPPBGGB' or '20110220' into a Mask tuple
def parse_mask(s: str, length: int) -> Mask:
    s = s.strip()
    if len(s) != length:
        raise MalformedMask(
            f"mask: {s!r} has {len(s)} characters, expected {length} of [G,P,B] or [2,1,0]"
        )
    out = []
    for i, ch in enumerate(s):
        try:
            out.append(_MASK_CHARS[ch.lower()])
        except KeyError:
            raise MalformedMask(
                f"mask: invalid character {ch!r} at position {i + 1}; use G/2, P/1 or B/0"
            ) from None
    return tuple(out)


def format_mask(mask: Iterable[int]) -> str:
    return "".join("BPG"[m] for m in mask)


def mask_glyphs(mask: Iterable[int]) -> str:
    return "".join(_GLYPHS[MaskState(m)] for m in mask)

"""
Dice formula parsing.

Users type formulas by hand ("2d6+4", "d20-1", "2d12+d6+d4+5", "3"), so
both parsers here are total: any string yields a result and nothing raises.
Garbage falls back to a plain d20 in the simple parser and is skipped
term-by-term in the advanced one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_SIMPLE = re.compile(r"^(\d{0,9})d(\d{1,9})([+-]\d{1,9})?$")
_INTEGER = re.compile(r"^[+-]?\d{1,9}$")
_TERM = re.compile(r"[+-](\d{0,9}d\d{1,9}(?!\d)|\d{1,9}(?![\dd]))")
_DICE_TERM = re.compile(r"^(\d*)d(\d+)$")

# Most dice a single term may roll; larger counts are unparseable.
MAX_TERM_DICE = 100


@dataclass(frozen=True)
class SimpleFormula:
    """A single NdS+M expression."""

    count: int
    sides: int
    modifier: int = 0


FALLBACK = SimpleFormula(count=1, sides=20, modifier=0)


@dataclass(frozen=True)
class DiceGroup:
    count: int
    sides: int


@dataclass
class AdvancedFormula:
    """A multi-term expression exploded into one group per die."""

    dice_groups: list[DiceGroup] = field(default_factory=list)
    modifier: int = 0


def parse_simple(formula: str) -> SimpleFormula:
    """Parse "[N]dS[+/-M]" into (count, sides, modifier).

    A bare integer is a constant with zero dice. Anything unparseable,
    including numbers over nine digits or more than MAX_TERM_DICE dice,
    becomes 1d20+0.
    """
    text = formula.strip().lower()
    match = _SIMPLE.match(text)
    if match is None:
        constant = _INTEGER.match(text)
        if constant:
            return SimpleFormula(count=0, sides=0, modifier=int(constant.group()))
        return FALLBACK

    count, sides, modifier = match.groups()
    count = int(count) if count else 1
    if count > MAX_TERM_DICE:
        return FALLBACK
    return SimpleFormula(
        count=count,
        sides=int(sides),
        modifier=int(modifier) if modifier else 0,
    )


def parse_advanced(formula: str) -> AdvancedFormula:
    """Parse a multi-term formula like "2d12+d6+d4+5".

    Each dice term is exploded into ``count`` separate single-die groups
    so that later stages can address (and assign roles to) individual
    dice. Flat terms are summed, with their sign, into the modifier.
    The sign of a dice term is ignored: "-d4" still rolls a d4. Terms with
    numbers over nine digits or more than MAX_TERM_DICE dice are skipped.
    """
    text = re.sub(r"\s", "", formula).lower()
    if not text.startswith(("+", "-")):
        text = "+" + text

    result = AdvancedFormula()
    for match in _TERM.finditer(text):
        part = match.group()
        sign = -1 if part[0] == "-" else 1
        expr = part[1:]
        dice = _DICE_TERM.match(expr)
        if dice:
            count = int(dice.group(1)) if dice.group(1) else 1
            if count > MAX_TERM_DICE:
                continue
            sides = int(dice.group(2))
            result.dice_groups.extend(DiceGroup(1, sides) for _ in range(count))
        else:
            result.modifier += sign * int(expr)
    return result

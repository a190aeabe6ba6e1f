"""
Stat references: "namespace:key" strings resolved against a stat sheet.

A step can add a character stat to its roll. The reference is stored as a
namespaced string ("attribute:str", "skill:arcana", "trait:agility",
"custom:<id>"); the host extension also writes the older namespaces
"dnd_attr", "dnd_skill" and "dh", which are accepted as aliases. Parsing
happens once, in StatRef.parse, and every lookup goes through the dispatch
tables below.

Resolution never fails: an empty reference, an unknown namespace, or a key
that isn't on the sheet all resolve to 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fateweaver.records import CharacterStats
from fateweaver.types import StatNamespace

_NAMESPACE_ALIASES: dict[str, StatNamespace] = {
    "attribute": "attribute",
    "dnd_attr": "attribute",
    "skill": "skill",
    "dnd_skill": "skill",
    "trait": "trait",
    "dh": "trait",
    "custom": "custom",
}


@dataclass(frozen=True)
class StatRef:
    namespace: StatNamespace
    key: str

    @classmethod
    def parse(cls, ref: str) -> StatRef:
        namespace, _, key = ref.partition(":")
        return cls(_NAMESPACE_ALIASES.get(namespace.strip(), "unknown"), key.strip())


def ability_modifier(score: int) -> int:
    """The d20 ability modifier: floor((score - 10) / 2)."""
    return (score - 10) // 2


def _attribute_value(stats: CharacterStats, key: str) -> int:
    return ability_modifier(stats.attributes.get(key) or 10)


def _custom_value(stats: CharacterStats, key: str) -> int:
    stat = stats.custom_stat(key)
    return stat.value if stat else 0


_VALUE_RESOLVERS: dict[StatNamespace, Callable[[CharacterStats, str], int]] = {
    "attribute": _attribute_value,
    "skill": lambda stats, key: stats.skills.get(key) or 0,
    "trait": lambda stats, key: stats.traits.get(key) or 0,
    "custom": _custom_value,
    "unknown": lambda stats, key: 0,
}


def _custom_label(stats: CharacterStats, key: str) -> str:
    stat = stats.custom_stat(key)
    return stat.name if stat and stat.name else "Custom"


_LABEL_RESOLVERS: dict[StatNamespace, Callable[[CharacterStats, str], str]] = {
    "attribute": lambda stats, key: key.upper(),
    "skill": lambda stats, key: key[:1].upper() + key[1:],
    "trait": lambda stats, key: key[:1].upper() + key[1:],
    "custom": _custom_label,
    "unknown": lambda stats, key: "Unknown",
}


def resolve_value(stats: CharacterStats | None, ref: str | None) -> int:
    """Return the numeric modifier ref contributes to a roll."""
    if not ref or stats is None:
        return 0
    parsed = StatRef.parse(ref)
    return _VALUE_RESOLVERS[parsed.namespace](stats, parsed.key)


def resolve_label(stats: CharacterStats | None, ref: str | None) -> str:
    """Return a short display label for ref."""
    if not ref:
        return ""
    parsed = StatRef.parse(ref)
    return _LABEL_RESOLVERS[parsed.namespace](stats or CharacterStats(), parsed.key)


def display_formula(formula: str, stats: CharacterStats | None, ref: str | None) -> str:
    """Append the stat modifier to a formula for display.

    "1d20+2" with a +3 dexterity becomes "1d20+2 +3 (DEX)". A zero (or
    missing) stat leaves the formula as written.
    """
    value = resolve_value(stats, ref)
    if value == 0:
        return formula
    return f"{formula} {value:+d} ({resolve_label(stats, ref)})"

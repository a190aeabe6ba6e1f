"""
Duality bookkeeping driven by roll outcomes.

After a chain resolves, each duality outcome moves the character's
resources: rolling with hope earns a hope point, a crit earns a hope point
and clears a stress, and rolling with fear hands the GM a fear point.
These functions only compute the new values; storing them is up to the
caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from fateweaver.config import settings
from fateweaver.records import StepResult


@dataclass(frozen=True)
class DualityVitals:
    hope: int = 2
    hope_max: int = 6
    stress: int = 0
    stress_max: int = 6


def _outcomes(results: Iterable[StepResult]) -> list[str]:
    return [
        r.duality_outcome for r in results
        if not r.skipped and r.kind == "duality" and r.duality_outcome
    ]


def apply_outcomes(vitals: DualityVitals, results: Iterable[StepResult]) -> DualityVitals:
    """Return vitals after every duality outcome in results."""
    hope, stress = vitals.hope, vitals.stress
    for outcome in _outcomes(results):
        if outcome in ("hope", "crit"):
            hope = min(hope + 1, vitals.hope_max)
        if outcome == "crit":
            stress = max(stress - 1, 0)
    return replace(vitals, hope=hope, stress=stress)


def fear_after(results: Iterable[StepResult], fear: int, fear_max: int | None = None) -> int:
    """Return the GM's fear pool after every fear outcome in results."""
    if fear_max is None:
        fear_max = settings.fear_max
    gained = _outcomes(results).count("fear")
    return min(fear + gained, max(fear, fear_max))

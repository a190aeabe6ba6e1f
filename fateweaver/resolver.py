"""
Step resolution: turning rolled faces into a StepResult.

Two crit rules live here. Standard steps use "maximize and add": a crit
adds every die's maximum face on top of what was actually rolled, rather
than rolling extra dice. Duality steps crit when the hope and fear dice
match, whatever the crit flags say.

Missing die faces count as 0; nothing here raises on incomplete input.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from fateweaver.records import DieRequest, Step, StepPlan, StepResult
from fateweaver.types import DualityOutcome


def classify_duality(hope: int, fear: int) -> DualityOutcome:
    """Matching dice are a crit; otherwise the higher die wins, hope on ties."""
    if hope == fear:
        return "crit"
    if hope >= fear:
        return "hope"
    return "fear"


def _face(die_values: Mapping[str, int], die: DieRequest | None) -> int:
    if die is None:
        return 0
    return die_values.get(die.id) or 0


def _resolve_duality(step: Step, die_values: Mapping[str, int], dice: Sequence[DieRequest], total_modifier: int, formula: str) -> StepResult:
    hope = _face(die_values, next((d for d in dice if d.role == "hope"), None))
    fear = _face(die_values, next((d for d in dice if d.role == "fear"), None))
    extras = [_face(die_values, d) for d in dice if d.role == "standard"]
    outcome = classify_duality(hope, fear)

    return StepResult(
        step_id=step.id,
        label=step.label,
        total=hope + fear + sum(extras) + total_modifier,
        rolls=(hope, fear, *extras),
        formula=formula,
        kind="duality",
        damage_category=step.damage_category,
        skipped=False,
        include_in_total=step.include_in_total,
        was_crit=outcome == "crit",
        duality_hope=hope,
        duality_fear=fear,
        duality_outcome=outcome,
    )


def _resolve_standard(step: Step, die_values: Mapping[str, int], dice: Sequence[DieRequest], total_modifier: int, force_crit: bool, formula: str) -> StepResult:
    rolls = tuple(_face(die_values, d) for d in dice)
    was_crit = force_crit or step.force_crit

    total = sum(rolls) + total_modifier
    if was_crit:
        total += sum(d.sides for d in dice)

    return StepResult(
        step_id=step.id,
        label=step.label,
        total=total,
        rolls=rolls,
        formula=formula,
        kind="standard",
        damage_category=step.damage_category,
        skipped=False,
        include_in_total=step.include_in_total,
        was_crit=was_crit,
    )


def resolve_step(
    step: Step,
    die_values: Mapping[str, int],
    dice: Sequence[DieRequest],
    total_modifier: int,
    force_crit: bool = False,
    formula: str | None = None,
) -> StepResult:
    """Build a step's result once all its dice have faces.

    Args:
        step: The step being resolved.
        die_values: Rolled faces keyed by DieRequest id. May hold faces for
            other steps' dice too; only this step's dice are read.
        dice: The step's planned dice.
        total_modifier: The formula's flat modifier plus any stat modifier.
        force_crit: Apply crit math to a standard step even though the step
            itself isn't flagged (e.g. chain-wide crit propagation).
            Ignored for duality steps.
        formula: Display formula; defaults to the step's own formula.
    """
    if formula is None:
        formula = step.formula
    if step.kind == "duality":
        return _resolve_duality(step, die_values, dice, total_modifier, formula)
    return _resolve_standard(step, die_values, dice, total_modifier, force_crit, formula)


def skipped_result(step: Step) -> StepResult:
    """Result for a step whose condition failed: nothing rolled, zero total."""
    return StepResult(
        step_id=step.id,
        label=step.label,
        total=0,
        rolls=(),
        formula=step.formula,
        kind=step.kind,
        damage_category=step.damage_category,
        skipped=True,
        include_in_total=step.include_in_total,
        was_crit=False,
    )


def natural_crit(step: Step, plan: StepPlan, die_values: Mapping[str, int], crit_sides: int = 20) -> bool:
    """Whether the faces rolled for step count as a natural critical.

    Duality steps crit on a matching pair. Standard steps crit when any
    die with crit_sides sides shows its maximum face (a natural 20).
    """
    if step.kind == "duality":
        hope = next((d for d in plan.dice if d.role == "hope"), None)
        fear = next((d for d in plan.dice if d.role == "fear"), None)
        if hope is None or fear is None or hope.id not in die_values or fear.id not in die_values:
            return False
        return die_values[hope.id] == die_values[fear.id]
    return any(
        d.sides == crit_sides and die_values.get(d.id) == d.sides
        for d in plan.dice
    )

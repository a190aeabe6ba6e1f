"""
Dice requirement planning: which physical dice a step needs.

A standard step rolls exactly what its formula says. A duality step always
rolls a hope d12 and a fear d12; the first two d12 terms of its formula are
that pair, and any other dice in the formula are rolled alongside as
standard dice. Every request gets a fresh id so die faces coming back from
an external roller can be matched to the die that asked for them.
"""

from __future__ import annotations

from uuid import uuid4

from fateweaver.formula import parse_advanced, parse_simple
from fateweaver.records import Chain, DieRequest, Step, StepPlan

DUALITY_SIDES = 12


def new_die_id() -> str:
    return uuid4().hex


def _plan_standard(step: Step) -> StepPlan:
    parsed = parse_simple(step.formula)
    dice = [DieRequest(new_die_id(), parsed.sides) for _ in range(parsed.count)]
    return StepPlan(step.id, dice, parsed.modifier)


def _plan_duality(step: Step) -> StepPlan:
    parsed = parse_advanced(step.formula)
    dice = [
        DieRequest(new_die_id(), DUALITY_SIDES, "hope"),
        DieRequest(new_die_id(), DUALITY_SIDES, "fear"),
    ]
    absorbed = 0
    for group in parsed.dice_groups:
        if group.sides == DUALITY_SIDES and absorbed < 2:
            absorbed += 1
            continue
        dice.append(DieRequest(new_die_id(), group.sides))
    return StepPlan(step.id, dice, parsed.modifier)


def plan_step(step: Step) -> StepPlan:
    """Return the dice step needs rolled and its formula's flat modifier."""
    if step.kind == "duality":
        return _plan_duality(step)
    return _plan_standard(step)


def plan_chain(chain: Chain) -> dict[str, StepPlan]:
    """Plan every step of chain, keyed by step id."""
    return {step.id: plan_step(step) for step in chain.steps}

"""
Sources of die faces.

The engine itself never rolls: faces come from an external roller (a
physics simulation or a remote dice service) through a provider callable.
This module holds what sits around that boundary:

- random_values: uniform pseudo-random faces, used when the external roller
  doesn't answer in time or fails, and by the demo tool and UI.
- obtain_values: awaits an async provider with a bounded timeout, falling
  back to random_values so a chain always completes.
- combined_notation / values_from_groups: the bridge to a roller that takes
  one tagged formula for the whole chain and answers with tagged groups of
  faces.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Iterable, Mapping, Sequence
from random import Random, randrange
from typing import Any, Callable, TypeAlias

from fateweaver.records import Chain, DieRequest, StepPlan
from fateweaver.types import DieRole

logger = logging.getLogger(__name__)

DiceProvider: TypeAlias = Callable[[Sequence[DieRequest]], Mapping[str, int]]
AsyncDiceProvider: TypeAlias = Callable[[Sequence[DieRequest]], Awaitable[Mapping[str, int]]]

_TAG_SUFFIX: dict[DieRole, str] = {"hope": "hope", "fear": "fear", "standard": "std"}
_ROLE_LABEL: dict[DieRole, str] = {"hope": "{Hope}", "fear": "{Fear}", "standard": ""}


def random_values(dice: Iterable[DieRequest], rng: Random | None = None) -> dict[str, int]:
    """Roll every requested die uniformly in [1, sides].

    A die with no sides (which the planner never produces, but a
    hand-built request might) shows 0.
    """
    roll = rng.randrange if rng is not None else randrange
    return {d.id: roll(1, d.sides + 1) if d.sides > 0 else 0 for d in dice}


async def obtain_values(provider: AsyncDiceProvider, dice: Sequence[DieRequest], timeout: float) -> dict[str, int]:
    """Await provider's faces for dice, or fall back to random ones.

    The provider is given at most ``timeout`` seconds; if it runs over or
    raises, every die gets a random face instead. Dice the provider
    doesn't answer for are left out; resolution counts them as 0.
    """
    if not dice:
        return {}
    try:
        values = dict(await asyncio.wait_for(provider(list(dice)), timeout))
    except asyncio.TimeoutError:
        logger.warning("Dice provider timed out after %.1fs; using fallback values for %d dice", timeout, len(dice))
        return random_values(dice)
    except Exception:
        logger.warning("Dice provider failed; using fallback values for %d dice", len(dice), exc_info=True)
        return random_values(dice)
    return values


def step_tag(step_id: str, role: DieRole) -> str:
    return f"{step_id}_{_TAG_SUFFIX[role]}"


def _grouped(plan: StepPlan) -> list[tuple[DieRole, int, int]]:
    """Return (role, sides, count) runs for a plan, hope then fear then
    standard.

    Only consecutive dice of the same sides are merged, so reading a tag's
    faces back in formula order hands them to the dice in plan order.
    """
    runs: list[tuple[DieRole, int, int]] = []
    for role in ("hope", "fear", "standard"):
        for die in plan.dice:
            if die.role != role:
                continue
            if runs and runs[-1][:2] == (role, die.sides):
                runs[-1] = (role, die.sides, runs[-1][2] + 1)
            else:
                runs.append((role, die.sides, 1))
    return runs


def combined_notation(chain: Chain, plans: Mapping[str, StepPlan]) -> str:
    """Build one tagged formula covering every die in the chain.

    Each group is written as "<count>d<sides>[{Hope}|{Fear}] # <tag>" and
    groups are joined with " + ", e.g.
    "1d12{Hope} # atk_hope + 1d12{Fear} # atk_fear + 2d6 # dmg_std".
    """
    parts = []
    for step in chain.steps:
        plan = plans.get(step.id)
        if plan is None:
            continue
        for role, sides, count in _grouped(plan):
            parts.append(f"{count}d{sides}{_ROLE_LABEL[role]} # {step_tag(step.id, role)}")
    return " + ".join(parts)


def values_from_groups(plans: Mapping[str, StepPlan], groups: Iterable[Mapping[str, Any]]) -> dict[str, int]:
    """Map a tagged roller response back onto die ids.

    groups is the roller's list of ``{"description": tag, "dice":
    [{"value": face}, ...]}``. Faces are handed out to each step's dice of
    the matching role in plan order; dice without a face are omitted.
    """
    by_tag: dict[str, list[int]] = defaultdict(list)
    for group in groups:
        tag = (group.get("description") or "").strip()
        if tag:
            by_tag[tag].extend(int(d["value"]) for d in group.get("dice") or [])

    values: dict[str, int] = {}
    for step_id, plan in plans.items():
        queues = {role: list(by_tag.get(step_tag(step_id, role), [])) for role in _TAG_SUFFIX}
        for die in plan.dice:
            queue = queues[die.role]
            if queue:
                values[die.id] = queue.pop(0)
    return values

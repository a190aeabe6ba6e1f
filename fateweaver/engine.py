"""
Chain engine: sequences steps, gates them, resolves them, and totals up.

Steps run in declared order; chain order is the only dependency ordering,
since a condition may only look at earlier steps. Faces can be collected in
two ways:

- Sequential: one provider call per step, resolving each step before the
  next one's dice are requested.
- Simultaneous: every die in the chain is rolled at once, then resolved in
  two passes. The first pass looks at all faces to decide whether the chain
  contains a natural crit; the second resolves each step knowing that.

Crit propagation is a policy. Under "chain", a natural crit anywhere escalates
every damage step that counts toward the total (in sequential mode only the
crit step and those after it, since earlier steps are already resolved).
Under "step", only the step that rolled the natural crit gets crit math. A
step flagged force_crit always does.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from fateweaver.conditions import should_run
from fateweaver.config import settings
from fateweaver.dice import AsyncDiceProvider, DiceProvider, obtain_values
from fateweaver.planner import plan_chain, plan_step
from fateweaver.records import Chain, CharacterStats, ChainResult, Step, StepPlan, StepResult
from fateweaver.resolver import natural_crit, resolve_step, skipped_result
from fateweaver.stats import display_formula, resolve_value
from fateweaver.types import CritPolicy, RollMode

logger = logging.getLogger(__name__)


def grand_total(results: Sequence[StepResult]) -> int:
    """Sum of every result that ran and counts toward the total."""
    return sum(r.total for r in results if r.counts)


def by_category(results: Sequence[StepResult]) -> dict[str, int]:
    """Subtotals per damage category, in first-seen order."""
    groups: dict[str, int] = {}
    for r in results:
        if r.counts:
            category = "typeless" if r.damage_category == "none" else r.damage_category
            groups[category] = groups.get(category, 0) + r.total
    return groups


def format_breakdown(groups: Mapping[str, int]) -> str:
    return " + ".join(f"{value} {category}" for category, value in groups.items())


def summarize(results: Sequence[StepResult], chain_crit: bool = False) -> ChainResult:
    groups = by_category(results)
    return ChainResult(
        step_results=list(results),
        grand_total=grand_total(results),
        breakdown=format_breakdown(groups),
        by_category=groups,
        chain_crit=chain_crit,
    )


class Engine:
    """Runs one chain for one character.

    Owns nothing beyond the inputs it was built with; every run builds its
    own plans and result list, so an Engine can be reused and several can
    run at once.
    """

    def __init__(
        self,
        chain: Chain,
        stats: CharacterStats | None = None,
        variables: Mapping[str, int] | None = None,
        crit_policy: CritPolicy | None = None,
        crit_sides: int | None = None,
    ) -> None:
        self.chain = chain
        self.stats = stats or CharacterStats()
        self.variables = {**chain.variable_defaults(), **(variables or {})}
        self.crit_policy = crit_policy or settings.crit_policy
        self.crit_sides = crit_sides or settings.crit_sides

    def plan(self) -> dict[str, StepPlan]:
        """Plan every die in the chain, for a simultaneous roll."""
        return plan_chain(self.chain)

    def _escalated(self, step: Step, own_crit: bool, chain_crit: bool) -> bool:
        """Whether crit math is forced onto step by the crit policy."""
        if step.kind != "standard":
            return False
        if self.crit_policy == "chain":
            return chain_crit and step.include_in_total
        return own_crit

    def _resolve(self, step: Step, plan: StepPlan, die_values: Mapping[str, int], force_crit: bool) -> StepResult:
        stat = resolve_value(self.stats, step.stat_ref)
        formula = display_formula(step.formula, self.stats, step.stat_ref)
        return resolve_step(step, die_values, plan.dice, plan.base_modifier + stat, force_crit, formula)

    def _sequential_step(self, step: Step, plan: StepPlan, die_values: Mapping[str, int], results: list[StepResult], chain_crit: bool) -> bool:
        """Resolve (or skip) one step in sequential mode, appending its
        result. Returns the updated chain crit flag."""
        if not should_run(step, results, self.variables):
            logger.debug("Skipping step %s: condition not met", step.id)
            results.append(skipped_result(step))
            return chain_crit

        own_crit = natural_crit(step, plan, die_values, self.crit_sides)
        if own_crit and not chain_crit:
            logger.debug("Natural crit on step %s", step.id)
        chain_crit = chain_crit or own_crit
        results.append(self._resolve(step, plan, die_values, self._escalated(step, own_crit, chain_crit)))
        return chain_crit

    def run(self, provider: DiceProvider) -> ChainResult:
        """Run the chain step by step, asking provider for each step's faces."""
        results: list[StepResult] = []
        chain_crit = False
        for step in self.chain.steps:
            plan = plan_step(step)
            values = provider(plan.dice) if plan.dice else {}
            chain_crit = self._sequential_step(step, plan, values, results, chain_crit)
        return summarize(results, chain_crit)

    def run_simultaneous(self, plans: Mapping[str, StepPlan], die_values: Mapping[str, int]) -> ChainResult:
        """Resolve a chain whose dice were all rolled in one batch.

        Args:
            plans: Output of plan(), keyed by step id. A step missing from
                plans is planned here, and its dice will have no faces.
            die_values: Rolled faces keyed by DieRequest id.
        """
        plans = {step.id: plans.get(step.id) or plan_step(step) for step in self.chain.steps}

        crits = {
            step.id: natural_crit(step, plans[step.id], die_values, self.crit_sides)
            for step in self.chain.steps
        }
        chain_crit = any(crits.values())
        logger.debug("Chain %s crit flag: %s", self.chain.id, chain_crit)

        results: list[StepResult] = []
        for step in self.chain.steps:
            if not should_run(step, results, self.variables):
                logger.debug("Skipping step %s: condition not met", step.id)
                results.append(skipped_result(step))
                continue
            force = self._escalated(step, crits[step.id], chain_crit)
            results.append(self._resolve(step, plans[step.id], die_values, force))
        return summarize(results, chain_crit)

    async def roll(self, provider: AsyncDiceProvider, mode: RollMode = "simultaneous", timeout: float | None = None) -> ChainResult:
        """Run the chain against an asynchronous dice provider.

        In simultaneous mode the provider is awaited once for the whole
        chain; in sequential mode once per step. Each wait is bounded by
        timeout (default from settings), after which random faces are used.
        """
        if timeout is None:
            timeout = settings.roll_timeout

        if mode == "sequential":
            results: list[StepResult] = []
            chain_crit = False
            for step in self.chain.steps:
                plan = plan_step(step)
                values = await obtain_values(provider, plan.dice, timeout)
                chain_crit = self._sequential_step(step, plan, values, results, chain_crit)
            return summarize(results, chain_crit)

        plans = self.plan()
        dice = [d for plan in plans.values() for d in plan.dice]
        values = await obtain_values(provider, dice, timeout)
        return self.run_simultaneous(plans, values)


def run_chain(
    chain: Chain,
    variables: Mapping[str, int] | None,
    provider: DiceProvider,
    stats: CharacterStats | None = None,
    crit_policy: CritPolicy | None = None,
) -> ChainResult:
    """Run chain sequentially with faces from provider."""
    return Engine(chain, stats, variables, crit_policy=crit_policy).run(provider)

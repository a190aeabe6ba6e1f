"""Condition evaluation: should a step run, given what came before it?"""

from __future__ import annotations

import operator
from collections.abc import Mapping, Sequence
from typing import Callable

from fateweaver.records import Step, StepResult
from fateweaver.types import OUTCOME_OPERATORS

_COMPARISONS: dict[str, Callable[[int, int], bool]] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
    "==": operator.eq,
}

_OUTCOME_MATCHES: dict[str, frozenset[str]] = {
    "is_hope": frozenset({"hope", "crit"}),
    "is_fear": frozenset({"fear"}),
    "is_crit": frozenset({"crit"}),
}


def find_result(results: Sequence[StepResult], step_id: str | None) -> StepResult | None:
    for result in results:
        if result.step_id == step_id:
            return result
    return None


def should_run(step: Step, prior_results: Sequence[StepResult], variables: Mapping[str, int]) -> bool:
    """Decide whether step executes.

    A step-result condition whose dependency is missing or was skipped is
    false, so skips propagate down the chain. Outcome operators (is_hope,
    is_fear, is_crit) read the referenced step's duality outcome and make
    no sense against a variable, where they are always false.
    """
    cond = step.condition
    if cond is None:
        return True

    if cond.check_source == "variable":
        if not cond.check_variable_id:
            return False
        source = variables.get(cond.check_variable_id, 0)
        outcome = None
    else:
        prev = find_result(prior_results, cond.depends_on_step_id)
        if prev is None or prev.skipped:
            return False
        source = prev.total
        outcome = prev.duality_outcome

    if cond.operator in OUTCOME_OPERATORS:
        return outcome in _OUTCOME_MATCHES[cond.operator]

    compare = _COMPARISONS.get(cond.operator)
    if compare is None:
        return False

    if cond.compare_target == "variable" and cond.variable_id:
        threshold = variables.get(cond.variable_id, 0)
    else:
        threshold = cond.value
    return compare(source, threshold)

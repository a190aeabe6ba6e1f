"""
Edit-time checks for user-authored chains.

Resolution never validates anything; it degrades gracefully instead. These
checks are for the editor, before a chain is saved: they catch conditions
that point forward (or at themselves), dangling step and variable
references, and outcome operators used where they can never match.
"""

from __future__ import annotations

from fateweaver.records import Chain
from fateweaver.types import OUTCOME_OPERATORS


class ChainValidationError(ValueError):
    """Raised when a chain's structure is invalid."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("; ".join(problems))
        self.problems = problems


def chain_problems(chain: Chain) -> list[str]:
    """Return a description of every structural problem in chain."""
    problems: list[str] = []
    variable_ids = {v.id for v in chain.variables}
    positions: dict[str, int] = {}

    for i, step in enumerate(chain.steps):
        if step.id in positions:
            problems.append(f"duplicate step id: {step.id!r}")
        else:
            positions[step.id] = i

    for i, step in enumerate(chain.steps):
        cond = step.condition
        if cond is None:
            continue

        if cond.check_source == "variable":
            if cond.check_variable_id not in variable_ids:
                problems.append(f"step {step.id!r} checks unknown variable {cond.check_variable_id!r}")
            if cond.operator in OUTCOME_OPERATORS:
                problems.append(f"step {step.id!r} uses {cond.operator} on a variable, which never matches")
        else:
            ref = cond.depends_on_step_id
            pos = chain.step_index(ref) if ref is not None else None
            if ref == step.id:
                problems.append(f"step {step.id!r} condition references itself")
            elif pos is None:
                problems.append(f"step {step.id!r} condition references unknown step {ref!r}")
            elif pos > i:
                problems.append(f"step {step.id!r} condition references later step {ref!r}")
            elif cond.operator in OUTCOME_OPERATORS and chain.steps[pos].kind != "duality":
                problems.append(f"step {step.id!r} uses {cond.operator} on non-duality step {ref!r}")

        if (
            cond.operator not in OUTCOME_OPERATORS
            and cond.compare_target == "variable"
            and cond.variable_id not in variable_ids
        ):
            problems.append(f"step {step.id!r} compares against unknown variable {cond.variable_id!r}")

    return problems


def validate_chain(chain: Chain) -> None:
    """Raise ChainValidationError if chain has any structural problem."""
    problems = chain_problems(chain)
    if problems:
        raise ChainValidationError(problems)

"""Structured records for dice chains and their results.

Chains, steps and variables describe what a user authored; DieRequest and
StepPlan describe what must be rolled; StepResult and ChainResult capture
the full outcome of one execution so it can be rendered as text, shown in
the Streamlit UI, or handed to a broadcast layer as plain dicts.

Chains arrive from the host extension as camelCase JSON, so the loaders
below accept both that shape and the snake_case field names used here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from fateweaver.types import (
    CheckSource,
    CompareTarget,
    ConditionOperator,
    DamageCategory,
    DieRole,
    DualityOutcome,
    GameSystem,
    StepKind,
)


def new_uid() -> str:
    """Return a fresh opaque identifier."""
    return uuid4().hex


@dataclass
class Variable:
    """A named numeric input supplied per roll (e.g. the target's AC)."""

    id: str
    name: str
    default_value: int = 0


@dataclass
class Condition:
    """Gating rule deciding whether a step executes."""

    operator: ConditionOperator
    check_source: CheckSource = "step_result"
    depends_on_step_id: str | None = None
    """The prior step whose result is read (step_result source)."""

    check_variable_id: str | None = None
    """The variable whose value is read (variable source)."""

    compare_target: CompareTarget = "value"
    value: int = 0
    """Literal threshold, used when compare_target is "value"."""

    variable_id: str | None = None
    """Variable holding the threshold, used when compare_target is
    "variable"."""


@dataclass
class Step:
    """One formula + optional stat modifier + optional condition."""

    id: str
    label: str
    kind: StepKind = "standard"
    formula: str = ""
    stat_ref: str | None = None
    """Namespaced stat reference such as "attribute:str" or "custom:abc"."""

    damage_category: DamageCategory = "none"
    condition: Condition | None = None
    include_in_total: bool = False
    force_crit: bool = False


@dataclass
class Chain:
    """An ordered list of steps forming one user-invokable roll (a preset)."""

    id: str
    name: str
    steps: list[Step] = field(default_factory=list)
    variables: list[Variable] = field(default_factory=list)

    def variable_defaults(self) -> dict[str, int]:
        return {v.id: v.default_value for v in self.variables}

    def step_index(self, step_id: str) -> int | None:
        """Return the position of step_id in the chain, or None."""
        for i, step in enumerate(self.steps):
            if step.id == step_id:
                return i
        return None


@dataclass
class Item:
    """A named container of presets, e.g. a weapon or a spell."""

    id: str
    name: str
    description: str = ""
    presets: list[Chain] = field(default_factory=list)


@dataclass
class CustomStat:
    id: str
    name: str
    value: int = 0


@dataclass
class CharacterStats:
    """Read-only stat sheet snapshot that stat references resolve against.

    All systems' data is kept side by side; active_system only decides
    which sheet the UI shows.
    """

    active_system: GameSystem = "dnd5e"
    attributes: dict[str, int] = field(default_factory=dict)
    """Ability scores (str, dex, ...), stored as raw scores."""

    skills: dict[str, int] = field(default_factory=dict)
    traits: dict[str, int] = field(default_factory=dict)
    """Duality-system traits (agility, strength, ...)."""

    custom: list[CustomStat] = field(default_factory=list)

    def custom_stat(self, stat_id: str) -> CustomStat | None:
        for stat in self.custom:
            if stat.id == stat_id:
                return stat
        return None


@dataclass(frozen=True)
class DieRequest:
    """A planned, not-yet-rolled die."""

    id: str
    sides: int
    role: DieRole = "standard"


@dataclass
class StepPlan:
    """Every die one step needs, plus the flat modifier from its formula."""

    step_id: str
    dice: list[DieRequest] = field(default_factory=list)
    base_modifier: int = 0


@dataclass(frozen=True)
class StepResult:
    """Outcome of one step, whether it ran or was skipped."""

    step_id: str
    label: str
    total: int
    rolls: tuple[int, ...]
    formula: str
    kind: StepKind
    damage_category: DamageCategory
    skipped: bool
    include_in_total: bool
    was_crit: bool = False
    duality_hope: int | None = None
    duality_fear: int | None = None
    duality_outcome: DualityOutcome | None = None
    uid: str = field(default_factory=new_uid, compare=False)
    """Per-result identity for display layers; excluded from equality."""

    @property
    def counts(self) -> bool:
        """Whether this result contributes to the grand total."""
        return not self.skipped and self.include_in_total

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "stepId": self.step_id,
            "uniqueId": self.uid,
            "label": self.label,
            "total": self.total,
            "rolls": list(self.rolls),
            "formula": self.formula,
            "type": "daggerheart" if self.kind == "duality" else "standard",
            "damageType": self.damage_category,
            "skipped": self.skipped,
            "addToSum": self.include_in_total,
            "wasCrit": self.was_crit,
        }
        if self.duality_outcome is not None:
            data["dhHope"] = self.duality_hope
            data["dhFear"] = self.duality_fear
            data["dhOutcome"] = self.duality_outcome
        return data


@dataclass
class ChainResult:
    """Final output of one full chain execution."""

    step_results: list[StepResult]
    grand_total: int
    breakdown: str
    """Per-category subtotals, e.g. "12 slashing + 7 fire"."""

    by_category: dict[str, int] = field(default_factory=dict)
    chain_crit: bool = False
    """Whether a qualifying natural crit was seen anywhere in the chain."""

    def result_for(self, step_id: str) -> StepResult | None:
        for result in self.step_results:
            if result.step_id == step_id:
                return result
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.step_results],
            "grandTotal": self.grand_total,
            "breakdown": self.breakdown,
        }


# --- Loading from the host's plain-dict shape ---

_KIND_ALIASES: dict[str, StepKind] = {
    "standard": "standard",
    "duality": "duality",
    "daggerheart": "duality",
}


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first of keys present in data."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def condition_from_dict(data: dict[str, Any]) -> Condition:
    return Condition(
        operator=_pick(data, "operator", default=">"),
        check_source=_pick(data, "check_source", "checkSource", default="step_result"),
        depends_on_step_id=_pick(data, "depends_on_step_id", "dependsOnStepId"),
        check_variable_id=_pick(data, "check_variable_id", "checkVariableId"),
        compare_target=_pick(data, "compare_target", "compareTarget", default="value"),
        value=int(_pick(data, "value", default=0)),
        variable_id=_pick(data, "variable_id", "variableId"),
    )


def step_from_dict(data: dict[str, Any]) -> Step:
    condition = _pick(data, "condition")
    kind = _pick(data, "kind", "type", default="standard")
    return Step(
        id=str(data["id"]),
        label=_pick(data, "label", default=""),
        kind=_KIND_ALIASES.get(kind, "standard"),
        formula=_pick(data, "formula", default=""),
        stat_ref=_pick(data, "stat_ref", "statModifier") or None,
        damage_category=_pick(data, "damage_category", "damageType", default="none"),
        condition=condition_from_dict(condition) if condition else None,
        include_in_total=bool(_pick(data, "include_in_total", "addToSum", default=False)),
        force_crit=bool(_pick(data, "force_crit", "isCrit", default=False)),
    )


def chain_from_dict(data: dict[str, Any]) -> Chain:
    """Build a Chain from the host's preset JSON (or snake_case dicts)."""
    return Chain(
        id=str(data["id"]),
        name=_pick(data, "name", default=""),
        steps=[step_from_dict(s) for s in _pick(data, "steps", default=[])],
        variables=[
            Variable(
                id=str(v["id"]),
                name=_pick(v, "name", default=""),
                default_value=int(_pick(v, "default_value", "defaultValue", default=0)),
            )
            for v in _pick(data, "variables", default=[])
        ],
    )


def stats_from_dict(data: dict[str, Any]) -> CharacterStats:
    """Build a CharacterStats from the host's stat sheet JSON."""
    return CharacterStats(
        active_system=_pick(data, "active_system", "activeSystem", default="dnd5e"),
        attributes=dict(_pick(data, "attributes", "dndAttributes", default={})),
        skills=dict(_pick(data, "skills", "dndSkills", default={})),
        traits=dict(_pick(data, "traits", "daggerheartStats", default={})),
        custom=[
            CustomStat(id=str(c["id"]), name=_pick(c, "name", default=""), value=int(_pick(c, "value", default=0)))
            for c in _pick(data, "custom", "customStats", default=[])
        ],
    )

"""
Domain-specific type aliases for the fateweaver dice-chain engine.

These aren't used for runtime type checking. They exist to make function
signatures and record fields self-documenting. When you see a field typed
as StepKind instead of str, you immediately know it's one of the recognized
step kinds, not an arbitrary string.
"""

from typing import Literal, TypeAlias

# How a step is rolled. "standard" steps roll whatever their formula says;
# "duality" steps always roll a hope d12 and a fear d12 and classify the
# pair.
StepKind: TypeAlias = Literal["standard", "duality"]

# The part a single die plays within its step.
DieRole: TypeAlias = Literal["standard", "hope", "fear"]

# Outcome of a duality roll: hope beat (or tied) fear, fear won, or the two
# dice matched.
DualityOutcome: TypeAlias = Literal["hope", "fear", "crit"]

ConditionOperator: TypeAlias = Literal[
    ">",
    "<",
    ">=",
    "<=",
    "==",
    # Duality-only operators: they read the referenced step's outcome and
    # ignore any threshold.
    "is_hope",
    "is_fear",
    "is_crit",
]

# What a condition reads: a prior step's result or a chain variable.
CheckSource: TypeAlias = Literal["step_result", "variable"]

# What a numeric condition compares against: a literal or another variable.
CompareTarget: TypeAlias = Literal["value", "variable"]

# Tags used only to group totals in the breakdown.
DamageCategory: TypeAlias = Literal[
    "slashing",
    "piercing",
    "bludgeoning",
    "fire",
    "cold",
    "lightning",
    "thunder",
    "acid",
    "poison",
    "necrotic",
    "radiant",
    "psychic",
    "force",
    "magic",
    "physical",
    "none",
]

StatNamespace: TypeAlias = Literal["attribute", "skill", "trait", "custom", "unknown"]

GameSystem: TypeAlias = Literal["dnd5e", "daggerheart"]

# Whether a natural crit escalates every later damage step in the chain
# ("chain") or only the step that rolled it ("step").
CritPolicy: TypeAlias = Literal["chain", "step"]

# How the engine collects die faces: one provider call for the whole chain,
# or one call per step.
RollMode: TypeAlias = Literal["simultaneous", "sequential"]

OUTCOME_OPERATORS: frozenset[str] = frozenset({"is_hope", "is_fear", "is_crit"})

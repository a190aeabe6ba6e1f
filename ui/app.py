"""Streamlit dice-chain roller UI.

Run with: PYTHONPATH=. streamlit run ui/app.py
"""

from __future__ import annotations

from random import Random

import streamlit as st

from fateweaver.data import ITEMS, SAMPLE_STATS
from fateweaver.dice import random_values
from fateweaver.engine import Engine
from fateweaver.records import Chain, ChainResult, CharacterStats
from fateweaver.renderers import TextRenderer
from fateweaver.types import CritPolicy

ATTRIBUTES = ("str", "dex", "con", "int", "wis", "cha")
TRAITS = ("agility", "strength", "finesse", "instinct", "presence", "knowledge")


def get_presets() -> dict[str, Chain]:
    """Return {"Item: Preset": chain} for every sample preset."""
    return {
        f"{item.name}: {preset.name}": preset
        for item in ITEMS
        for preset in item.presets
    }


PRESETS = get_presets()
PRESET_NAMES = list(PRESETS.keys())


def build_stats(config: dict) -> CharacterStats:
    """Build a stat sheet from the sample sheet plus sidebar overrides."""
    return CharacterStats(
        active_system=config.get("active_system", SAMPLE_STATS.active_system),
        attributes={**SAMPLE_STATS.attributes, **config.get("attributes", {})},
        skills=dict(SAMPLE_STATS.skills),
        traits={**SAMPLE_STATS.traits, **config.get("traits", {})},
        custom=list(SAMPLE_STATS.custom),
    )


def roll_preset(
    name: str,
    variables: dict[str, int],
    stats: CharacterStats,
    crit_policy: CritPolicy | None = None,
    seed: int | None = None,
) -> ChainResult:
    """Roll a preset all at once with random faces."""
    engine = Engine(PRESETS[name], stats, variables, crit_policy=crit_policy)
    plans = engine.plan()
    dice = [d for plan in plans.values() for d in plan.dice]
    rng = Random(seed) if seed is not None else None
    return engine.run_simultaneous(plans, random_values(dice, rng))


def stats_config() -> dict:
    """Render sidebar controls for the character and return config dict."""
    st.sidebar.subheader("Character")
    system = st.sidebar.radio("System", ("dnd5e", "daggerheart"), horizontal=True)
    attributes: dict[str, int] = {}
    traits: dict[str, int] = {}
    if system == "dnd5e":
        with st.sidebar.expander("Attributes"):
            for attr in ATTRIBUTES:
                attributes[attr] = st.number_input(
                    attr.upper(), min_value=1, max_value=30,
                    value=SAMPLE_STATS.attributes.get(attr, 10), key=f"attr_{attr}",
                )
    else:
        with st.sidebar.expander("Traits"):
            for trait in TRAITS:
                traits[trait] = st.number_input(
                    trait.capitalize(), min_value=-5, max_value=10,
                    value=SAMPLE_STATS.traits.get(trait, 0), key=f"trait_{trait}",
                )
    return {"active_system": system, "attributes": attributes, "traits": traits}


def main() -> None:
    st.set_page_config(page_title="Fateweaver Dice Chains", layout="wide")
    st.title("Fateweaver Dice Chains")

    name = st.sidebar.selectbox("Preset", PRESET_NAMES)
    chain = PRESETS[name]

    variables: dict[str, int] = {}
    if chain.variables:
        st.sidebar.subheader("Variables")
        for var in chain.variables:
            variables[var.id] = st.sidebar.number_input(
                var.name, value=var.default_value, key=f"var_{name}_{var.id}",
            )

    config = stats_config()
    st.sidebar.divider()
    crit_policy = st.sidebar.radio("Crit propagation", ("chain", "step"), horizontal=True)
    roll_clicked = st.sidebar.button("Roll!", type="primary")

    if roll_clicked:
        result = roll_preset(name, variables, build_stats(config), crit_policy)

        st.metric("Total", result.grand_total, help=result.breakdown or None)
        if result.breakdown:
            st.caption(result.breakdown)

        st.subheader("Steps")
        st.code("\n".join(TextRenderer().render_chain(result)))


if __name__ == "__main__":
    main()

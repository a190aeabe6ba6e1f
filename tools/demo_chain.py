#!/usr/bin/env python3
"""Roll every sample preset once with random dice and print the results.

Usage:
    python tools/demo_chain.py [--debug]
"""

import logging
import sys

from fateweaver.data import ITEMS, SAMPLE_STATS
from fateweaver.dice import random_values
from fateweaver.engine import Engine
from fateweaver.renderers import TextRenderer


def main() -> None:
    logging.basicConfig(level=logging.DEBUG if "--debug" in sys.argv[1:] else logging.INFO)
    renderer = TextRenderer()
    for item in ITEMS:
        for preset in item.presets:
            engine = Engine(preset, SAMPLE_STATS)
            plans = engine.plan()
            dice = [d for plan in plans.values() for d in plan.dice]
            result = engine.run_simultaneous(plans, random_values(dice))
            print(f"== {item.name}: {preset.name} ==")
            print("\n".join(renderer.render_chain(result)))
            print()


if __name__ == "__main__":
    main()

"""Tests for dice sources and the external roller bridge."""

import asyncio
from random import Random
from unittest.mock import patch

from fateweaver.dice import combined_notation, obtain_values, random_values, values_from_groups
from fateweaver.planner import plan_chain
from fateweaver.records import Chain, DieRequest, Step


class TestRandomValues:
    def test_range(self) -> None:
        """Every face lands in [1, sides], and all faces show up."""
        dice = [DieRequest(str(i), 6) for i in range(3000)]
        values = random_values(dice)
        assert set(values.values()) == set(range(1, 7))

    def test_patched_randrange(self) -> None:
        with patch("fateweaver.dice.randrange", return_value=3) as mock_randrange:
            values = random_values([DieRequest("a", 8)])
        assert values == {"a": 3}
        mock_randrange.assert_called_once_with(1, 9)

    def test_seeded_rng_is_repeatable(self) -> None:
        dice = [DieRequest(str(i), 20) for i in range(10)]
        assert random_values(dice, Random(7)) == random_values(dice, Random(7))

    def test_zero_sided_die(self) -> None:
        assert random_values([DieRequest("z", 0)]) == {"z": 0}


class TestObtainValues:
    def test_returns_provider_faces(self) -> None:
        async def provider(dice):
            return {d.id: 5 for d in dice}

        values = asyncio.run(obtain_values(provider, [DieRequest("a", 6)], 1.0))
        assert values == {"a": 5}

    def test_partial_answer_is_kept_partial(self) -> None:
        async def provider(dice):
            return {"a": 2}

        dice = [DieRequest("a", 6), DieRequest("b", 6)]
        assert asyncio.run(obtain_values(provider, dice, 1.0)) == {"a": 2}

    def test_timeout_uses_fallback(self) -> None:
        async def provider(dice):
            await asyncio.sleep(10)
            return {}

        with patch("fateweaver.dice.randrange", return_value=6):
            values = asyncio.run(obtain_values(provider, [DieRequest("a", 6)], 0.01))
        assert values == {"a": 6}

    def test_provider_error_uses_fallback(self, caplog) -> None:
        """A roller that fails outright is treated like one that timed out."""
        async def provider(dice):
            raise ConnectionError("roller unavailable")

        with patch("fateweaver.dice.randrange", return_value=3):
            values = asyncio.run(obtain_values(provider, [DieRequest("a", 6), DieRequest("b", 8)], 1.0))
        assert values == {"a": 3, "b": 3}
        assert "Dice provider failed" in caplog.text

    def test_no_dice_skips_provider(self) -> None:
        async def provider(dice):
            raise AssertionError("should not be called")

        assert asyncio.run(obtain_values(provider, [], 1.0)) == {}


def _chain() -> Chain:
    return Chain(id="c", name="C", steps=[
        Step(id="act", label="Action", kind="duality", formula="2d12+d6+d4+d6"),
        Step(id="dmg", label="Damage", formula="2d8+3"),
        Step(id="flat", label="Flat", formula="2"),
    ])


class TestCombinedNotation:
    def test_tags_every_group(self) -> None:
        chain = _chain()
        notation = combined_notation(chain, plan_chain(chain))
        assert notation == (
            "1d12{Hope} # act_hope + 1d12{Fear} # act_fear"
            " + 1d6 # act_std + 1d4 # act_std + 1d6 # act_std"
            " + 2d8 # dmg_std"
        )


class TestValuesFromGroups:
    def test_faces_follow_plan_order(self) -> None:
        chain = _chain()
        plans = plan_chain(chain)
        groups = [
            {"description": "act_hope", "dice": [{"value": 9}]},
            {"description": "act_fear", "dice": [{"value": 4}]},
            {"description": "act_std", "dice": [{"value": 5}]},
            {"description": "act_std", "dice": [{"value": 3}]},
            {"description": "act_std", "dice": [{"value": 1}]},
            {"description": " dmg_std ", "dice": [{"value": 7}, {"value": 2}]},
            {"description": None, "dice": [{"value": 99}]},
        ]
        values = values_from_groups(plans, groups)
        act = [values[d.id] for d in plans["act"].dice]
        dmg = [values[d.id] for d in plans["dmg"].dice]
        assert act == [9, 4, 5, 3, 1]
        assert dmg == [7, 2]

    def test_missing_groups_leave_dice_out(self) -> None:
        chain = _chain()
        plans = plan_chain(chain)
        values = values_from_groups(plans, [{"description": "dmg_std", "dice": [{"value": 7}]}])
        assert values == {plans["dmg"].dice[0].id: 7}

"""Tests for UI helper functions (preset discovery, stat building, rolling)."""

from __future__ import annotations

from ui.app import PRESETS, build_stats, get_presets, roll_preset


class TestGetPresets:
    def test_returns_all_presets(self) -> None:
        presets = get_presets()
        assert list(presets) == ["Longsword: Attack", "Greatsword: Attack"]

    def test_presets_are_chains(self) -> None:
        chain = get_presets()["Longsword: Attack"]
        assert [s.id for s in chain.steps] == ["hit", "dmg", "flame"]


class TestBuildStats:
    def test_defaults_to_sample_sheet(self) -> None:
        stats = build_stats({})
        assert stats.attributes["str"] == 16
        assert stats.traits["strength"] == 2

    def test_overrides(self) -> None:
        stats = build_stats({"active_system": "daggerheart", "attributes": {"str": 8}, "traits": {"agility": 3}})
        assert stats.active_system == "daggerheart"
        assert stats.attributes["str"] == 8
        assert stats.attributes["dex"] == 14
        assert stats.traits["agility"] == 3


class TestRollPreset:
    def test_seeded_roll_is_repeatable(self) -> None:
        first = roll_preset("Longsword: Attack", {"ac": 10}, build_stats({}), seed=3)
        second = roll_preset("Longsword: Attack", {"ac": 10}, build_stats({}), seed=3)
        assert first == second

    def test_impossible_ac_skips_damage(self) -> None:
        result = roll_preset("Longsword: Attack", {"ac": 99}, build_stats({}))
        assert [r.skipped for r in result.step_results] == [False, True, True]
        assert result.grand_total == 0

    def test_every_preset_rolls(self) -> None:
        for name in PRESETS:
            result = roll_preset(name, {}, build_stats({}))
            assert len(result.step_results) == len(PRESETS[name].steps)

"""Tests for step condition evaluation."""

from fateweaver.conditions import should_run
from fateweaver.records import Condition, Step, StepResult


def _result(step_id: str, total: int, *, skipped: bool = False, outcome: str | None = None) -> StepResult:
    return StepResult(
        step_id=step_id,
        label=step_id,
        total=total,
        rolls=(),
        formula="",
        kind="duality" if outcome else "standard",
        damage_category="none",
        skipped=skipped,
        include_in_total=False,
        duality_outcome=outcome,
    )


def _step(**cond: object) -> Step:
    return Step(id="s", label="S", condition=Condition(**cond))


class TestStepResultSource:
    def test_no_condition_runs(self) -> None:
        assert should_run(Step(id="s", label="S"), [], {}) is True

    def test_numeric_operators(self) -> None:
        prior = [_result("hit", 15)]
        assert should_run(_step(operator=">", depends_on_step_id="hit", value=14), prior, {})
        assert not should_run(_step(operator=">", depends_on_step_id="hit", value=15), prior, {})
        assert should_run(_step(operator=">=", depends_on_step_id="hit", value=15), prior, {})
        assert should_run(_step(operator="<", depends_on_step_id="hit", value=16), prior, {})
        assert should_run(_step(operator="<=", depends_on_step_id="hit", value=15), prior, {})
        assert should_run(_step(operator="==", depends_on_step_id="hit", value=15), prior, {})
        assert not should_run(_step(operator="==", depends_on_step_id="hit", value=14), prior, {})

    def test_threshold_from_variable(self) -> None:
        prior = [_result("hit", 15)]
        step = _step(operator=">=", depends_on_step_id="hit", compare_target="variable", variable_id="ac")
        assert should_run(step, prior, {"ac": 15})
        assert not should_run(step, prior, {"ac": 16})

    def test_unset_threshold_variable_is_zero(self) -> None:
        step = _step(operator=">", depends_on_step_id="hit", compare_target="variable", variable_id="ac")
        assert should_run(step, [_result("hit", 1)], {})
        assert not should_run(step, [_result("hit", 0)], {})

    def test_missing_dependency_is_false(self) -> None:
        step = _step(operator=">=", depends_on_step_id="nope", value=0)
        assert not should_run(step, [_result("hit", 15)], {})

    def test_skipped_dependency_is_false(self) -> None:
        """Skips propagate: a step gated on a skipped step is skipped."""
        step = _step(operator="<=", depends_on_step_id="hit", value=100)
        assert not should_run(step, [_result("hit", 0, skipped=True)], {})

    def test_unknown_operator_is_false(self) -> None:
        assert not should_run(_step(operator="!=", depends_on_step_id="hit"), [_result("hit", 3)], {})


class TestOutcomeOperators:
    def test_is_hope_matches_hope_and_crit(self) -> None:
        step = _step(operator="is_hope", depends_on_step_id="act")
        assert should_run(step, [_result("act", 10, outcome="hope")], {})
        assert should_run(step, [_result("act", 10, outcome="crit")], {})
        assert not should_run(step, [_result("act", 10, outcome="fear")], {})

    def test_is_fear_matches_only_fear(self) -> None:
        step = _step(operator="is_fear", depends_on_step_id="act")
        assert should_run(step, [_result("act", 10, outcome="fear")], {})
        assert not should_run(step, [_result("act", 10, outcome="crit")], {})

    def test_is_crit_matches_only_crit(self) -> None:
        step = _step(operator="is_crit", depends_on_step_id="act")
        assert should_run(step, [_result("act", 10, outcome="crit")], {})
        assert not should_run(step, [_result("act", 10, outcome="hope")], {})

    def test_threshold_ignored(self) -> None:
        step = _step(operator="is_fear", depends_on_step_id="act", value=1000)
        assert should_run(step, [_result("act", 3, outcome="fear")], {})

    def test_standard_step_never_matches(self) -> None:
        step = _step(operator="is_hope", depends_on_step_id="hit")
        assert not should_run(step, [_result("hit", 20)], {})


class TestVariableSource:
    def test_compares_variable_value(self) -> None:
        step = _step(operator=">=", check_source="variable", check_variable_id="lvl", value=5)
        assert should_run(step, [], {"lvl": 5})
        assert not should_run(step, [], {"lvl": 4})

    def test_unset_variable_is_zero(self) -> None:
        step = _step(operator="==", check_source="variable", check_variable_id="lvl", value=0)
        assert should_run(step, [], {})

    def test_missing_variable_id_is_false(self) -> None:
        step = _step(operator="==", check_source="variable", value=0)
        assert not should_run(step, [], {})

    def test_variable_against_variable(self) -> None:
        step = _step(operator=">", check_source="variable", check_variable_id="a", compare_target="variable", variable_id="b")
        assert should_run(step, [], {"a": 3, "b": 2})
        assert not should_run(step, [], {"a": 2, "b": 2})

    def test_outcome_operators_always_false(self) -> None:
        for op in ("is_hope", "is_fear", "is_crit"):
            step = _step(operator=op, check_source="variable", check_variable_id="a")
            assert not should_run(step, [], {"a": 1}), op

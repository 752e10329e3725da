"""Tests for the forward/backward pass and critical path."""

import logging

import pytest

from paveplan.exceptions import CircularDependencyError, MissingReferenceError, ValidationError
from paveplan.logger import CHECKS_LEVEL
from paveplan.scheduler import CriticalPathAnalyzer, compute_critical_path
from tests.conftest import day, make_task


class TestWorkedScenarios:
    """The reference scenarios, expressed in Day offsets."""

    def test_single_task_is_critical(self) -> None:
        result = compute_critical_path([make_task("a", 0, 5)])
        timing = result.timings["a"]

        assert timing.earliest_start == day(0)
        assert timing.earliest_finish == day(5)
        assert timing.latest_start == day(0)
        assert timing.latest_finish == day(5)
        assert timing.slack_days == 0
        assert result.critical_ids == {"a"}
        assert result.project_finish == day(5)

    def test_dependency_pushes_dependent_later(self) -> None:
        """B's declared Day 0 start is overridden by A finishing on Day 3."""
        result = compute_critical_path([make_task("a", 0, 3), make_task("b", 0, 4, "a")])
        b = result.timings["b"]

        assert b.earliest_start == day(3)
        assert b.earliest_finish == day(7)
        assert result.timings["a"].slack_days == 0
        assert b.slack_days == 0
        assert result.critical_ids == {"a", "b"}

    def test_fan_in_picks_longest_branch(self) -> None:
        result = compute_critical_path(
            [make_task("a", 0, 2), make_task("b", 0, 5), make_task("c", 0, 1, "a", "b")]
        )

        assert result.timings["c"].earliest_start == day(5)
        assert result.timings["b"].slack_days == 0
        assert result.timings["a"].slack_days == 3
        assert result.timings["a"].latest_finish == day(5)
        assert result.critical_ids == {"b", "c"}

    def test_zero_duration_task_alone(self) -> None:
        result = compute_critical_path([make_task("m", 2, 2)])
        timing = result.timings["m"]

        assert timing.duration_days == 0
        assert timing.earliest_start == timing.earliest_finish == day(2)
        assert timing.is_critical

    def test_zero_duration_task_beside_longer_work(self) -> None:
        """A point task off the longest chain has slack like any other."""
        result = compute_critical_path([make_task("m", 2, 2), make_task("long", 0, 5)])
        assert result.timings["m"].slack_days == 3
        assert result.critical_ids == {"long"}

    def test_empty_collection(self) -> None:
        result = compute_critical_path([])
        assert result.critical_ids == frozenset()
        assert result.timings == {}
        assert result.project_finish is None


class TestPassDetails:
    """Test finer points of the two passes."""

    def test_independent_task_keeps_declared_start(self) -> None:
        """Tasks without dependencies are not pulled back to the chart origin."""
        result = compute_critical_path([make_task("a", 0, 2), make_task("late", 4, 6)])
        assert result.timings["late"].earliest_start == day(4)
        assert result.critical_ids == {"late"}

    def test_declared_start_after_dependency_wins(self) -> None:
        result = compute_critical_path([make_task("a", 0, 2), make_task("b", 5, 6, "a")])
        assert result.timings["b"].earliest_start == day(5)
        # A could slip until B's start without moving the finish
        assert result.timings["a"].slack_days == 3

    def test_input_order_does_not_matter(self) -> None:
        """Dependents listed before their dependencies get the same answer."""
        forward = [make_task("a", 0, 2), make_task("b", 0, 3, "a"), make_task("c", 0, 1, "b")]
        backward = list(reversed(forward))

        assert compute_critical_path(forward).timings == compute_critical_path(backward).timings

    def test_diamond_latest_finish_uses_tightest_dependent(self) -> None:
        tasks = [
            make_task("start", 0, 1),
            make_task("short", 0, 1, "start"),
            make_task("long", 0, 4, "start"),
            make_task("end", 0, 1, "short", "long"),
        ]
        result = compute_critical_path(tasks)

        assert result.timings["start"].latest_finish == day(1)
        assert result.timings["short"].slack_days == 3
        assert result.critical_ids == {"start", "long", "end"}

    def test_cycle_rejected(self) -> None:
        with pytest.raises(CircularDependencyError):
            compute_critical_path([make_task("a", 0, 1, "b"), make_task("b", 0, 1, "a")])

    def test_unknown_dependency_rejected(self) -> None:
        with pytest.raises(MissingReferenceError):
            compute_critical_path([make_task("a", 0, 1, "nope")])

    def test_duplicate_task_id_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Duplicate task ID"):
            compute_critical_path([make_task("a", 0, 1), make_task("a", 0, 2)])


class TestInvariants:
    """Properties that hold for any acyclic collection."""

    @pytest.fixture
    def tasks(self):
        return [
            make_task(1, 0, 3),
            make_task(2, 1, 2),
            make_task(3, 0, 4, 1),
            make_task(4, 2, 5, 1, 2),
            make_task(5, 0, 2, 3, 4),
            make_task(6, 8, 9),
        ]

    def test_earliest_start_after_every_dependency(self, tasks) -> None:
        result = compute_critical_path(tasks)
        for task in tasks:
            timing = result.timings[task.id]
            assert timing.earliest_start >= task.start
            for dep_id in task.dependencies:
                assert timing.earliest_start >= result.timings[dep_id].earliest_finish

    def test_slack_never_negative(self, tasks) -> None:
        result = compute_critical_path(tasks)
        assert all(t.slack_days >= 0 for t in result.timings.values())

    def test_nonempty_collection_has_critical_task(self, tasks) -> None:
        result = compute_critical_path(tasks)
        assert result.critical_ids
        finishing = {
            t.task_id
            for t in result.timings.values()
            if t.earliest_finish == result.project_finish
        }
        assert finishing <= result.critical_ids

    def test_analysis_is_idempotent(self, tasks) -> None:
        analyzer = CriticalPathAnalyzer()
        assert analyzer.analyze(tasks) == analyzer.analyze(tasks)

    def test_moving_task_without_dependents_leaves_others(self, tasks) -> None:
        """Task 6 has no dependents and does not set the project finish."""
        before = compute_critical_path(tasks)
        tasks[5].start, tasks[5].end = day(7), day(8)
        after = compute_critical_path(tasks)

        assert after.project_finish == before.project_finish
        for task_id in (1, 2, 3, 4, 5):
            assert after.timings[task_id] == before.timings[task_id]


class TestLogging:
    """Test per-task check output."""

    def test_checks_logged_per_task(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(CHECKS_LEVEL, logger="paveplan"):
            compute_critical_path([make_task("a", 0, 2), make_task("b", 0, 1, "a")])

        messages = [r.getMessage() for r in caplog.records if r.levelno == CHECKS_LEVEL]
        assert len(messages) == 2
        assert "b: ES=2025-05-03" in messages[1]

    def test_silent_by_default(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="paveplan"):
            compute_critical_path([make_task("a", 0, 2)])
        assert caplog.records == []

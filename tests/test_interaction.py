"""Tests for the drag and link gestures."""

import pytest

from paveplan.exceptions import CircularDependencyError, MissingReferenceError
from paveplan.models import ProjectSchedule
from paveplan.scheduler import DragReschedule, LinkDrag, ScheduleEngine
from tests.conftest import day


@pytest.fixture
def engine(fan_in_project: ProjectSchedule) -> ScheduleEngine:
    """Engine over the fan-in project: 5-day span, 200 units per day."""
    return ScheduleEngine(fan_in_project)


class TestDragReschedule:
    """Test moving a bar by dragging it."""

    @pytest.mark.parametrize(
        ("pointer_x", "days"),
        [
            (300.0, 1),  # 200 units = 1 day
            (200.0, 1),  # half a day rounds up
            (0.0, 0),  # minus half a day rounds toward zero
            (1.0, 0),
            (-1.0, -1),
            (500.0, 2),
        ],
    )
    def test_pending_days_rounding(
        self, engine: ScheduleEngine, pointer_x: float, days: int
    ) -> None:
        drag = DragReschedule(engine)
        drag.begin("a", pointer_x=100.0)
        assert drag.move(pointer_x) == days

    def test_commit_moves_task(self, engine: ScheduleEngine) -> None:
        drag = DragReschedule(engine)
        drag.begin("a", pointer_x=100.0)
        drag.move(400.0)  # 1.5 days -> 2

        assert drag.preview() == (day(2), day(4))
        assert engine.project.tasks[0].start == day(0)  # nothing applied yet

        assert drag.commit() == (day(2), day(4))
        assert not drag.active
        assert (engine.project.tasks[0].start, engine.project.tasks[0].end) == (day(2), day(4))
        assert engine.timing("c").earliest_start == day(5)

    def test_commit_below_a_day_changes_nothing(self, engine: ScheduleEngine) -> None:
        calls: list[object] = []
        engine.add_reschedule_listener(lambda *args: calls.append(args))
        analysis = engine.analysis()

        drag = DragReschedule(engine)
        drag.begin("b")
        drag.move(60.0)

        assert drag.commit() is None
        assert calls == []
        assert engine.analysis() is analysis

    def test_cancel(self, engine: ScheduleEngine) -> None:
        drag = DragReschedule(engine)
        drag.begin("b")
        drag.move(-600.0)
        drag.cancel()

        assert not drag.active
        assert drag.pending_days == 0
        assert engine.project.tasks[1].start == day(0)

    def test_scale_frozen_for_the_gesture(self, engine: ScheduleEngine) -> None:
        """Widening the span mid-drag does not rescale the pointer."""
        drag = DragReschedule(engine)
        drag.begin("c")
        engine.reschedule("b", day(0), day(10))  # now 100 units per day

        assert drag.move(200.0) == 1

    def test_single_gesture_at_a_time(self, engine: ScheduleEngine) -> None:
        drag = DragReschedule(engine)
        drag.begin("a")
        with pytest.raises(ValueError, match="already in progress"):
            drag.begin("b")

    def test_requires_active_gesture(self, engine: ScheduleEngine) -> None:
        drag = DragReschedule(engine)
        with pytest.raises(ValueError, match="No drag"):
            drag.move(10.0)
        with pytest.raises(ValueError, match="No drag"):
            drag.commit()

    def test_unknown_task(self, engine: ScheduleEngine) -> None:
        with pytest.raises(MissingReferenceError):
            DragReschedule(engine).begin("zzz")


class TestLinkDrag:
    """Test adding dependencies by dragging between bars."""

    def test_rubber_band_follows_pointer(self, engine: ScheduleEngine) -> None:
        link = LinkDrag(engine)
        assert link.rubber_band is None

        link.begin("c")
        assert link.anchor == (200.0, 145.0)
        link.move(500.0, 60.0)
        assert link.rubber_band == ((200.0, 145.0), (500.0, 60.0))

    def test_release_on_other_task_adds_dependency(self, engine: ScheduleEngine) -> None:
        link = LinkDrag(engine)
        link.begin("b")

        assert link.release("a") is True
        assert engine.project.tasks[1].dependencies == ["a"]
        assert engine.timing("b").earliest_start == day(2)
        assert not link.active
        assert link.rubber_band is None

    @pytest.mark.parametrize("target", [None, "c"])
    def test_release_on_nothing_or_self(self, engine: ScheduleEngine, target) -> None:
        link = LinkDrag(engine)
        link.begin("c")
        assert link.release(target) is False
        assert engine.project.tasks[2].dependencies == ["a", "b"]

    def test_existing_dependency_not_duplicated(self, engine: ScheduleEngine) -> None:
        calls: list[object] = []
        engine.add_dependencies_listener(lambda *args: calls.append(args))

        link = LinkDrag(engine)
        link.begin("c")
        assert link.release("a") is False
        assert calls == []

    def test_cycle_rejected(self, engine: ScheduleEngine) -> None:
        link = LinkDrag(engine)
        link.begin("a")

        with pytest.raises(CircularDependencyError):
            link.release("c")
        assert engine.project.tasks[0].dependencies == []
        assert not link.active

    def test_cancel(self, engine: ScheduleEngine) -> None:
        link = LinkDrag(engine)
        link.begin("a")
        link.cancel()
        with pytest.raises(ValueError, match="No link"):
            link.release("b")

    def test_unknown_source(self, engine: ScheduleEngine) -> None:
        with pytest.raises(MissingReferenceError):
            LinkDrag(engine).begin("zzz")

"""
Tests for the canvas drag controller.

Pointer traces are replayed against the controller and the emitted
callbacks are recorded.
"""

import pytest

from storyloom.canvas.controller import DragController, DragPhase, GestureOutcome
from storyloom.models import Position


class Recorder:
    def __init__(self):
        self.clicks = []
        self.moves = []
        self.commits = []

    def controller(self, **kwargs):
        return DragController(
            on_click=self.clicks.append,
            on_move=lambda node_id, pos: self.moves.append((node_id, pos)),
            on_commit=lambda node_id, pos: self.commits.append((node_id, pos)),
            **kwargs
        )


class TestDragController:

    @pytest.fixture
    def rec(self):
        return Recorder()

    @pytest.fixture
    def ctrl(self, rec):
        return rec.controller()

    def test_press_release_in_place_is_click(self, rec, ctrl):
        ctrl.pointer_down("n1", 100, 100, Position(10, 20))
        assert ctrl.phase == DragPhase.PRESSED

        assert ctrl.pointer_up(100, 100) == GestureOutcome.CLICK
        assert rec.clicks == ["n1"]
        assert rec.moves == []
        assert rec.commits == []
        assert ctrl.phase == DragPhase.IDLE

    def test_small_jitter_stays_click(self, rec, ctrl):
        ctrl.pointer_down("n1", 100, 100, Position(0, 0))
        assert ctrl.pointer_move(103, 104) is None  # exactly 5px
        assert ctrl.phase == DragPhase.PRESSED
        assert ctrl.pointer_up(103, 104) == GestureOutcome.CLICK
        assert rec.clicks == ["n1"]
        assert rec.moves == []

    def test_drag_past_threshold(self, rec, ctrl):
        ctrl.pointer_down("n1", 100, 100, Position(10, 20))
        position = ctrl.pointer_move(106, 100)

        assert ctrl.phase == DragPhase.DRAGGING
        assert ctrl.dragging_node_id == "n1"
        assert position == Position(16, 20)

        assert ctrl.pointer_up(150, 130) == GestureOutcome.DRAG
        assert rec.clicks == []
        assert rec.commits == [("n1", Position(60, 50))]
        assert rec.moves[-1] == ("n1", Position(60, 50))

    def test_release_past_threshold_without_crossing_move_is_drag(self, rec, ctrl):
        # Throttled moves: only a small one arrives before the release
        ctrl.pointer_down("n1", 0, 0, Position(100, 100))
        assert ctrl.pointer_move(3, 0) is None
        assert ctrl.phase == DragPhase.PRESSED

        assert ctrl.pointer_up(40, 0) == GestureOutcome.DRAG
        assert rec.clicks == []
        assert rec.commits == [("n1", Position(140, 100))]
        assert rec.moves == [("n1", Position(140, 100))]
        assert ctrl.phase == DragPhase.IDLE

    def test_release_without_any_move_past_threshold_is_drag(self, rec, ctrl):
        ctrl.pointer_down("n1", 10, 10, Position(0, 0))
        assert ctrl.pointer_up(10, 16) == GestureOutcome.DRAG
        assert rec.clicks == []
        assert rec.commits == [("n1", Position(0, 6))]

    def test_positions_use_total_displacement(self, rec, ctrl):
        ctrl.pointer_down("n1", 0, 0, Position(100, 100))
        for x in (10, 20, 30, 25):
            ctrl.pointer_move(x, x)
        assert [pos for _, pos in rec.moves] == [
            Position(110, 110), Position(120, 120), Position(130, 130), Position(125, 125),
        ]

    def test_returning_to_origin_after_drag_is_not_click(self, rec, ctrl):
        ctrl.pointer_down("n1", 50, 50, Position(0, 0))
        ctrl.pointer_move(80, 50)
        assert ctrl.pointer_up(50, 50) == GestureOutcome.DRAG
        assert rec.clicks == []
        assert rec.commits == [("n1", Position(0, 0))]

    def test_secondary_button_ignored(self, rec, ctrl):
        assert ctrl.pointer_down("n1", 0, 0, Position(0, 0), button=2) == DragPhase.IDLE
        assert ctrl.pointer_move(50, 50) is None
        assert ctrl.pointer_up(50, 50) == GestureOutcome.IGNORED
        assert rec.clicks == [] and rec.moves == [] and rec.commits == []

    def test_second_press_during_gesture_ignored(self, rec, ctrl):
        ctrl.pointer_down("n1", 0, 0, Position(0, 0))
        ctrl.pointer_down("n2", 5, 5, Position(300, 300))
        assert ctrl.session.node_id == "n1"
        ctrl.pointer_up(0, 0)
        assert rec.clicks == ["n1"]

    def test_cancel_while_dragging_restores_start(self, rec, ctrl):
        ctrl.pointer_down("n1", 0, 0, Position(40, 40))
        ctrl.pointer_move(30, 0)

        assert ctrl.cancel() == GestureOutcome.CANCELLED
        assert rec.moves[-1] == ("n1", Position(40, 40))
        assert rec.commits == []
        assert rec.clicks == []
        assert ctrl.phase == DragPhase.IDLE

    def test_cancel_while_pressed_emits_nothing(self, rec, ctrl):
        ctrl.pointer_down("n1", 0, 0, Position(0, 0))
        assert ctrl.cancel() == GestureOutcome.CANCELLED
        assert rec.clicks == [] and rec.moves == []

    def test_release_without_press(self, ctrl):
        assert ctrl.pointer_up(0, 0) == GestureOutcome.IGNORED
        assert ctrl.cancel() == GestureOutcome.IGNORED

    def test_custom_threshold(self, rec):
        ctrl = rec.controller(threshold=20)
        ctrl.pointer_down("n1", 0, 0, Position(0, 0))
        assert ctrl.pointer_move(15, 0) is None
        assert ctrl.pointer_move(21, 0) == Position(21, 0)


class TestPointerFromEvent:

    def test_dict_args(self):
        from storyloom.canvas.view import pointer_from_event

        class Event:
            args = {"clientX": 12, "clientY": 34, "button": 0}

        assert pointer_from_event(Event()) == (12.0, 34.0, 0)

    def test_list_args(self):
        from storyloom.canvas.view import pointer_from_event
        assert pointer_from_event([1, 2]) == (1.0, 2.0, 0)

    def test_missing_coordinates(self):
        from storyloom.canvas.view import pointer_from_event
        assert pointer_from_event({"button": 0}) is None

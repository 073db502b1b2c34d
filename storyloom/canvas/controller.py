"""
Drag Controller - press/drag/release disambiguation for node cards.

One controller serves one pointer device and holds at most one gesture at a
time. A gesture starts on a primary-button press over a node and ends on
release (or when the canvas loses the pointer).

    IDLE --press--> PRESSED --moved > threshold--> DRAGGING
      ^                |                               |
      +----release-----+ (click)         release ------+ (commit)

Positions emitted while dragging are always the node's start position plus
the total pointer displacement, never an increment on the previous frame.
A release farther than the threshold from the press is a drag even when no
move event crossed it first.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from storyloom.canvas.constants import DRAG_THRESHOLD, PRIMARY_BUTTON
from storyloom.models import Position

logger = logging.getLogger(__name__)


class DragPhase(Enum):
    IDLE = "idle"
    PRESSED = "pressed"
    DRAGGING = "dragging"


class GestureOutcome(Enum):
    IGNORED = "ignored"
    CLICK = "click"
    DRAG = "drag"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class DragSession:
    """Immutable snapshot of the active gesture."""
    node_id: str
    press_x: float
    press_y: float
    node_start: Position
    phase: DragPhase = DragPhase.PRESSED

    def displacement(self, x: float, y: float) -> float:
        return math.hypot(x - self.press_x, y - self.press_y)

    def position_at(self, x: float, y: float) -> Position:
        return self.node_start.offset(x - self.press_x, y - self.press_y)


class DragController:
    """
    Turns raw pointer events into exactly one of: a click, or a committed drag.

    Callbacks:
        on_click(node_id): press and release without passing the threshold
        on_move(node_id, position): live position while dragging; also used
            to put the node back when a drag is cancelled
        on_commit(node_id, position): the drag finished at position
    """

    def __init__(
        self,
        on_click: Optional[Callable[[str], None]] = None,
        on_move: Optional[Callable[[str, Position], None]] = None,
        on_commit: Optional[Callable[[str, Position], None]] = None,
        threshold: float = DRAG_THRESHOLD,
    ):
        self._on_click = on_click
        self._on_move = on_move
        self._on_commit = on_commit
        self._threshold = threshold
        self._session: Optional[DragSession] = None

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def phase(self) -> DragPhase:
        return self._session.phase if self._session else DragPhase.IDLE

    @property
    def dragging_node_id(self) -> Optional[str]:
        if self._session and self._session.phase is DragPhase.DRAGGING:
            return self._session.node_id
        return None

    def pointer_down(self, node_id: str, x: float, y: float,
                     node_position: Position, button: int = PRIMARY_BUTTON) -> DragPhase:
        if button != PRIMARY_BUTTON:
            return self.phase
        if self._session is not None:
            # Another gesture owns the pointer
            logger.debug(f"Ignoring press on {node_id}: gesture on {self._session.node_id} in progress")
            return self.phase
        self._session = DragSession(node_id=node_id, press_x=x, press_y=y, node_start=node_position)
        return self.phase

    def pointer_move(self, x: float, y: float) -> Optional[Position]:
        """Track the pointer. Returns the emitted position, or None below the threshold."""
        session = self._session
        if session is None:
            return None

        if session.phase is DragPhase.PRESSED:
            if session.displacement(x, y) <= self._threshold:
                return None
            session = DragSession(
                node_id=session.node_id, press_x=session.press_x, press_y=session.press_y,
                node_start=session.node_start, phase=DragPhase.DRAGGING,
            )
            self._session = session
            logger.debug(f"Drag started on {session.node_id}")

        position = session.position_at(x, y)
        self._emit_move(session.node_id, position)
        return position

    def pointer_up(self, x: float, y: float) -> GestureOutcome:
        session = self._session
        self._session = None
        if session is None:
            return GestureOutcome.IGNORED

        if session.phase is DragPhase.DRAGGING or session.displacement(x, y) > self._threshold:
            position = session.position_at(x, y)
            self._emit_move(session.node_id, position)
            if self._on_commit:
                self._on_commit(session.node_id, position)
            return GestureOutcome.DRAG

        if self._on_click:
            self._on_click(session.node_id)
        return GestureOutcome.CLICK

    def cancel(self) -> GestureOutcome:
        """Abort the gesture (pointer capture lost). Neither click nor commit fires."""
        session = self._session
        self._session = None
        if session is None:
            return GestureOutcome.IGNORED
        if session.phase is DragPhase.DRAGGING:
            self._emit_move(session.node_id, session.node_start)
        logger.debug(f"Gesture on {session.node_id} cancelled")
        return GestureOutcome.CANCELLED

    def _emit_move(self, node_id: str, position: Position) -> None:
        if self._on_move:
            self._on_move(node_id, position)

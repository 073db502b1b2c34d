"""
Story Canvas - NiceGUI rendering of the scene graph.

Scene cards are absolutely positioned divs on a large scrollable surface,
with the connection layer (an SVG built by the router) underneath them.

Pointer handling:
- mousedown on a card starts a gesture in the DragController
- mousemove / mouseup are listened for on the whole surface, so the
  gesture keeps tracking when the pointer outruns the card
- mouseleave of the surface counts as losing the pointer and cancels

During a drag only the moved card and the SVG layer are touched; the card
list is rebuilt by `render` when the graph itself changes.
"""

import logging
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from nicegui import ui

from storyloom.canvas.constants import CANVAS_HEIGHT, CANVAS_WIDTH, NODE_WIDTH, PRIMARY_BUTTON
from storyloom.canvas.controller import DragController
from storyloom.canvas.router import render_svg
from storyloom.models import Position, StoryNode

logger = logging.getLogger(__name__)

POINTER_KEYS = ['clientX', 'clientY', 'button']

# Frame budget for mousemove events sent to the server
MOVE_THROTTLE = 0.016


def pointer_from_event(event) -> Optional[Tuple[float, float, int]]:
    """
    Extract (x, y, button) from a NiceGUI event.

    Accepts the dict form produced by `.on(..., args=POINTER_KEYS)` as well as
    a bare [x, y] list.
    """
    raw = event.args if hasattr(event, 'args') else event
    if isinstance(raw, dict):
        if 'clientX' not in raw or 'clientY' not in raw:
            return None
        return float(raw['clientX']), float(raw['clientY']), int(raw.get('button', PRIMARY_BUTTON) or 0)
    if isinstance(raw, (list, tuple)) and len(raw) >= 2:
        button = int(raw[2]) if len(raw) >= 3 else PRIMARY_BUTTON
        return float(raw[0]), float(raw[1]), button
    return None


class StoryCanvas:
    """
    Renders scenes and routes pointer gestures.

    Args:
        get_nodes: returns the host's current node list
        on_node_click: a scene was clicked (not dragged)
        on_node_move: live position while dragging; the host applies it
        on_node_commit: the drag was released at its final position
    """

    def __init__(
        self,
        get_nodes: Callable[[], Sequence[StoryNode]],
        on_node_click: Callable[[str], None],
        on_node_move: Callable[[str, Position], None],
        on_node_commit: Optional[Callable[[str, Position], None]] = None,
    ):
        self._get_nodes = get_nodes
        self._on_node_click = on_node_click
        self._on_node_move = on_node_move
        self._on_node_commit = on_node_commit
        self._cards: Dict[str, Any] = {}
        self._surface = None
        self._svg = None
        self.controller = DragController(
            on_click=self._handle_click,
            on_move=self._handle_move,
            on_commit=self._handle_commit,
        )

    # --- Rendering ---

    def render(self) -> None:
        """Build the canvas inside the current NiceGUI container."""
        with ui.element('div').classes('flex-1 w-full relative overflow-auto bg-slate-50') as scroller:
            scroller.style('min-height: 0')
            self._surface = ui.element('div').classes('relative select-none').style(
                f'width: {CANVAS_WIDTH}px; height: {CANVAS_HEIGHT}px;'
            )
        self._surface.on('mousemove', self._handle_pointer_move, POINTER_KEYS, throttle=MOVE_THROTTLE)
        self._surface.on('mouseup', self._handle_pointer_up, POINTER_KEYS)
        self._surface.on('mouseleave', self._handle_pointer_leave)
        self.refresh()

    def refresh(self) -> None:
        """Rebuild cards and connections from the host's nodes."""
        if self._surface is None:
            return
        nodes = self._get_nodes()
        self._surface.clear()
        self._cards = {}
        with self._surface:
            self._svg = ui.html(render_svg(nodes))
            for node in nodes:
                self._cards[node.id] = self._render_card(node)

    def _render_card(self, node: StoryNode):
        card = ui.card().classes('absolute cursor-move p-4 shadow-lg hover:shadow-xl gap-1')
        card.style(self._card_style(node.position))
        if node.is_start:
            card.classes('border-2 border-green-500')
        if node.is_end:
            card.classes('border-2 border-red-500')

        with card:
            with ui.row().classes('w-full items-start justify-between no-wrap'):
                with ui.row().classes('items-center gap-2 no-wrap'):
                    ui.icon('menu_book').classes('text-slate-600')
                    ui.label(node.title or 'Untitled scene').classes('text-slate-900 font-medium')
                with ui.row().classes('gap-1'):
                    if node.is_start:
                        ui.badge('Start', color='green')
                    if node.is_end:
                        ui.badge('End', color='red')

            ui.label(node.content).classes('text-slate-600 text-sm line-clamp-3')

            if node.choices:
                ui.label('Choices:').classes('text-xs text-slate-500 mt-2')
                for choice in node.choices:
                    with ui.row().classes('items-center gap-2 no-wrap'):
                        ui.icon('circle').classes('text-[6px] text-slate-500')
                        ui.label(choice.text).classes('text-xs text-slate-600 line-clamp-1')
            elif not node.is_end:
                ui.label('No choices defined').classes('text-xs text-amber-600 mt-2')

        card.on('mousedown', lambda e, node_id=node.id: self._handle_pointer_down(node_id, e), POINTER_KEYS)
        return card

    @staticmethod
    def _card_style(position: Position) -> str:
        return f'left: {position.x}px; top: {position.y}px; width: {NODE_WIDTH}px;'

    def _redraw_connections(self) -> None:
        if self._svg is not None:
            self._svg.content = render_svg(self._get_nodes())

    # --- Pointer events ---

    def _handle_pointer_down(self, node_id: str, event) -> None:
        pointer = pointer_from_event(event)
        if pointer is None:
            return
        node = next((n for n in self._get_nodes() if n.id == node_id), None)
        if node is None:
            return
        x, y, button = pointer
        self.controller.pointer_down(node_id, x, y, node.position, button=button)

    def _handle_pointer_move(self, event) -> None:
        pointer = pointer_from_event(event)
        if pointer is not None:
            self.controller.pointer_move(pointer[0], pointer[1])

    def _handle_pointer_up(self, event) -> None:
        pointer = pointer_from_event(event)
        if pointer is None:
            self.controller.cancel()
            return
        self.controller.pointer_up(pointer[0], pointer[1])

    def _handle_pointer_leave(self, _event=None) -> None:
        self.controller.cancel()

    # --- Controller callbacks ---

    def _handle_click(self, node_id: str) -> None:
        self._on_node_click(node_id)

    def _handle_move(self, node_id: str, position: Position) -> None:
        self._on_node_move(node_id, position)
        card = self._cards.get(node_id)
        if card is not None:
            card.style(self._card_style(position))
            if self.controller.dragging_node_id:
                card.classes(add='opacity-70')
            else:
                card.classes(remove='opacity-70')
        self._redraw_connections()

    def _handle_commit(self, node_id: str, position: Position) -> None:
        card = self._cards.get(node_id)
        if card is not None:
            card.classes(remove='opacity-70')
        if self._on_node_commit:
            self._on_node_commit(node_id, position)

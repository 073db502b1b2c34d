"""
Story canvas: node positioning and connection rendering.

- DragController: press/drag/release state machine
- route_connections / render_svg: paths between choices and their targets
- StoryCanvas: NiceGUI view wiring pointer events to the controller

Usage:
    from storyloom.canvas import DragController, route_connections
    from storyloom.canvas.view import StoryCanvas
"""

from storyloom.canvas.constants import (
    DRAG_THRESHOLD,
    NODE_WIDTH,
    SOURCE_ANCHOR_Y,
    CHOICE_SPACING,
    TARGET_ANCHOR_Y,
)
from storyloom.canvas.controller import DragController, DragPhase, DragSession, GestureOutcome
from storyloom.canvas.router import Connection, route_connections, render_svg

__all__ = [
    'DragController',
    'DragPhase',
    'DragSession',
    'GestureOutcome',
    'Connection',
    'route_connections',
    'render_svg',
    'DRAG_THRESHOLD',
    'NODE_WIDTH',
    'SOURCE_ANCHOR_Y',
    'CHOICE_SPACING',
    'TARGET_ANCHOR_Y',
]

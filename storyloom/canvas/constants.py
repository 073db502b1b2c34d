"""
Shared constants for the story canvas.

Used by the drag controller, the connection router and the canvas view.
Node cards are rendered NODE_WIDTH wide, so anchors computed here line up
with what the browser draws.
"""

# Pointer travel (device-independent px) before a press becomes a drag
DRAG_THRESHOLD = 5.0

# Only the primary mouse button starts a gesture
PRIMARY_BUTTON = 0

# Node card geometry
NODE_WIDTH = 300

# Connection anchors relative to the node's top-left corner
SOURCE_ANCHOR_Y = 80
CHOICE_SPACING = 20
TARGET_ANCHOR_Y = 40

# Scrollable canvas size
CANVAS_WIDTH = 2000
CANVAS_HEIGHT = 2000

# Connection styling
CONNECTION_COLOR = "#94a3b8"
CONNECTION_WIDTH = 2

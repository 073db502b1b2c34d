"""
Reusable UI Components
"""

from .node_editor import render_node_editor
from .story_history import open_story_history
from .story_metadata import render_story_metadata
from .story_preview import StoryPreview

__all__ = ['render_node_editor', 'open_story_history', 'render_story_metadata', 'StoryPreview']

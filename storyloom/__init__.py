"""
Storyloom - branching story editor.

Scenes are nodes, choices are labeled edges. The package holds the
story-graph model, the canvas interaction engine, the playback engine
and the persistence/identity collaborators used by `app.py`.
"""

__version__ = "0.1.0"

"""
Story preview: plays the story the way a reader sees it.
"""

from typing import Callable, Sequence

from nicegui import ui

from storyloom.models import StoryNode
from storyloom.preview import PlaybackStatus, PreviewEngine


class StoryPreview:
    """
    Reader view over a PreviewEngine.

    Args:
        nodes: the story's scenes at the time preview was opened
        on_exit: called when the author goes back to the editor
    """

    def __init__(self, nodes: Sequence[StoryNode], on_exit: Callable[[], None]):
        self.engine = PreviewEngine(nodes)
        self._on_exit = on_exit

    def render(self) -> None:
        with ui.column().classes('w-full items-center p-8 bg-gradient-to-br from-indigo-50 to-purple-50 flex-1'):
            self._content()

    @ui.refreshable
    def _content(self) -> None:
        engine = self.engine
        node = engine.current_node

        with ui.row().classes('w-full max-w-3xl justify-between items-center'):
            ui.button('Back to Editor', icon='arrow_back', on_click=self._on_exit).props('flat')
            ui.button('Restart', icon='restart_alt', on_click=self._restart).props('outline')

        if engine.status == PlaybackStatus.NO_START:
            with ui.card().classes('w-full max-w-3xl p-8 items-center'):
                ui.label('No Starting Scene').classes('text-xl font-semibold')
                ui.label('Mark one of your scenes as the starting scene to preview the story.')\
                    .classes('text-slate-600')
            return

        with ui.card().classes('w-full max-w-3xl p-8'):
            ui.label(node.title).classes('text-2xl font-semibold mb-4')
            ui.label(node.content).classes('text-slate-700 whitespace-pre-wrap')

            if engine.status == PlaybackStatus.ENDED:
                with ui.column().classes('w-full items-center mt-8'):
                    ui.label('The End').classes('text-xl font-semibold text-indigo-700')
                    ui.button('Read Again', icon='restart_alt', on_click=self._restart)
            elif engine.status == PlaybackStatus.DEAD_END:
                ui.label('This scene has no choices yet. Add choices or mark it as an ending.')\
                    .classes('mt-8 text-amber-700 bg-amber-50 p-4 rounded')
            else:
                ui.label('What do you do?').classes('mt-8 mb-2 text-sm font-medium text-slate-500')
                for choice in engine.choices:
                    ui.button(choice.text or 'Continue', on_click=lambda _, cid=choice.id: self._choose(cid))\
                        .classes('w-full justify-start').props('outline no-caps')

        ui.label(f'Scene {engine.step} of your journey').classes('text-xs text-slate-500 mt-4')

    def _choose(self, choice_id: str) -> None:
        if self.engine.choose(choice_id):
            self._content.refresh()

    def _restart(self) -> None:
        self.engine.restart()
        self._content.refresh()

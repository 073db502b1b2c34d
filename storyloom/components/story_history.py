"""
Saved stories dialog.

Lists the author's stories from the persistence service with their scene
count and last update, and lets the author open or delete one.
"""

import logging
from datetime import datetime
from typing import Any, Callable, List

from nicegui import run, ui

from storyloom.errors import StoryloomError
from storyloom.models import StoryMeta
from storyloom.storage.client import StoryApiClient

logger = logging.getLogger(__name__)


def format_updated(timestamp: str) -> str:
    """Short date for the list ('Jan 14, 2026'); the raw value if it does not parse."""
    try:
        return datetime.fromisoformat(timestamp.replace('Z', '+00:00')).strftime('%b %d, %Y')
    except ValueError:
        return timestamp


async def open_story_history(
    client: StoryApiClient,
    on_open: Callable[[str], Any],
    on_error: Callable[[StoryloomError], None],
) -> None:
    """
    Fetch the story list and show it.

    Args:
        client: persistence client for the signed-in author
        on_open: receives the id of the story to load; may be a coroutine function
        on_error: called with any persistence error
    """
    try:
        stories: List[StoryMeta] = await run.io_bound(client.list_stories)
    except StoryloomError as e:
        on_error(e)
        return

    dialog = ui.dialog()

    with dialog, ui.card().classes('w-full max-w-xl'):
        with ui.row().classes('w-full items-center justify-between'):
            ui.label('Your Stories').classes('text-lg font-semibold')
            ui.button(icon='close', on_click=dialog.close).props('flat round dense color=grey')

        @ui.refreshable
        def story_list():
            if not stories:
                with ui.column().classes('w-full items-center p-6'):
                    ui.icon('menu_book').classes('text-4xl text-slate-400')
                    ui.label('No stories yet').classes('text-slate-500')
                return
            for meta in sorted(stories, key=lambda m: m.updated_at, reverse=True):
                with ui.card().classes('w-full hover:bg-slate-50'):
                    with ui.row().classes('w-full items-start justify-between no-wrap'):
                        with ui.column().classes('gap-0 flex-1 cursor-pointer')\
                                .on('click', lambda _, sid=meta.id: open_story(sid)):
                            ui.label(meta.title or 'Untitled Story').classes('font-medium')
                            if meta.description:
                                ui.label(meta.description).classes('text-sm text-slate-600 line-clamp-2')
                            ui.label(f'{meta.node_count} scenes · Updated {format_updated(meta.updated_at)}')\
                                .classes('text-xs text-slate-500')
                        ui.button(icon='delete', on_click=lambda _, sid=meta.id: delete_story(sid))\
                            .props('flat round dense color=red')

        async def open_story(story_id: str):
            dialog.close()
            result = on_open(story_id)
            if hasattr(result, '__await__'):
                await result

        async def delete_story(story_id: str):
            confirm = ui.dialog()
            with confirm, ui.card():
                ui.label('Are you sure you want to delete this story?')
                with ui.row().classes('w-full justify-end'):
                    ui.button('Cancel', on_click=lambda: confirm.submit(False)).props('flat')
                    ui.button('Delete', color='red', on_click=lambda: confirm.submit(True))
            if not await confirm:
                return
            try:
                await run.io_bound(client.delete_story, story_id)
            except StoryloomError as e:
                on_error(e)
                return
            stories[:] = [m for m in stories if m.id != story_id]
            ui.notify('Story deleted', type='warning')
            story_list.refresh()

        story_list()

    dialog.open()

"""
Story details dialog (title and description).
"""

from typing import Callable

from nicegui import ui

from storyloom.models import Story


def render_story_metadata(story: Story, on_save: Callable[[str, str], None]) -> 'ui.dialog':
    """Dialog editing the story title and description. on_save gets (title, description)."""
    fields = {'title': story.title, 'description': story.description}

    dialog = ui.dialog()
    with dialog, ui.card().classes('w-full max-w-lg'):
        ui.label('Story Details').classes('text-lg font-semibold')
        ui.input('Story Title', placeholder='Enter your story title')\
            .bind_value(fields, 'title').classes('w-full').props('outlined dense')
        ui.textarea('Description', placeholder='Brief description of your story...')\
            .bind_value(fields, 'description').classes('w-full').props('outlined')

        def do_save():
            on_save(fields['title'], fields['description'])
            dialog.close()

        with ui.row().classes('w-full justify-end gap-2'):
            ui.button('Cancel', on_click=dialog.close).props('flat color=grey')
            ui.button('Save', icon='save', on_click=do_save)
    return dialog

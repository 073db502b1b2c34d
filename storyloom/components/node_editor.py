"""
Node Editor Dialog

Edits one scene through a NodeEditSession:
- Title and content
- Starting / ending flags
- Choices with their target scenes
- Save / Cancel / Delete buttons

Nothing reaches the story until Save; Cancel just drops the session.
"""

from typing import Callable, Sequence

from nicegui import ui

from storyloom.editor import NodeEditSession
from storyloom.models import StoryNode


def render_node_editor(
    node: StoryNode,
    all_nodes: Sequence[StoryNode],
    on_save: Callable[[StoryNode], None],
    on_delete: Callable[[str], None],
) -> 'ui.dialog':
    """
    Create and return the scene editor dialog.

    Args:
        node: the scene to edit
        all_nodes: every scene in the story, offered as choice targets
        on_save: receives the committed replacement scene
        on_delete: receives the scene id after the author confirmed deletion

    Returns:
        The dialog instance (call dialog.open() to show)
    """
    session = NodeEditSession(node, all_nodes)
    target_options = {n.id: n.title or 'Untitled scene' for n in session.available_targets}

    dialog = ui.dialog()

    with dialog:
        with ui.card().classes('w-full max-w-2xl'):
            with ui.row().classes('w-full items-center justify-between'):
                ui.label('Edit Scene').classes('text-lg font-semibold')
                ui.button(icon='close', on_click=dialog.close).props('flat round dense color=grey')

            ui.input('Scene Title', placeholder='Enter scene title')\
                .bind_value(session, 'title').classes('w-full').props('outlined dense')
            ui.textarea('Scene Content', placeholder='Enter the story text for this scene...')\
                .bind_value(session, 'content').classes('w-full').props('outlined autogrow')

            with ui.row().classes('gap-6'):
                ui.switch('Starting Scene').bind_value(session, 'is_start')
                def toggle_end(e):
                    session.is_end = e.value
                    choices_panel.refresh()

                ui.switch('Ending Scene', value=session.is_end, on_change=toggle_end)

            @ui.refreshable
            def choices_panel():
                if session.is_end:
                    if session.discards_choices:
                        ui.label('Ending scenes have no choices. Saving will remove '
                                 f'{len(session.choices)} choice(s).').classes('text-sm text-amber-600')
                    return

                with ui.row().classes('w-full items-center justify-between'):
                    ui.label('Choices').classes('text-sm font-medium')
                    ui.button('Add Choice', icon='add', on_click=add_choice).props('flat dense')

                for choice in session.choices:
                    with ui.row().classes('w-full items-center gap-2 no-wrap'):
                        ui.input(
                            value=choice.text,
                            placeholder="Choice text (e.g., 'Open the door')",
                            on_change=lambda e, cid=choice.id: session.set_choice_text(cid, e.value),
                        ).classes('flex-1').props('outlined dense')
                        ui.select(
                            options=target_options,
                            value=choice.target_node_id if choice.target_node_id in target_options else None,
                            label='Select target scene',
                            on_change=lambda e, cid=choice.id: _retarget(cid, e.value),
                        ).classes('w-56').props('outlined dense')
                        ui.button(icon='delete', on_click=lambda _, cid=choice.id: remove_choice(cid))\
                            .props('flat round dense color=red')

            def add_choice():
                session.add_choice()
                choices_panel.refresh()

            def remove_choice(choice_id: str):
                session.remove_choice(choice_id)
                choices_panel.refresh()

            def _retarget(choice_id: str, target_id):
                if target_id and not session.retarget_choice(choice_id, target_id):
                    ui.notify('That scene cannot be a target', type='warning')

            choices_panel()

            ui.separator()

            with ui.row().classes('w-full justify-between'):
                async def do_delete():
                    confirm = ui.dialog()
                    with confirm, ui.card():
                        ui.label('Are you sure you want to delete this scene?')
                        with ui.row().classes('w-full justify-end'):
                            ui.button('Cancel', on_click=lambda: confirm.submit(False)).props('flat')
                            ui.button('Delete', color='red', on_click=lambda: confirm.submit(True))
                    if await confirm:
                        on_delete(session.node_id)
                        dialog.close()

                ui.button(icon='delete', color='red', on_click=do_delete).props('flat').tooltip('Delete Scene')

                with ui.row().classes('gap-2'):
                    ui.button('Cancel', on_click=dialog.close).props('flat color=grey')

                    def do_save():
                        if session.is_dirty:
                            on_save(session.commit())
                        dialog.close()

                    ui.button('Save Changes', icon='save', on_click=do_save)

    return dialog

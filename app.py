"""
Main NiceGUI application for Storyloom.

Serves the story editor page, the auth pages, and the persistence API
(mounted on the same FastAPI app under the configured prefix).

The page owns one StoryDocument per client. Every edit goes through
`dispatch`, which runs the reducer and re-renders only when the document
actually changed.
"""

import logging
import sys

from dotenv import load_dotenv
from nicegui import app, run, ui

load_dotenv()

from storyloom.api import create_api_router
from storyloom.auth import (
    configure_session_manager,
    create_login_page,
    create_logout_handler,
    create_register_page,
    render_user_menu,
    require_auth,
)
from storyloom.canvas.view import StoryCanvas
from storyloom.components import (
    StoryPreview,
    open_story_history,
    render_node_editor,
    render_story_metadata,
)
from storyloom.config import get_settings
from storyloom.conversion import export_filename, export_story_json, import_story_json
from storyloom.document import (
    AddNode,
    DeleteNode,
    MoveNode,
    ReplaceStory,
    UpdateDetails,
    UpdateNode,
    new_document,
    reduce,
)
from storyloom.errors import AuthError, StoryloomError
from storyloom.graph import find_node, first_scene, new_scene
from storyloom.models import Story
from storyloom.storage import StoryApiClient, StoryRepository, create_identity, create_kv_store

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
)
logger = logging.getLogger('storyloom')

# --- Persistence service ---

repository = StoryRepository(create_kv_store(settings))
app.include_router(create_api_router(repository, create_identity(settings)), prefix=settings.api_prefix)

# --- Auth ---

session_manager = configure_session_manager(
    supabase_url=settings.supabase_url,
    supabase_key=settings.supabase_anon_key,
    api_client=StoryApiClient(settings.api_base_url, anon_key=settings.supabase_anon_key),
)
create_login_page()
create_register_page()
create_logout_handler()

if not session_manager.is_available:
    logger.warning("Supabase is not configured: the editor runs without sign-in and saving is disabled")


@ui.page('/')
@require_auth()
def main_page():
    ui.query('.nicegui-content').classes('p-0 gap-0 h-screen')

    state = {
        'document': new_document(),
        'mode': 'editor',
        'token': session_manager.get_session_token(),
    }

    client = StoryApiClient(
        settings.api_base_url,
        token_provider=lambda: state['token'],
        anon_key=settings.supabase_anon_key,
    )

    # --- Document ---

    def story() -> Story:
        return state['document'].story

    def dispatch(action, rerender: bool = True):
        updated = reduce(state['document'], action)
        if updated is state['document']:
            return
        state['document'] = updated
        if rerender:
            workspace.refresh()

    # --- Persistence ---

    def show_error(error: StoryloomError):
        ui.notify(error.message, type='negative')
        if isinstance(error, AuthError):
            session_manager.logout()
            ui.navigate.to('/login')

    async def api_call(fn, *args):
        # Tokens live in per-user storage, which is only reachable from the page's own context
        state['token'] = session_manager.get_session_token()
        return await run.io_bound(fn, *args)

    async def save_story():
        if not session_manager.is_available:
            ui.notify('Saving needs a Supabase project; use Export instead', type='warning')
            return
        try:
            await api_call(client.save_story, story())
        except StoryloomError as e:
            show_error(e)
            return
        ui.notify('Story saved successfully!', type='positive')

    async def load_story(story_id: str):
        try:
            loaded = await api_call(client.load_story, story_id)
        except StoryloomError as e:
            show_error(e)
            return
        state['mode'] = 'editor'
        dispatch(ReplaceStory(loaded))

    async def show_history():
        if not session_manager.is_available:
            ui.notify('Saved stories need a Supabase project', type='warning')
            return
        state['token'] = session_manager.get_session_token()
        await open_story_history(client, on_open=load_story, on_error=show_error)

    # --- File import / export ---

    def export_story():
        ui.download(export_story_json(story()).encode('utf-8'), export_filename(story()))

    def show_import_dialog():
        def handle_upload(e):
            try:
                imported = import_story_json(e.content.read())
            except StoryloomError as err:
                show_error(err)
                return
            dialog.close()
            state['mode'] = 'editor'
            dispatch(ReplaceStory(imported))
            ui.notify(f'Imported "{imported.title}"', type='positive')

        with ui.dialog() as dialog, ui.card():
            ui.label('Import Story').classes('text-lg font-semibold')
            ui.upload(on_upload=handle_upload, auto_upload=True).props('accept=.json')
        dialog.open()

    # --- Editing ---

    def new_story():
        state['mode'] = 'editor'
        dispatch(ReplaceStory(Story.create()))

    def add_scene():
        dispatch(AddNode(new_scene(story().nodes)))

    def create_first_scene():
        dispatch(AddNode(first_scene()))

    def open_node_editor(node_id: str):
        node = find_node(story().nodes, node_id)
        if node is None:
            return
        render_node_editor(
            node,
            story().nodes,
            on_save=lambda updated: dispatch(UpdateNode(updated)),
            on_delete=lambda nid: dispatch(DeleteNode(nid)),
        ).open()

    def open_details():
        render_story_metadata(
            story(),
            on_save=lambda title, description: dispatch(UpdateDetails(title, description)),
        ).open()

    def move_node(node_id: str, position):
        # The canvas restyles the dragged card itself
        dispatch(MoveNode(node_id, position.x, position.y), rerender=False)

    def set_mode(mode: str):
        state['mode'] = mode
        workspace.refresh()

    # --- Layout ---

    with ui.header().classes('items-center justify-between bg-white text-slate-900 shadow-sm px-4 py-2'):
        with ui.row().classes('items-center gap-3'):
            ui.icon('auto_stories').classes('text-2xl text-indigo-600')
            with ui.column().classes('gap-0'):
                ui.label().bind_text_from(state, 'document', backward=lambda d: d.story.title or 'Untitled Story')\
                    .classes('text-lg font-semibold')
                ui.label().bind_text_from(state, 'document', backward=lambda d: f'{len(d.nodes)} scenes')\
                    .classes('text-xs text-slate-500')

        with ui.row().classes('items-center gap-1'):
            ui.button('Add Scene', icon='add', on_click=add_scene).props('flat no-caps')
            ui.button('Preview', icon='play_arrow', on_click=lambda: set_mode('preview')).props('flat no-caps')
            ui.button('Details', icon='edit_note', on_click=open_details).props('flat no-caps')
            ui.separator().props('vertical')
            ui.button('Save', icon='save', on_click=save_story).props('flat no-caps')
            ui.button('My Stories', icon='folder_open', on_click=show_history).props('flat no-caps')
            ui.button('New', icon='note_add', on_click=new_story).props('flat no-caps')
            ui.button(icon='download', on_click=export_story).props('flat round').tooltip('Export JSON')
            ui.button(icon='upload', on_click=show_import_dialog).props('flat round').tooltip('Import JSON')
            if session_manager.is_available:
                render_user_menu()

    @ui.refreshable
    def workspace():
        if state['mode'] == 'preview':
            StoryPreview(story().nodes, on_exit=lambda: set_mode('editor')).render()
            return

        if not story().nodes:
            with ui.column().classes('w-full flex-1 items-center justify-center bg-slate-50'):
                ui.icon('auto_stories').classes('text-6xl text-slate-300')
                ui.label('Start your story').classes('text-xl font-semibold text-slate-700')
                ui.label('Create the opening scene, then branch out with choices.').classes('text-slate-500')
                ui.button('Create First Scene', icon='add', on_click=create_first_scene).classes('mt-4')
            return

        canvas = StoryCanvas(
            get_nodes=lambda: story().nodes,
            on_node_click=open_node_editor,
            on_node_move=move_node,
        )
        canvas.render()

    with ui.column().classes('w-full h-full gap-0'):
        workspace()


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        title='Storyloom',
        port=settings.port,
        reload=not getattr(sys, 'frozen', False),
        storage_secret=settings.storage_secret,
    )

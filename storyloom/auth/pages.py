"""
Authentication pages for Storyloom.

NiceGUI pages for login, registration and logout, plus the header user menu.
"""

import logging

from nicegui import app, run, ui

from storyloom.auth.session import get_session_manager

logger = logging.getLogger(__name__)

AUTH_PAGE_STYLE = '''
    <style>
        .auth-container {
            min-height: 100vh;
            display: flex;
            align-items: center;
            justify-content: center;
            background: linear-gradient(135deg, #eef2ff 0%, #faf5ff 100%);
        }
        .auth-card {
            width: 100%;
            max-width: 400px;
            padding: 2rem;
        }
    </style>
'''


def _show_error(label, message: str) -> None:
    label.text = message
    label.classes(remove='hidden')


def _redirect_after_login() -> None:
    redirect = app.storage.user.pop("redirect_after_login", "/")
    ui.navigate.to(redirect)


def create_login_page():
    """Register the /login route."""

    @ui.page('/login')
    def login_page():
        session_manager = get_session_manager()
        if session_manager.get_current_user():
            _redirect_after_login()
            return

        ui.add_head_html(AUTH_PAGE_STYLE)

        with ui.column().classes('auth-container w-full'):
            with ui.card().classes('auth-card'):
                ui.label('Storyloom').classes('text-2xl font-bold text-center w-full mb-2')
                ui.label('Sign in to write your stories').classes('text-gray-500 text-center w-full mb-6')

                email_input = ui.input('Email').props('outlined').classes('w-full')
                password_input = ui.input('Password', password=True, password_toggle_button=True)\
                    .props('outlined').classes('w-full')

                error_label = ui.label('').classes('text-red-500 text-sm hidden')

                async def do_login():
                    email = (email_input.value or '').strip()
                    password = password_input.value or ''
                    if not email or not password:
                        _show_error(error_label, 'Please enter email and password')
                        return

                    login_button.props('loading')
                    result = session_manager.login(email, password)
                    login_button.props(remove='loading')

                    if result['success']:
                        ui.notify('Signed in', color='positive')
                        _redirect_after_login()
                    else:
                        _show_error(error_label, result.get('error') or 'Login failed')

                login_button = ui.button('Sign In', on_click=do_login)\
                    .classes('w-full mt-4').props('color=primary')
                password_input.on('keydown.enter', do_login)

                ui.separator().classes('my-4')
                with ui.row().classes('w-full justify-center'):
                    ui.label("Don't have an account?").classes('text-gray-500')
                    ui.link('Register', '/register').classes('text-indigo-600')


def create_register_page():
    """Register the /register route."""

    @ui.page('/register')
    def register_page():
        session_manager = get_session_manager()
        if session_manager.get_current_user():
            ui.navigate.to('/')
            return

        ui.add_head_html(AUTH_PAGE_STYLE)

        with ui.column().classes('auth-container w-full'):
            with ui.card().classes('auth-card'):
                ui.label('Create Account').classes('text-2xl font-bold text-center w-full mb-2')
                ui.label('Start writing branching stories').classes('text-gray-500 text-center w-full mb-6')

                name_input = ui.input('Name').props('outlined').classes('w-full')
                email_input = ui.input('Email').props('outlined').classes('w-full')
                password_input = ui.input('Password', password=True, password_toggle_button=True)\
                    .props('outlined').classes('w-full')
                confirm_password_input = ui.input('Confirm Password', password=True, password_toggle_button=True)\
                    .props('outlined').classes('w-full')

                error_label = ui.label('').classes('text-red-500 text-sm hidden')

                async def do_register():
                    name = (name_input.value or '').strip()
                    email = (email_input.value or '').strip()
                    password = password_input.value or ''
                    confirm = confirm_password_input.value or ''

                    if not name or not email or not password:
                        _show_error(error_label, 'Email, password, and name are required')
                        return
                    if len(password) < 6:
                        _show_error(error_label, 'Password must be at least 6 characters')
                        return
                    if password != confirm:
                        _show_error(error_label, 'Passwords do not match')
                        return

                    register_button.props('loading')
                    result = await run.io_bound(session_manager.create_account, email, password, name)
                    if result['success']:
                        result = session_manager.login(email, password)
                    register_button.props(remove='loading')

                    if result['success']:
                        ui.notify('Account created', color='positive')
                        ui.navigate.to('/')
                    else:
                        _show_error(error_label, result.get('error') or 'Registration failed')

                register_button = ui.button('Create Account', on_click=do_register)\
                    .classes('w-full mt-4').props('color=primary')
                confirm_password_input.on('keydown.enter', do_register)

                ui.separator().classes('my-4')
                with ui.row().classes('w-full justify-center'):
                    ui.label('Already have an account?').classes('text-gray-500')
                    ui.link('Sign In', '/login').classes('text-indigo-600')


def create_logout_handler():
    """Register the /logout route."""

    @ui.page('/logout')
    def logout_page():
        get_session_manager().logout()
        ui.navigate.to('/login')


def render_user_menu():
    """Header menu: the author's name and a sign-out entry."""
    user = get_session_manager().get_current_user()
    if not user:
        ui.button('Sign In', on_click=lambda: ui.navigate.to('/login')).props('flat')
        return

    with ui.button(icon='account_circle').props('flat round'):
        with ui.menu():
            with ui.column().classes('p-2 min-w-48 gap-0'):
                ui.label(user.get('name') or user.get('email', '')).classes('font-bold')
                ui.label(user.get('email', '')).classes('text-sm text-gray-500')
            ui.separator()
            ui.menu_item('Sign Out', lambda: ui.navigate.to('/logout'))

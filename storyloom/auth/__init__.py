"""
Authentication for Storyloom.

Supabase-backed sign-in with login / register pages and a page decorator
for the editor.
"""

from storyloom.auth.session import SessionManager, configure_session_manager, get_session_manager
from storyloom.auth.middleware import require_auth
from storyloom.auth.pages import (
    create_login_page,
    create_logout_handler,
    create_register_page,
    render_user_menu,
)

__all__ = [
    'SessionManager',
    'configure_session_manager',
    'get_session_manager',
    'require_auth',
    'create_login_page',
    'create_register_page',
    'create_logout_handler',
    'render_user_menu',
]

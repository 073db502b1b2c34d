"""
Authentication helpers for pages.
"""

import functools
from typing import Callable

from nicegui import app, ui

from storyloom.auth.session import get_session_manager


def require_auth(redirect_to: str = "/login"):
    """
    Decorator to require a signed-in author for a page.

    Without a configured Supabase project there is nobody to sign in, and
    the page is served as is.

    Usage:
        @ui.page('/')
        @require_auth()
        def editor_page():
            ...
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            manager = get_session_manager()
            if manager.is_available and manager.restore() is None:
                app.storage.user["redirect_after_login"] = "/"
                ui.navigate.to(redirect_to)
                return

            result = func(*args, **kwargs)
            if hasattr(result, '__await__'):
                return await result
            return result

        return wrapper
    return decorator

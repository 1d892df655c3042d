"""
Request handlers for the API module.
"""

from .render_handlers import handle_render, handle_render_page

__all__ = [
    "handle_render",
    "handle_render_page",
]

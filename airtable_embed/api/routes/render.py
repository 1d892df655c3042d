"""
Render route definitions.
"""

from aiohttp import web

from ..handlers.render_handlers import handle_render, handle_render_page

routes = web.RouteTableDef()


@routes.post(r"/api/render/", name="render")
async def render(request):
    """Render the body of a single plugin tag."""
    return await handle_render(request)


@routes.post(r"/api/pages/render/", name="render_page")
async def render_page(request):
    """Render every plugin tag of a page."""
    return await handle_render_page(request)

"""
Main API application factory.

This module creates the aiohttp application with all routes and middleware.
"""

import logging
import os
from datetime import datetime, timezone

import aiohttp_cors
import sentry_sdk
from aiohttp import ClientSession, web

from airtable_embed import config
from airtable_embed.core.models import PluginSettings
from airtable_embed.core.sentry import get_sentry_kwargs
from airtable_embed.core.version import get_app_version

from .routes.render import routes as render_routes


async def health_handler(request):
    """Handle health check requests."""
    start_time = request.app["start_time"]
    current_time = datetime.now(timezone.utc)
    uptime_seconds = (current_time - start_time).total_seconds()
    return web.json_response(
        {"status": "ok", "version": request.app["app_version"], "uptime_seconds": uptime_seconds}
    )


async def app_factory():
    """Create and configure the aiohttp application."""

    async def on_startup(app):
        app["csession"] = ClientSession()
        app["start_time"] = datetime.now(timezone.utc)
        app["app_version"] = await get_app_version()

    async def on_cleanup(app):
        await app["csession"].close()

    logging.basicConfig(level=config.LOG_LEVEL or "INFO")
    if config.SENTRY_DSN:
        sentry_sdk.init(**get_sentry_kwargs())

    app = web.Application()
    app["settings"] = PluginSettings.from_config(config)

    # Add all routes
    app.add_routes(render_routes)
    app.router.add_get("/health/", health_handler, name="health")

    # Setup startup and cleanup
    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)

    # Setup CORS
    cors = aiohttp_cors.setup(
        app,
        defaults={
            "*": aiohttp_cors.ResourceOptions(
                allow_credentials=True, expose_headers="*", allow_headers="*"
            )
        },
    )
    for route in list(app.router.routes()):
        cors.add(route)

    return app


def run():
    """Run the application."""
    web.run_app(app_factory(), path=os.environ.get("AIRTABLE_EMBED_APP_SOCKET_PATH"))

"""
Render request handlers.
"""

import json

from aiohttp import web

from airtable_embed.core.data_access import AirtableClient
from airtable_embed.core.exceptions import QueryException
from airtable_embed.core.models import RenderStatus
from airtable_embed.plugin import render, render_page


async def _get_body(request, key: str) -> dict:
    """Load the JSON body and make sure `key` holds a string."""
    try:
        body = await request.json()
    except json.JSONDecodeError:
        raise QueryException(400, None, "Invalid body", "Body must be a JSON object")
    if not isinstance(body, dict) or not isinstance(body.get(key), str):
        raise QueryException(400, None, "Invalid body", f"Missing string attribute `{key}`")
    return body


def _get_client(request) -> AirtableClient:
    return AirtableClient(request.app["settings"], session=request.app["csession"])


async def handle_render(request):
    """Handle single query render requests."""
    body = await _get_body(request, "query")
    output_format = body.get("format") or "xhtml"
    if not isinstance(output_format, str):
        raise QueryException(400, None, "Invalid body", "`format` must be a string")
    result = await render(
        body["query"],
        request.app["settings"],
        output_format,
        transport=_get_client(request),
    )
    return web.json_response({"html": result.html, "status": result.status.value})


async def handle_render_page(request):
    """Handle whole page render requests."""
    body = await _get_body(request, "text")
    text, results = await render_page(
        body["text"],
        request.app["settings"],
        transport=_get_client(request),
    )
    return web.json_response(
        {
            "text": text,
            "rendered": sum(1 for r in results if r.status is RenderStatus.RENDERED),
            "failed": sum(1 for r in results if r.status is RenderStatus.FAILED),
        }
    )

"""
Render pipeline of the plugin.

`render` turns the body of a single `{{airtable>...}}` tag into HTML,
`render_page` does it for every tag of a page. Neither lets an
`AirtableError` through: failures become an error fragment and a FAILED
status.
"""

import logging
from typing import Protocol, assert_never

import aiohttp

from airtable_embed.core.data_access import AirtableClient, as_record, as_records
from airtable_embed.core.exceptions import (
    AirtableError,
    MissingThumbnail,
    TransportFailure,
    capture_failure,
)
from airtable_embed.core.locator import find_substructure
from airtable_embed.core.models import (
    DisplayMode,
    JSONValue,
    PluginSettings,
    RenderResult,
    RenderStatus,
)
from airtable_embed.core.parser import find_tags, get_display_type
from airtable_embed.core.query_builder import RequestBuilder
from airtable_embed.core.renderer import (
    IMAGE_STYLES,
    render_error,
    render_image,
    render_record,
    render_table,
    render_text,
)
from airtable_embed.core.validator import parse_query

logger = logging.getLogger(__name__)


class Transport(Protocol):
    async def fetch(self, path: str) -> JSONValue: ...


def get_thumbnails(record: dict) -> dict | None:
    thumbnails = find_substructure(record)
    return thumbnails if isinstance(thumbnails, dict) else None


async def render_query(query: str, settings: PluginSettings, transport: Transport) -> str:
    """
    Run the whole pipeline for one query and return its HTML.

    Raises:
        AirtableError: on any failure, before the API is called when the
            query itself is invalid
    """
    mode = get_display_type(query)
    parameters = parse_query(mode, query)
    builder = RequestBuilder(settings.max_records)

    match mode:
        case DisplayMode.IMAGE:
            record = as_record(await transport.fetch(builder.build_record_request(parameters)))
            thumbnails = get_thumbnails(record)
            if thumbnails is None:
                raise MissingThumbnail()
            return render_image(parameters, thumbnails, IMAGE_STYLES)
        case DisplayMode.RECORD:
            record = as_record(await transport.fetch(builder.build_record_request(parameters)))
            return render_record(parameters, record, get_thumbnails(record))
        case DisplayMode.TEXT:
            record = as_record(await transport.fetch(builder.build_record_request(parameters)))
            return render_text(parameters, record)
        case DisplayMode.TABLE:
            records = as_records(await transport.fetch(builder.build_table_request(parameters)))
            # a single match is displayed the same way as a record query
            if len(records) == 1:
                return render_record(parameters, records[0], get_thumbnails(records[0]))
            return render_table(parameters, records)
        case _:
            assert_never(mode)


async def render(
    query: str,
    settings: PluginSettings,
    output_format: str = "xhtml",
    transport: Transport | None = None,
    session: aiohttp.ClientSession | None = None,
) -> RenderResult:
    """Render the body of one plugin tag."""
    if output_format not in settings.output_formats or not query or not query.strip():
        return RenderResult("", RenderStatus.NOT_APPLICABLE)
    if transport is None:
        transport = AirtableClient(settings, session=session)
    try:
        html = await render_query(query, settings, transport)
    except TransportFailure as e:
        logger.warning(f"Airtable request failed (status {e.status}): {e.message}")
        capture_failure(e, status=e.status, base_id=settings.base_id)
        return RenderResult(render_error(e.message), RenderStatus.FAILED)
    except AirtableError as e:
        logger.info(f"Invalid Airtable query {query!r}: {e.message}")
        return RenderResult(render_error(e.message), RenderStatus.FAILED)
    return RenderResult(html, RenderStatus.RENDERED)


async def render_page(
    text: str,
    settings: PluginSettings,
    output_format: str = "xhtml",
    transport: Transport | None = None,
    session: aiohttp.ClientSession | None = None,
) -> tuple[str, list[RenderResult]]:
    """
    Replace every plugin tag of a page with its rendered HTML.

    Tags are rendered one after the other. A tag that is not applicable to
    the output format is replaced by nothing.
    """
    if transport is None:
        transport = AirtableClient(settings, session=session)
    chunks: list[str] = []
    results: list[RenderResult] = []
    position = 0
    for start, end, body in find_tags(text, settings.entry_pattern, settings.exit_pattern):
        result = await render(body, settings, output_format, transport=transport)
        chunks.append(text[position:start])
        chunks.append(result.html)
        results.append(result)
        position = end
    chunks.append(text[position:])
    return "".join(chunks), results

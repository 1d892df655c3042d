"""
Parsing of the query string written between the plugin tags.

A query looks like:

    type: "image" | record-url: "https://airtable.com/tblX/viwY/recZ" | position: right

Segments are separated by " | " and each segment is a `key: value` pair.
"""

import logging
from typing import Iterator

from .exceptions import InvalidTypeParameter, MalformedQuery, MissingTypeParameter
from .models import TYPE_ALIASES, DisplayMode

logger = logging.getLogger(__name__)

PAIR_SEPARATOR = " | "
KEY_VALUE_SEPARATOR = ": "
TYPE_PREFIX = "type: "


def strip_quotes(value: str) -> str:
    """Remove the double quotes wrapping a value, inner quotes are kept."""
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def split_fields(value: str) -> list[str]:
    return [name.strip() for name in value.split(",") if name.strip()]


def get_parameters(query: str) -> dict:
    """
    Split the query string into an ordered mapping of parameters.

    Keys are lower-cased, later duplicates overwrite earlier ones and the
    `fields` value is turned into a list of field names (order matters: it is
    the display order and the order fields are requested in).

    Raises:
        MalformedQuery: if a segment has no `: ` separator
    """
    parameters: dict = {}
    for segment in query.split(PAIR_SEPARATOR):
        key, separator, value = segment.partition(KEY_VALUE_SEPARATOR)
        if not separator:
            raise MalformedQuery(segment)
        parameters[key.strip().lower()] = strip_quotes(value)
    if "type" in parameters:
        parameters["type"] = parameters["type"].lower()
    if "fields" in parameters:
        parameters["fields"] = split_fields(parameters["fields"])
    return parameters


def get_display_type(query: str) -> DisplayMode:
    """
    Resolve the display mode from the first segment of the query.

    The type has to be resolved before the rest of the query is checked
    since it selects the parameter schema.
    """
    type_segment, separator, _ = query.partition(PAIR_SEPARATOR)
    if not separator or not type_segment:
        raise MissingTypeParameter("Missing Type Parameter / Not Enough Parameters")
    type_segment = type_segment.strip().lower()
    if not type_segment.startswith(TYPE_PREFIX):
        raise MissingTypeParameter()
    decoded_type = strip_quotes(type_segment[len(TYPE_PREFIX) :]).strip()
    if not decoded_type:
        raise MissingTypeParameter()
    if decoded_type not in TYPE_ALIASES:
        raise InvalidTypeParameter(decoded_type, list(TYPE_ALIASES))
    mode = TYPE_ALIASES[decoded_type]
    logger.debug(f"Resolved display type '{decoded_type}' to {mode.name}")
    return mode


def find_tags(text: str, entry: str, exit: str) -> Iterator[tuple[int, int, str]]:
    """
    Yield `(start, end, body)` for every plugin tag found in a page.

    `start`/`end` delimit the whole tag, markers included. Tags cannot be
    nested and an entry marker without a matching exit marker is left alone.
    """
    position = 0
    while True:
        start = text.find(entry, position)
        if start == -1:
            return
        body_start = start + len(entry)
        body_end = text.find(exit, body_start)
        if body_end == -1:
            return
        end = body_end + len(exit)
        yield start, end, text[body_start:body_end]
        position = end

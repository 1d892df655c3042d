"""
Core module for airtable_embed.

This module contains the render pipeline separated from the HTTP layer:
query parsing and checking, request building, the Airtable client, response
searching and HTML rendering.
"""

from .data_access import AirtableClient
from .exceptions import AirtableError, QueryException
from .locator import find_substructure
from .models import DisplayMode, PluginSettings, RecordLocator, RenderResult, RenderStatus
from .query_builder import RequestBuilder

__all__ = [
    "AirtableClient",
    "AirtableError",
    "DisplayMode",
    "PluginSettings",
    "QueryException",
    "RecordLocator",
    "RenderResult",
    "RenderStatus",
    "RequestBuilder",
    "find_substructure",
]

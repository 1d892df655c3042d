"""
Data access layer for the core module.

This module calls the Airtable REST API. A single failed call is reported
straight away, nothing is retried.
"""

import asyncio
import logging

import aiohttp
from yarl import URL

from .exceptions import TransportFailure
from .models import JSONValue, PluginSettings

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown API response error"


def get_error_message(payload: JSONValue) -> str:
    """Extract the message of an Airtable error body, which is either a string or an object."""
    if not isinstance(payload, dict):
        return UNKNOWN_ERROR
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    return UNKNOWN_ERROR


class AirtableClient:
    """Fetches decoded JSON from the Airtable API for a request path."""

    def __init__(self, settings: PluginSettings, session: aiohttp.ClientSession | None = None):
        self.settings = settings
        self.session = session

    def build_url(self, path: str) -> URL:
        # paths are built already encoded, yarl must not quote them again
        return URL(f"{self.settings.api_url}/{self.settings.base_id}/{path}", encoded=True)

    async def _fetch_json(self, session: aiohttp.ClientSession, path: str) -> JSONValue:
        headers = {"Authorization": f"Bearer {self.settings.api_key}"}
        timeout = aiohttp.ClientTimeout(total=self.settings.request_timeout)
        logger.debug(f"Requesting Airtable path {path}")
        try:
            async with session.get(self.build_url(path), headers=headers, timeout=timeout) as res:
                try:
                    payload = await res.json(content_type=None)
                except ValueError:
                    payload = None
                if res.status != 200:
                    raise TransportFailure(get_error_message(payload), status=res.status)
                if payload is None:
                    raise TransportFailure("Could not decode the API response", status=res.status)
                return payload
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportFailure(f"Could not reach the Airtable API ({type(e).__name__})")

    async def fetch(self, path: str) -> JSONValue:
        own = self.session is None
        session = self.session or aiohttp.ClientSession()
        try:
            return await self._fetch_json(session, path)
        finally:
            if own:
                await session.close()


def as_record(response: JSONValue) -> dict:
    """The response of a single record request, `{"id": ..., "fields": {...}}`."""
    if not isinstance(response, dict):
        raise TransportFailure(UNKNOWN_ERROR)
    return response


def as_records(response: JSONValue) -> list[dict]:
    """The records of a table query response, `{"records": [...]}`."""
    records = response.get("records") if isinstance(response, dict) else None
    if not isinstance(records, list):
        raise TransportFailure(UNKNOWN_ERROR)
    return [record for record in records if isinstance(record, dict)]

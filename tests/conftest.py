import re

import aiohttp
import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer
from aioresponses import aioresponses

from airtable_embed import config
from airtable_embed.app import app_factory
from airtable_embed.core.models import PluginSettings

API_URL = "https://api.airtable.com/v0"
BASE_ID = "appTEST123"
API_KEY = "keyTEST456"
TABLE_ID = "tblMachines01"
VIEW_ID = "viwGallery02"
RECORD_ID = "recMarble03"
RECORD_URL = f"https://airtable.com/{TABLE_ID}/{VIEW_ID}/{RECORD_ID}?blocks=hide"
RECORD_ENDPOINT = f"{API_URL}/{BASE_ID}/{TABLE_ID}/{RECORD_ID}"
TABLE_PATTERN = re.compile(rf"^{re.escape(API_URL)}/{BASE_ID}/{TABLE_ID}\?.*$")

THUMBNAILS = {
    "small": {"url": "https://dl.airtable.com/small.jpg", "width": 36, "height": 36},
    "large": {"url": "https://dl.airtable.com/large.jpg", "width": 512, "height": 512},
    "full": {"url": "https://dl.airtable.com/full.jpg", "width": 3000, "height": 3000},
}


class RecordingTransport:
    """Transport returning a canned response and keeping track of the requested paths."""

    def __init__(self, response=None):
        self.response = response
        self.paths = []

    async def fetch(self, path):
        self.paths.append(path)
        return self.response


@pytest.fixture
def settings():
    return PluginSettings(base_id=BASE_ID, api_key=API_KEY, max_records=20, api_url=API_URL)


@pytest.fixture
def rmock():
    # passthrough for local requests (aiohttp TestServer)
    with aioresponses(passthrough=["http://127.0.0.1"]) as m:
        yield m


@pytest_asyncio.fixture
async def client():
    async with aiohttp.ClientSession() as session:
        yield session


@pytest_asyncio.fixture
async def fake_client():
    config.override(AIRTABLE_BASE_ID=BASE_ID, AIRTABLE_API_KEY=API_KEY, AIRTABLE_API_URL=API_URL)
    app = await app_factory()
    async with TestClient(TestServer(app)) as client:
        yield client


@pytest.fixture
def record():
    return {
        "id": RECORD_ID,
        "createdTime": "2021-03-01T10:00:00.000Z",
        "fields": {
            "Name": "Marble Machine X",
            "Ref #": 19,
            "Notes": "Fish & <chips>",
            "Photo": [
                {
                    "id": "attPhoto",
                    "url": "https://dl.airtable.com/original.jpg",
                    "filename": "mmx.jpg",
                    "thumbnails": THUMBNAILS,
                }
            ],
            "Builders": ["recBuilder1", "recBuilder2"],
        },
    }


@pytest.fixture
def record_without_photo(record):
    fields = {k: v for k, v in record["fields"].items() if k != "Photo"}
    return {**record, "fields": fields}

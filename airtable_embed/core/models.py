"""
Data models for the core module.

This module contains the value types passed between the pipeline stages.
Everything here is built fresh for each render and never mutated afterwards.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

# Decoded JSON as returned by the Airtable API
JSONValue = Union[None, bool, int, float, str, list["JSONValue"], dict[str, "JSONValue"]]


class DisplayMode(Enum):
    """The four ways an embedded query can be displayed."""

    IMAGE = "img"
    RECORD = "record"
    TEXT = "txt"
    TABLE = "tbl"


# accepted values of the `type` parameter, in the order they are listed to users
TYPE_ALIASES: dict[str, DisplayMode] = {
    "img": DisplayMode.IMAGE,
    "image": DisplayMode.IMAGE,
    "picture": DisplayMode.IMAGE,
    "text": DisplayMode.TEXT,
    "txt": DisplayMode.TEXT,
    "table": DisplayMode.TABLE,
    "tbl": DisplayMode.TABLE,
    "record": DisplayMode.RECORD,
}


class RenderStatus(Enum):
    RENDERED = "rendered"
    FAILED = "failed"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True)
class RenderResult:
    """Markup handed back to the host, and whether it counts as a completed render."""

    html: str
    status: RenderStatus

    @property
    def ok(self) -> bool:
        return self.status is RenderStatus.RENDERED


@dataclass(frozen=True)
class RecordLocator:
    """Identifiers extracted from a pasted Airtable record URL."""

    table: str
    view: str
    record_id: str


@dataclass(frozen=True)
class PluginSettings:
    """Read-only settings threaded through a render call."""

    base_id: str
    api_key: str
    max_records: int = 20
    api_url: str = "https://api.airtable.com/v0"
    request_timeout: float = 10.0
    output_formats: tuple[str, ...] = ("xhtml",)
    entry_pattern: str = "{{airtable>"
    exit_pattern: str = "}}"

    @classmethod
    def from_config(cls, config: Any) -> "PluginSettings":
        return cls(
            base_id=config.AIRTABLE_BASE_ID or "",
            api_key=config.AIRTABLE_API_KEY or "",
            max_records=int(config.MAX_RECORDS),
            api_url=config.AIRTABLE_API_URL,
            request_timeout=float(config.REQUEST_TIMEOUT),
            output_formats=tuple(config.OUTPUT_FORMATS or ("xhtml",)),
            entry_pattern=config.ENTRY_PATTERN or "{{airtable>",
            exit_pattern=config.EXIT_PATTERN or "}}",
        )

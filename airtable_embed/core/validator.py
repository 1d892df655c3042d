"""
Parameter checking for each display mode.

A schema maps every parameter a mode knows about to either `REQUIRED` or the
default value used when the parameter is left out. Some parameters also
accept only a closed set of values, an empty string in that set meaning the
default may be substituted.
"""

import re
from urllib.parse import quote_plus

from .exceptions import (
    InvalidParameterValue,
    MissingParameter,
    MissingParameterValue,
    MissingRecordUrl,
)
from .models import DisplayMode, RecordLocator
from .parser import get_parameters

REQUIRED = object()

SCHEMAS: dict[DisplayMode, dict] = {
    DisplayMode.IMAGE: {
        "type": REQUIRED,
        "record-url": REQUIRED,
        "table": REQUIRED,
        "record-id": REQUIRED,
        "alt-tag": "",
        "image-size": "large",
        "position": "block",
    },
    DisplayMode.RECORD: {
        "type": REQUIRED,
        "record-url": REQUIRED,
        "table": REQUIRED,
        "fields": REQUIRED,
        "record-id": REQUIRED,
        "alt-tag": "",
    },
    DisplayMode.TEXT: {
        "type": REQUIRED,
        "table": REQUIRED,
        "fields": REQUIRED,
        "record-id": REQUIRED,
        "record-url": REQUIRED,
    },
    DisplayMode.TABLE: {
        "type": REQUIRED,
        "table": REQUIRED,
        "fields": REQUIRED,
        "record-url": REQUIRED,
        "where": "",
        "order-by": "",
        "order": "asc",
        "max-records": "",
    },
}

ACCEPTED_VALUES: dict[DisplayMode, dict[str, list[str]]] = {
    DisplayMode.IMAGE: {
        "image-size": ["", "small", "large", "full"],
        "position": ["", "left", "centre", "right", "block"],
    },
    DisplayMode.RECORD: {},
    DisplayMode.TEXT: {},
    DisplayMode.TABLE: {"order": ["asc", "desc"]},
}

TABLE_PATTERN = re.compile(r"tbl\w+", re.IGNORECASE)
VIEW_PATTERN = re.compile(r"viw\w+", re.IGNORECASE)
RECORD_PATTERN = re.compile(r"rec\w+", re.IGNORECASE)


def _first_match(pattern: re.Pattern, text: str) -> str:
    match = pattern.search(text)
    return match.group(0) if match else ""


def decompose_record_url(url: str) -> RecordLocator:
    """Extract the table, view and record ids from an Airtable URL, each one url encoded."""
    return RecordLocator(
        table=quote_plus(_first_match(TABLE_PATTERN, url)),
        view=quote_plus(_first_match(VIEW_PATTERN, url)),
        record_id=quote_plus(_first_match(RECORD_PATTERN, url)),
    )


def decode_record_url(query: dict) -> dict:
    """
    Back-fill `table`, `view` and `record-id` from the `record-url` parameter.

    Values extracted from the URL always win over ones written in the query.
    An id missing from the URL is set to an empty string, which the schema
    check then reports as a missing value.
    """
    if "record-url" not in query:
        raise MissingRecordUrl()
    locator = decompose_record_url(query["record-url"])
    return {
        **query,
        "table": locator.table,
        "view": locator.view,
        "record-id": locator.record_id,
    }


def _is_empty(value) -> bool:
    return value is None or value == "" or value == []


def check_parameters(query: dict, schema: dict, accepted_values: dict[str, list[str]]) -> dict:
    """
    Check a parsed query against a schema and return a new, fully populated query.

    For each schema key, in declaration order:
        - a missing required key raises `MissingParameter`, otherwise the
          default is substituted
        - a required key with an empty value raises `MissingParameterValue`,
          an optional one gets its default unless its closed set lacks ""
        - a key with a closed set of values raises `InvalidParameterValue`
          when its value is not in the set

    Keys unknown to the schema are kept as they are.
    """
    checked = dict(query)
    for key, default in schema.items():
        required = default is REQUIRED
        if key not in checked:
            if required:
                raise MissingParameter(key)
            checked[key] = default
        value = checked[key]
        if _is_empty(value):
            if required:
                raise MissingParameterValue(key)
            # an empty value only stands for the default where the closed set allows it
            if key not in accepted_values or "" in accepted_values[key]:
                checked[key] = default
        if key in accepted_values and checked[key] not in accepted_values[key]:
            raise InvalidParameterValue(key, checked[key], accepted_values[key])
    return checked


def parse_query(mode: DisplayMode, query: str) -> dict:
    """Tokenize, decode the record URL and check a query for the given display mode."""
    parameters = decode_record_url(get_parameters(query))
    return check_parameters(parameters, SCHEMAS[mode], ACCEPTED_VALUES[mode])

import pytest

from airtable_embed.core.exceptions import (
    InvalidParameterValue,
    MissingParameter,
    MissingParameterValue,
    MissingRecordUrl,
)
from airtable_embed.core.models import DisplayMode
from airtable_embed.core.validator import (
    ACCEPTED_VALUES,
    REQUIRED,
    SCHEMAS,
    check_parameters,
    decode_record_url,
    decompose_record_url,
    parse_query,
)

from .conftest import RECORD_ID, RECORD_URL, TABLE_ID, VIEW_ID


def test_decompose_record_url():
    locator = decompose_record_url(RECORD_URL)
    assert locator.table == TABLE_ID
    assert locator.view == VIEW_ID
    assert locator.record_id == RECORD_ID


def test_decompose_record_url_in_any_order():
    locator = decompose_record_url("https://airtable.com/recB2?table=tblA1&view=viwC3")
    assert (locator.table, locator.view, locator.record_id) == ("tblA1", "viwC3", "recB2")


def test_decode_record_url_overwrites_table_and_record_id():
    query = {"type": "img", "record-url": RECORD_URL, "table": "tblOther", "record-id": "recOther"}
    decoded = decode_record_url(query)
    assert decoded["table"] == TABLE_ID
    assert decoded["record-id"] == RECORD_ID
    assert decoded["view"] == VIEW_ID
    # the caller's mapping is left untouched
    assert query["table"] == "tblOther"


def test_decode_record_url_missing():
    with pytest.raises(MissingRecordUrl):
        decode_record_url({"type": "img", "table": TABLE_ID})


def test_check_parameters_adds_defaults():
    query = {"type": "img", "record-url": RECORD_URL, "table": TABLE_ID, "record-id": RECORD_ID}
    checked = check_parameters(query, SCHEMAS[DisplayMode.IMAGE], ACCEPTED_VALUES[DisplayMode.IMAGE])
    assert checked["alt-tag"] == ""
    assert checked["image-size"] == "large"
    assert checked["position"] == "block"
    assert "image-size" not in query


def test_check_parameters_empty_value_takes_default():
    query = {
        "type": "img",
        "record-url": RECORD_URL,
        "table": TABLE_ID,
        "record-id": RECORD_ID,
        "image-size": "",
    }
    checked = check_parameters(query, SCHEMAS[DisplayMode.IMAGE], ACCEPTED_VALUES[DisplayMode.IMAGE])
    assert checked["image-size"] == "large"


def test_check_parameters_keeps_unknown_keys():
    schema = {"type": REQUIRED}
    assert check_parameters({"type": "txt", "colour": "blue"}, schema, {}) == {
        "type": "txt",
        "colour": "blue",
    }


def test_check_parameters_reports_keys_in_schema_order():
    schema = {"type": REQUIRED, "table": REQUIRED, "fields": REQUIRED}
    with pytest.raises(MissingParameter) as e:
        check_parameters({"type": "txt"}, schema, {})
    assert e.value.key == "table"


@pytest.mark.parametrize(
    "mode,query,missing",
    [
        (DisplayMode.RECORD, f"type: record | record-url: {RECORD_URL}", "fields"),
        (DisplayMode.TEXT, f"type: text | record-url: {RECORD_URL}", "fields"),
        (DisplayMode.TABLE, f"type: table | record-url: {RECORD_URL}", "fields"),
    ],
)
def test_parse_query_missing_parameter(mode, query, missing):
    with pytest.raises(MissingParameter) as e:
        parse_query(mode, query)
    assert e.value.key == missing
    assert e.value.message == f"Missing Parameter: {missing}"


def test_parse_query_missing_record_url():
    with pytest.raises(MissingRecordUrl):
        parse_query(DisplayMode.IMAGE, f"type: img | table: {TABLE_ID} | record-id: {RECORD_ID}")


def test_parse_query_url_without_record_id():
    with pytest.raises(MissingParameterValue) as e:
        parse_query(DisplayMode.IMAGE, f"type: img | record-url: https://airtable.com/{TABLE_ID}")
    assert e.value.key == "record-id"


def test_parse_query_empty_required_value():
    with pytest.raises(MissingParameterValue) as e:
        parse_query(DisplayMode.TEXT, f'type: text | record-url: {RECORD_URL} | fields: ""')
    assert e.value.message == "Missing Parameter Value for: 'fields'."


def test_parse_query_invalid_value():
    with pytest.raises(InvalidParameterValue) as e:
        parse_query(DisplayMode.IMAGE, f"type: img | record-url: {RECORD_URL} | position: middle")
    assert e.value.key == "position"
    assert e.value.value == "middle"
    assert "left | centre | right | block or ''" in e.value.message


def test_parse_query_invalid_order():
    with pytest.raises(InvalidParameterValue) as e:
        parse_query(
            DisplayMode.TABLE, f"type: table | record-url: {RECORD_URL} | fields: Name | order: up"
        )
    assert e.value.message.endswith("Possible values: asc | desc")


def test_parse_query_table():
    parameters = parse_query(
        DisplayMode.TABLE,
        f'type: tbl | record-url: "{RECORD_URL}" | fields: "Name, Ref #" | order: desc',
    )
    assert parameters == {
        "type": "tbl",
        "record-url": RECORD_URL,
        "table": TABLE_ID,
        "view": VIEW_ID,
        "record-id": RECORD_ID,
        "fields": ["Name", "Ref #"],
        "order": "desc",
        "where": "",
        "order-by": "",
        "max-records": "",
    }


def test_parse_query_empty_value_outside_closed_set():
    with pytest.raises(InvalidParameterValue) as e:
        parse_query(
            DisplayMode.TABLE, f'type: table | record-url: {RECORD_URL} | fields: Name | order: ""'
        )
    assert e.value.key == "order"
    assert e.value.value == ""


def test_parse_query_empty_value_without_closed_set():
    parameters = parse_query(
        DisplayMode.TABLE, f'type: table | record-url: {RECORD_URL} | fields: Name | where: ""'
    )
    assert parameters["where"] == ""

"""
HTML fragments for each display mode.

Values coming from Airtable are always escaped. Thumbnails are the
`thumbnails` mapping of an attachment, e.g.
`{"small": {"url": ...}, "large": {"url": ...}, "full": {"url": ...}}`.
"""

from html import escape

from .exceptions import InvalidFieldName, MissingThumbnail
from .locator import find_substructure

IMAGE_STYLES = "max-width: 250px;"
RECORD_IMAGE_STYLES = "float: right; max-width: 350px; margin-left: 10px"

POSITION_CLASSES = {
    "centre": "mediacentre",
    "right": "mediaright",
    "left": "medialeft",
}

ERROR_TEMPLATE = "<p style='color: red; font-weight: bold;'>Airtable Error: {}</p>"


def position_class(position: str | None) -> str:
    """CSS class matching an image position, empty when the position has none."""
    return POSITION_CLASSES.get(position or "", "")


def _thumbnail_url(thumbnails: dict, size: str) -> str:
    try:
        return thumbnails[size]["url"]
    except (KeyError, TypeError):
        raise MissingThumbnail(f"No '{escape(size)}' thumbnail found for the image attachment")


def render_image(parameters: dict, thumbnails: dict, image_styles: str = "") -> str:
    """An image linking to its full resolution version."""
    size = parameters.get("image-size") or "large"
    full_url = _thumbnail_url(thumbnails, "full")
    src = _thumbnail_url(thumbnails, size)
    suffix = position_class(parameters.get("position"))
    classes = f"airtable-image {suffix}" if suffix else "airtable-image"
    return (
        "<div>"
        f'<a href="{escape(full_url)}" target="_blank" rel="noopener">'
        f'<img alt="{escape(parameters.get("alt-tag") or "")}" src="{escape(src)}"'
        f' style="{escape(image_styles)}" class="{classes}">'
        "</a>"
        "</div>"
    )


def has_sizes(thumbnails, *sizes: str) -> bool:
    """Whether an attachment has a thumbnail URL for every size, files like PDFs lack `full`."""
    if not isinstance(thumbnails, dict):
        return False
    return all(isinstance(thumbnails.get(s), dict) and "url" in thumbnails[s] for s in sizes)


def is_composite(value) -> bool:
    return isinstance(value, (dict, list))


def format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def check_fields(fields: list[str], record_fields: dict) -> None:
    for field in fields:
        if field not in record_fields:
            raise InvalidFieldName(field)


def render_record(parameters: dict, record: dict, thumbnails: dict | None = None) -> str:
    """
    A single record: its image floated on the right when it has one, then a
    heading and a paragraph per requested field.

    Fields holding attachments, links or any other composite value are skipped.
    """
    record_fields = record.get("fields") or {}
    fields = parameters["fields"]
    check_fields(fields, record_fields)

    html = ['<div style="margin-bottom: 50px; clear: both">']
    if has_sizes(thumbnails, "large", "full"):
        image_parameters = {**parameters, "image-size": "large"}
        html.append(render_image(image_parameters, thumbnails, RECORD_IMAGE_STYLES))
    for field in fields:
        value = record_fields[field]
        if is_composite(value):
            continue
        html.append(f"<div><h3>{escape(field)}</h3><p>{escape(format_value(value))}</p></div>")
    html.append('<div style="clear: both;"></div>')
    html.append("</div>")
    return "".join(html)


def render_text(parameters: dict, record: dict) -> str:
    """Values of the requested fields, space separated."""
    record_fields = record.get("fields") or {}
    fields = parameters["fields"]
    check_fields(fields, record_fields)
    values = [
        escape(format_value(record_fields[field]))
        for field in fields
        if not is_composite(record_fields[field])
    ]
    return " ".join(values).rstrip()


def _render_cell(value) -> str:
    if is_composite(value):
        if isinstance(value, list):
            if all(not is_composite(v) for v in value):
                return escape(", ".join(format_value(v) for v in value))
            thumbnails = find_substructure(value)
            if has_sizes(thumbnails, "small", "full"):
                return render_image({"image-size": "small"}, thumbnails)
        return ""
    return escape(format_value(value))


def render_table(parameters: dict, records: list[dict]) -> str:
    """
    Several records as a table, one column per requested field.

    Airtable leaves empty fields out of its records, so a field missing from
    a record is an empty cell rather than an error.
    """
    fields = parameters["fields"]
    html = ['<table class="inline airtable-table">']
    html.append("<thead><tr>")
    html.extend(f"<th>{escape(field)}</th>" for field in fields)
    html.append("</tr></thead><tbody>")
    if not records:
        html.append(f'<tr><td colspan="{len(fields)}">No matching records</td></tr>')
    for record in records:
        record_fields = record.get("fields") or {}
        html.append("<tr>")
        html.extend(f"<td>{_render_cell(record_fields.get(field))}</td>" for field in fields)
        html.append("</tr>")
    html.append("</tbody></table>")
    return "".join(html)


def render_error(message: str) -> str:
    return ERROR_TEMPLATE.format(message)

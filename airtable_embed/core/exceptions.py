"""
Exception handling for the core module.

Every failure of the render pipeline is an `AirtableError` whose message is
already safe to drop into HTML: user-supplied parts are escaped when the
message is built.
"""

import json
from html import escape

import sentry_sdk
from aiohttp import web


class QueryException(web.HTTPException):
    """Error returned as JSON by the HTTP surface"""

    def __init__(self, status, error_code, title, detail) -> None:
        self.status_code = status
        error_body = {"errors": [{"code": error_code, "title": title, "detail": detail}]}
        super().__init__(content_type="application/json", text=json.dumps(error_body))


class AirtableError(Exception):
    """Base class of every error that ends a render with an error fragment."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedQuery(AirtableError):
    def __init__(self, segment: str) -> None:
        self.segment = segment
        super().__init__(
            f"Malformed parameter: '{escape(segment)}'. Parameters must look like key: value"
        )


class MissingTypeParameter(AirtableError):
    def __init__(self, message: str = "Missing Type Parameter") -> None:
        super().__init__(message)


class InvalidTypeParameter(AirtableError):
    def __init__(self, value: str, accepted: list[str]) -> None:
        self.value = value
        self.accepted = accepted
        super().__init__(
            f"Invalid Type Parameter: {escape(value)}<br>Accepted Types: {' | '.join(accepted)}"
        )


class MissingRecordUrl(AirtableError):
    def __init__(self) -> None:
        super().__init__("Missing record-url parameter")


class MissingParameter(AirtableError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Missing Parameter: {escape(key)}")


class MissingParameterValue(AirtableError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Missing Parameter Value for: '{escape(key)}'.")


class InvalidParameterValue(AirtableError):
    def __init__(self, key: str, value, allowed: list[str]) -> None:
        self.key = key
        self.value = value
        self.allowed = allowed
        message = (
            f"Invalid Parameter Value: '{escape(str(value))}' for Key: '{escape(key)}'."
            f"<br>Possible values: {' | '.join(v for v in allowed if v != '')}"
        )
        if "" in allowed:
            message += " or ''"
        super().__init__(message)


class InvalidFieldName(AirtableError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Invalid field name: {escape(field)}")


class MissingThumbnail(AirtableError):
    def __init__(self, message: str = "No image attachment found in the record") -> None:
        super().__init__(message)


class TransportFailure(AirtableError):
    def __init__(self, message: str, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)


def capture_failure(error: AirtableError, **tags) -> str | None:
    """Report a failure to Sentry when a client is configured, returns the event id."""
    if not sentry_sdk.get_client().is_active():
        return None
    with sentry_sdk.new_scope() as scope:
        sentry_tags: dict = {"kind": type(error).__name__}
        sentry_tags.update({k: v for k, v in tags.items() if v is not None})
        scope.set_tags(sentry_tags)
        return sentry_sdk.capture_exception(error)

"""Small helpers shared by the JSON endpoints."""

import json
from collections.abc import Mapping

from django.http import HttpRequest, JsonResponse


class InvalidJSONBodyError(ValueError):
    """Raised when a request body is not a JSON object."""


def json_body(request: HttpRequest) -> dict[str, object]:
    """Decode the request body as a JSON object.

    An empty body decodes to ``{}``.

    Raises:
        InvalidJSONBodyError: If the body is not valid JSON or not an object.
    """
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        msg = "Invalid JSON body"
        raise InvalidJSONBodyError(msg) from exc
    if not isinstance(data, Mapping):
        msg = "JSON body must be an object"
        raise InvalidJSONBodyError(msg)
    return dict(data)


def json_error(message: str, status: int, **extra: object) -> JsonResponse:
    """Return ``{"error": message, **extra}`` with the given status."""
    return JsonResponse({"error": message, **extra}, status=status)

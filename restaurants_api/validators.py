"""
Restaurants API - Request Validators
=====================================

What:  The precondition checks the route handlers run before touching the
       store, plus JSON body reading.
How:   Plain functions that either return normally or raise a
       ValidationError subclass. Raising is what stops the handler, so a
       failed check can never be followed by a store call or a second
       response.

Checks:
    require_fields     → POST: key presence of name, borough, cuisine (in order)
    ensure_ids_match   → PUT: path id and body id both present and equal
    updatable_fields   → PUT: the partial-set of fields an update may touch
    coerce_fields      → POST/PUT: cast values to their stored types before any
                         write; uncastable values are rejected, nothing is stored
"""

import json
import logging
from typing import Any, Dict, Iterable, Optional

from fastapi import Request

from restaurants_api.exceptions import MissingFieldError, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "borough", "cuisine")
UPDATABLE_FIELDS = ("name", "borough", "cuisine", "address")
STRING_FIELDS = ("name", "borough", "cuisine")
LIST_FIELDS = ("grades",)


def require_fields(body: Dict[str, Any], fields: Iterable[str] = REQUIRED_FIELDS) -> None:
    """
    Verify each field is a key of `body`, stopping at the first missing one.

    Only presence is checked: empty strings, nulls and wrong types pass.

    Raises:
        MissingFieldError: naming the first missing field in declared order
    """
    for field in fields:
        if field not in body:
            raise MissingFieldError(field)


def ensure_ids_match(path_id: Any, body_id: Any) -> None:
    """
    Verify the path id and body id are both present and strictly equal.

    "Present" means truthy, so an empty string or a missing body id fails.
    No coercion: a numeric body id never matches a string path id.

    Raises:
        ValidationError: describing both ids
    """
    if not (path_id and body_id and path_id == body_id):
        raise ValidationError(
            message=(
                f"Request path id ({path_id}) and request body id "
                f"({body_id}) must match"
            ),
            field="id",
        )


def updatable_fields(body: Dict[str, Any]) -> Dict[str, Any]:
    """Intersection of the body with UPDATABLE_FIELDS (merge-patch set)."""
    return {field: body[field] for field in UPDATABLE_FIELDS if field in body}


def _cast_string(field: str, value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    raise ValidationError(message=f"`{field}` must be a string", field=field)


def coerce_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Cast `fields` to the stored column types, returning a new dict.

    Scalars in string fields become strings (123 → "123", true → "true");
    objects and arrays there are rejected. `grades` must be a JSON array.
    `address` is opaque and passes through. Null is kept as null.

    Raises:
        ValidationError: naming the first field whose value cannot be cast
    """
    coerced = dict(fields)
    for field in STRING_FIELDS:
        if field in coerced:
            coerced[field] = _cast_string(field, coerced[field])
    for field in LIST_FIELDS:
        value = coerced.get(field)
        if value is not None and not isinstance(value, list):
            raise ValidationError(message=f"`{field}` must be an array", field=field)
    return coerced


async def read_json_body(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency returning the request body as a JSON object.

    Behaves like a JSON body-parsing middleware:
        - empty body, or a content type that is not JSON → {}
        - JSON content type with malformed JSON → ValidationError (400)
        - JSON that is not an object → ValidationError (400)
    """
    raw = await request.body()
    content_type = request.headers.get("content-type", "")
    if not raw or "json" not in content_type.lower():
        return {}

    try:
        payload = json.loads(raw)
    except ValueError:
        logger.warning("Rejected malformed JSON body on %s %s", request.method, request.url.path)
        raise ValidationError(message="Request body is not valid JSON")

    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object")
    return payload

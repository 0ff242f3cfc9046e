from typing import List, Tuple

from pydantic import TypeAdapter, ValidationError

from http_to_sentry.schemas.fastly_event import FastlyEvent
from http_to_sentry.schemas.payload import GenericPayload

JSON_MEDIA_TYPE = "application/json"

_fastly_batch = TypeAdapter(List[FastlyEvent])


def is_json_content(content_type: str) -> bool:
    return JSON_MEDIA_TYPE in (content_type or "").lower()


def decode_payload(content_type: str, body: bytes) -> Tuple[GenericPayload, bool]:
    """
    Decode a generic ingest body.
    ok=False means "use the body text as the message": either the content
    type is not JSON or the JSON does not fit the payload shape.
    """
    if not is_json_content(content_type):
        return GenericPayload(), False

    try:
        return GenericPayload.model_validate_json(body), True
    except ValidationError:
        return GenericPayload(), False


def decode_fastly_events(body: bytes) -> Tuple[List[FastlyEvent], bool]:
    # single object is the common case, so it is tried before the batch form
    try:
        return [FastlyEvent.model_validate_json(body)], True
    except ValidationError:
        pass

    try:
        return _fastly_batch.validate_json(body), True
    except ValidationError:
        return [], False

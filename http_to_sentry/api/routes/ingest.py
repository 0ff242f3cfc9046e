from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from http_to_sentry.api.body import read_raw_request
from http_to_sentry.api.deps import get_settings_dep, get_sink
from http_to_sentry.core.config import Settings
from http_to_sentry.core.security import require_bearer
from http_to_sentry.services.decoder import decode_payload
from http_to_sentry.services.sentry_sink import EventSink
from http_to_sentry.services.submission import submit_event
from http_to_sentry.services.synthesizer import build_generic_event

router = APIRouter(tags=["ingest"])


@router.post("", status_code=202)
async def ingest(
    request: Request,
    _=Depends(require_bearer),
    settings: Settings = Depends(get_settings_dep),
    sink: EventSink = Depends(get_sink),
):
    raw = await read_raw_request(request, settings.HTTP_MAX_BODY_BYTES)

    # a body that isn't decodable JSON is still a log line
    payload, parsed = decode_payload(raw.content_type, raw.body)
    event = build_generic_event(raw, payload, parsed)

    result = submit_event(sink, event)
    if not result.tracked:
        return Response(status_code=202)
    return JSONResponse(status_code=202, content={"event_id": result.event_id})

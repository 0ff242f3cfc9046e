import hashlib

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from http_to_sentry.api.body import read_raw_request
from http_to_sentry.api.deps import get_settings_dep, get_sink
from http_to_sentry.core.config import Settings
from http_to_sentry.core.security import require_bearer
from http_to_sentry.services.decoder import decode_fastly_events
from http_to_sentry.services.sentry_sink import EventSink
from http_to_sentry.services.submission import submit_batch
from http_to_sentry.services.synthesizer import build_fastly_event

CHALLENGE_PATH = "/.well-known/fastly/logging/challenge"

router = APIRouter(tags=["fastly"])
challenge_router = APIRouter(tags=["fastly"])


@router.post("", status_code=202)
async def ingest_fastly(
    request: Request,
    _=Depends(require_bearer),
    settings: Settings = Depends(get_settings_dep),
    sink: EventSink = Depends(get_sink),
):
    raw = await read_raw_request(request, settings.HTTP_MAX_BODY_BYTES)

    events, ok = decode_fastly_events(raw.body)
    # an empty batch is valid JSON but there is nothing to report
    if not ok or not events:
        raise HTTPException(status_code=400, detail="Invalid Fastly event payload")

    ids = submit_batch(sink, (build_fastly_event(fe, raw.remote_addr) for fe in events))
    return JSONResponse(status_code=202, content={"event_ids": ids})


def challenge_digest(service_id: str) -> str:
    return hashlib.sha256(service_id.encode("utf-8")).hexdigest()


@challenge_router.get(CHALLENGE_PATH)
def fastly_challenge(settings: Settings = Depends(get_settings_dep)):
    """
    Fastly checks this path before enabling an HTTPS logging endpoint.
    Answers with the sha256 of the service id, one per line.
    """
    service_id = settings.FASTLY_SERVICE_ID.strip()
    if not service_id:
        raise HTTPException(status_code=404, detail="Not Found")
    return PlainTextResponse(challenge_digest(service_id) + "\n")

import logging

from fastapi import HTTPException, Request

from http_to_sentry.core.errors import BodyReadError
from http_to_sentry.schemas.raw_request import RawRequest
from http_to_sentry.services.body_reader import read_limited_body

logger = logging.getLogger(__name__)


def remote_addr(request: Request) -> str:
    if request.client is None:
        return ""
    return f"{request.client.host}:{request.client.port}"


async def read_raw_request(request: Request, max_bytes: int) -> RawRequest:
    """Bounded body read plus the request fields the synthesizers need."""
    try:
        body, truncated = await read_limited_body(request.stream(), max_bytes)
    except BodyReadError as e:
        logger.warning("body read failed path=%s err=%s", request.url.path, e)
        raise HTTPException(status_code=400, detail="Unable to read request body")

    if truncated:
        raise HTTPException(status_code=413, detail=f"Body too large (max {max_bytes} bytes)")
    if not body:
        raise HTTPException(status_code=400, detail="Empty body")

    return RawRequest(
        body=body,
        content_type=request.headers.get("content-type", ""),
        remote_addr=remote_addr(request),
        method=request.method,
        path=request.url.path,
    )

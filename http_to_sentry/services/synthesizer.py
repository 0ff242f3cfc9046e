import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

from http_to_sentry.schemas.canonical import CanonicalEvent, RequestContext, Severity, UserContext
from http_to_sentry.schemas.fastly_event import FastlyEvent
from http_to_sentry.schemas.payload import GenericPayload
from http_to_sentry.schemas.raw_request import RawRequest
from http_to_sentry.services.severity import level_from_response, level_from_string

HTTP_LOGGER = "http"
FASTLY_LOGGER = "fastly"

EMPTY_MESSAGE = "(empty message)"
FASTLY_MESSAGE_TAG = "FASTLY"
FASTLY_EMPTY_MESSAGE = "fastly event"

# Fastly's %{...}t formats put no colon in the UTC offset (+0000)
FASTLY_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

_RFC3339 = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt ](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:?\d{2})$"
)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def add_tag(tags: Dict[str, str], key: str, value: Optional[str]) -> None:
    if not key or not value:
        return
    tags[key] = value


def parse_rfc3339(value: str) -> Optional[datetime]:
    # an offset is required: a naive timestamp can't be placed on the timeline
    match = _RFC3339.match((value or "").strip())
    if match is None:
        return None
    date, clock, frac, offset = match.groups()
    # %f takes at most 6 digits; anything finer than microseconds is dropped
    frac = (frac or "0")[:6]
    try:
        dt = datetime.strptime(f"{date}T{clock}.{frac}{offset.upper()}", "%Y-%m-%dT%H:%M:%S.%f%z")
    except ValueError:
        return None
    return dt.astimezone(timezone.utc)


def parse_fastly_time(value: str) -> Optional[datetime]:
    try:
        return datetime.strptime((value or "").strip(), FASTLY_TIME_FORMAT).astimezone(timezone.utc)
    except ValueError:
        return None


# ---------------- generic ingest ----------------

def build_generic_event(
    raw: RawRequest,
    payload: GenericPayload,
    parsed: bool,
    now: Optional[datetime] = None,
) -> CanonicalEvent:
    timestamp = now or now_utc()
    level = Severity.INFO
    text = raw.text

    tags: Dict[str, str] = {}
    add_tag(tags, "remote_addr", raw.remote_addr)
    add_tag(tags, "method", raw.method)
    add_tag(tags, "path", raw.path)

    extra: Dict[str, Any] = {}

    if parsed:
        message = payload.message or text
        level = level_from_string(payload.level)
        for key, value in (payload.tags or {}).items():
            add_tag(tags, key, value)
        if payload.extra is not None:
            extra = dict(payload.extra)
        if payload.timestamp:
            extra["payload_timestamp"] = payload.timestamp
            parsed_ts = parse_rfc3339(payload.timestamp)
            if parsed_ts is not None:
                timestamp = parsed_ts
    else:
        message = text
        extra = {"raw": text}

    return CanonicalEvent(
        logger=HTTP_LOGGER,
        level=level,
        message=message or EMPTY_MESSAGE,
        timestamp=timestamp,
        tags=tags,
        extra=extra,
    )


# ---------------- fastly ----------------

def build_fastly_message(fe: FastlyEvent) -> str:
    parts = [FASTLY_MESSAGE_TAG, fe.response_state.strip()]
    if fe.response_status:
        parts.append(str(fe.response_status))
    message = " ".join(p for p in parts if p)

    reason = fe.response_reason.strip()
    if reason:
        message = f"{message} ({reason})"
    return message or FASTLY_EMPTY_MESSAGE  # unreachable


def build_fastly_url(fe: FastlyEvent) -> str:
    if not fe.host and not fe.url:
        return ""
    path = fe.url or "/"
    if not path.startswith("/"):
        path = "/" + path
    return f"https://{fe.host}{path}"


def build_fastly_event(
    fe: FastlyEvent,
    remote_addr: str = "",
    now: Optional[datetime] = None,
) -> CanonicalEvent:
    timestamp = parse_fastly_time(fe.timestamp) or now or now_utc()

    tags: Dict[str, str] = {}
    add_tag(tags, "host", fe.host)
    add_tag(tags, "response_state", fe.response_state)
    add_tag(tags, "request_method", fe.request_method)
    add_tag(tags, "request_protocol", fe.request_protocol)
    add_tag(tags, "fastly_server", fe.fastly_server)
    add_tag(tags, "geo_country", fe.geo_country)
    add_tag(tags, "geo_city", fe.geo_city)
    add_tag(tags, "tls_client_ja3_md5", fe.tls_client_ja3_md5)
    if fe.fastly_is_edge:
        tags["fastly_is_edge"] = "true"
    # the forwarder's address, not the end client's
    add_tag(tags, "remote_addr", remote_addr)

    request = None
    url = build_fastly_url(fe)
    if url:
        headers: Dict[str, str] = {}
        add_tag(headers, "User-Agent", fe.request_user_agent)
        add_tag(headers, "Referer", fe.request_referer)
        request = RequestContext(
            url=url,
            method=fe.request_method,
            headers=headers,
            query_string=urlsplit(url).query,
        )

    user = UserContext(ip_address=fe.client_ip) if fe.client_ip else None

    return CanonicalEvent(
        logger=FASTLY_LOGGER,
        level=level_from_response(fe.response_state, fe.response_status),
        message=build_fastly_message(fe),
        timestamp=timestamp,
        tags=tags,
        extra={
            "fastly": fe.model_dump(),
            "fastly_timestamp": fe.timestamp,
        },
        request=request,
        user=user,
    )

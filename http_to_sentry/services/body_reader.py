from typing import AsyncIterator, Tuple

from starlette.requests import ClientDisconnect

from http_to_sentry.core.errors import BodyReadError


async def read_limited_body(stream: AsyncIterator[bytes], limit: int) -> Tuple[bytes, bool]:
    """
    Read at most ``limit + 1`` bytes from an async chunk stream.
    Returns ``(data, truncated)``; when the body is larger than ``limit`` the
    data is cut to exactly ``limit`` bytes. The stream is closed either way.
    """
    if limit < 0:
        raise ValueError("limit must be >= 0")

    buf = bytearray()
    try:
        async for chunk in stream:
            if not chunk:
                continue
            buf.extend(chunk[: limit + 1 - len(buf)])
            if len(buf) > limit:
                break
    except (ClientDisconnect, OSError) as e:
        raise BodyReadError(f"body read failed: {e!r}") from e
    finally:
        aclose = getattr(stream, "aclose", None)
        if aclose is not None:
            await aclose()

    if len(buf) > limit:
        return bytes(buf[:limit]), True
    return bytes(buf), False

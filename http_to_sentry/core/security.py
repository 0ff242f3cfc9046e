from fastapi import Depends, Header, HTTPException
from typing import Optional

from http_to_sentry.core.config import Settings
from http_to_sentry.api.deps import get_settings_dep


def require_bearer(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings_dep),
):
    token = settings.HTTP_AUTH_TOKEN
    if not token:
        return True
    if (authorization or "").strip() != f"Bearer {token}":
        raise HTTPException(status_code=401, detail="Unauthorized (invalid bearer token)")
    return True

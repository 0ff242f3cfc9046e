from typing import Any

from pydantic import BaseModel, model_validator


class FastlyEvent(BaseModel):
    """One access-log record from Fastly real-time log streaming.

    Missing keys default to empty values; no field is required.
    """

    timestamp: str = ""
    client_ip: str = ""
    geo_country: str = ""
    geo_city: str = ""
    host: str = ""
    url: str = ""
    original_url: str = ""
    request_method: str = ""
    request_protocol: str = ""
    request_referer: str = ""
    request_user_agent: str = ""
    response_state: str = ""
    response_status: int = 0
    response_reason: str = ""
    response_body_size: int = 0
    tls_client_ja3_md5: str = ""
    fastly_server: str = ""
    fastly_is_edge: bool = False

    @model_validator(mode="before")
    @classmethod
    def _null_means_unset(cls, data: Any) -> Any:
        # logging templates write null for unset variables (geo, tls, ...)
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

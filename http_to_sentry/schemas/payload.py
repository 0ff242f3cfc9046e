from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Any


class GenericPayload(BaseModel):
    """Free-form log payload accepted on the ingest path.

    Every field is optional; ``None`` means the key was absent, which is not
    the same as an empty string.
    """

    message: Optional[str] = Field(default=None, examples=["order failed"])
    level: Optional[str] = Field(default=None, examples=["debug", "info", "warn", "error", "fatal"])
    timestamp: Optional[str] = Field(default=None, examples=["2026-01-29T11:41:12Z"])
    tags: Optional[Dict[str, Optional[str]]] = Field(default=None, examples=[{"service": "checkout"}])
    # arbitrary JSON values, kept as decoded
    extra: Optional[Dict[str, Any]] = None

    @field_validator("tags")
    @classmethod
    def _drop_null_tags(cls, v):
        if v is None:
            return v
        return {k: val for k, val in v.items() if val is not None}

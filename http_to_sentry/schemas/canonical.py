from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Severity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_RANKS = {
    Severity.DEBUG: 0,
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.ERROR: 3,
    Severity.FATAL: 4,
}


class RequestContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    method: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    query_string: str = ""


class UserContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    ip_address: str


class CanonicalEvent(BaseModel):
    """Normalized record handed to the sink, whichever decoder produced it."""

    model_config = ConfigDict(frozen=True)

    logger: str
    level: Severity = Severity.INFO
    message: str = Field(..., min_length=1)
    timestamp: datetime
    tags: Dict[str, str] = Field(default_factory=dict)
    extra: Dict[str, Any] = Field(default_factory=dict)
    request: Optional[RequestContext] = None
    user: Optional[UserContext] = None

    @field_validator("tags")
    @classmethod
    def _drop_empty_tags(cls, v: Dict[str, str]) -> Dict[str, str]:
        return {k: val for k, val in v.items() if k and val}

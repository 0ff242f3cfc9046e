from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_BODY_BYTES = 1024

DEFAULT_MAX_BODY_BYTES = 262144
DEFAULT_FLUSH_TIMEOUT_MS = 2000
DEFAULT_SHUTDOWN_TIMEOUT_MS = 5000

# blank env values for these mean "use the default", not "disable"
_DEFAULT_WHEN_EMPTY = {"HTTP_ADDR", "SENTRY_ENVIRONMENT", "HTTP_PATH", "HTTP_FASTLY_PATH", "LOG_LEVEL"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    # Listeners
    HTTP_ADDR: str = "0.0.0.0:8080"
    HTTPS_ADDR: str = ""
    HTTPS_CERT_FILE: str = ""
    HTTPS_KEY_FILE: str = ""
    HTTP_SHUTDOWN_TIMEOUT_MS: int = DEFAULT_SHUTDOWN_TIMEOUT_MS

    # Routes
    HTTP_PATH: str = "/ingest"
    HTTP_FASTLY_PATH: str = "/fastly"
    FASTLY_SERVICE_ID: str = ""

    # Bearer auth (disabled when empty)
    HTTP_AUTH_TOKEN: str = ""

    HTTP_MAX_BODY_BYTES: int = DEFAULT_MAX_BODY_BYTES
    HTTP_LOG_BODY_BYTES: int = 4096

    # Sentry
    SENTRY_DSN: str = ""
    SENTRY_ENVIRONMENT: str = "development"
    SENTRY_RELEASE: str = ""
    SENTRY_FLUSH_TIMEOUT_MS: int = DEFAULT_FLUSH_TIMEOUT_MS

    LOG_LEVEL: str = "INFO"

    @field_validator("*", mode="before")
    @classmethod
    def _strip(cls, v, info):
        if isinstance(v, str):
            v = v.strip()
            if not v and info.field_name in _DEFAULT_WHEN_EMPTY:
                return cls.model_fields[info.field_name].default
        return v

    @field_validator(
        "HTTP_MAX_BODY_BYTES",
        "HTTP_LOG_BODY_BYTES",
        "SENTRY_FLUSH_TIMEOUT_MS",
        "HTTP_SHUTDOWN_TIMEOUT_MS",
        mode="before",
    )
    @classmethod
    def _int_or_default(cls, v, info):
        # unparseable numbers fall back to the default instead of failing startup
        try:
            return int(v)
        except (TypeError, ValueError):
            return cls.model_fields[info.field_name].default

    @field_validator("HTTP_PATH", "HTTP_FASTLY_PATH")
    @classmethod
    def _normalize_path(cls, v: str) -> str:
        # "/logs/" and "logs" both mean "/logs"; "/" stays the root
        return "/" + v.strip("/")

    @field_validator("HTTP_MAX_BODY_BYTES")
    @classmethod
    def _min_body(cls, v: int) -> int:
        return max(v, MIN_BODY_BYTES)

    @field_validator("SENTRY_FLUSH_TIMEOUT_MS")
    @classmethod
    def _flush_positive(cls, v: int) -> int:
        return v if v > 0 else DEFAULT_FLUSH_TIMEOUT_MS

    @field_validator("HTTP_SHUTDOWN_TIMEOUT_MS")
    @classmethod
    def _shutdown_positive(cls, v: int) -> int:
        return v if v > 0 else DEFAULT_SHUTDOWN_TIMEOUT_MS

    @property
    def https_enabled(self) -> bool:
        return bool(self.HTTPS_ADDR and self.HTTPS_CERT_FILE and self.HTTPS_KEY_FILE)

    @property
    def flush_timeout(self) -> float:
        return self.SENTRY_FLUSH_TIMEOUT_MS / 1000.0

    @property
    def shutdown_grace(self) -> float:
        return self.HTTP_SHUTDOWN_TIMEOUT_MS / 1000.0


@lru_cache
def get_settings() -> Settings:
    return Settings()

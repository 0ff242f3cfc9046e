from http_to_sentry.core.config import Settings


def test_defaults(monkeypatch):
    for key in ("HTTP_ADDR", "HTTP_PATH", "HTTP_FASTLY_PATH", "HTTP_MAX_BODY_BYTES", "HTTP_AUTH_TOKEN"):
        monkeypatch.delenv(key, raising=False)
    s = Settings()
    assert s.HTTP_ADDR == "0.0.0.0:8080"
    assert s.HTTP_PATH == "/ingest"
    assert s.HTTP_FASTLY_PATH == "/fastly"
    assert s.HTTP_MAX_BODY_BYTES == 262144
    assert s.flush_timeout == 2.0
    assert s.shutdown_grace == 5.0
    assert s.https_enabled is False


def test_env_values_are_stripped_and_paths_get_leading_slash(monkeypatch):
    monkeypatch.setenv("HTTP_PATH", " logs ")
    monkeypatch.setenv("HTTP_FASTLY_PATH", "cdn/fastly")
    monkeypatch.setenv("HTTP_AUTH_TOKEN", "  s3cret ")
    s = Settings()
    assert s.HTTP_PATH == "/logs"
    assert s.HTTP_FASTLY_PATH == "/cdn/fastly"
    assert s.HTTP_AUTH_TOKEN == "s3cret"


def test_body_limit_has_a_floor(monkeypatch):
    monkeypatch.setenv("HTTP_MAX_BODY_BYTES", "10")
    assert Settings().HTTP_MAX_BODY_BYTES == 1024


def test_bad_or_non_positive_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("HTTP_MAX_BODY_BYTES", "lots")
    monkeypatch.setenv("SENTRY_FLUSH_TIMEOUT_MS", "0")
    monkeypatch.setenv("HTTP_SHUTDOWN_TIMEOUT_MS", "-5")
    s = Settings()
    assert s.HTTP_MAX_BODY_BYTES == 262144
    assert s.SENTRY_FLUSH_TIMEOUT_MS == 2000
    assert s.HTTP_SHUTDOWN_TIMEOUT_MS == 5000


def test_blank_values_use_defaults(monkeypatch):
    monkeypatch.setenv("HTTP_ADDR", "   ")
    monkeypatch.setenv("SENTRY_ENVIRONMENT", "")
    s = Settings()
    assert s.HTTP_ADDR == "0.0.0.0:8080"
    assert s.SENTRY_ENVIRONMENT == "development"


def test_https_needs_addr_cert_and_key():
    assert not Settings(HTTPS_ADDR=":8443", HTTPS_CERT_FILE="c.pem").https_enabled
    assert Settings(HTTPS_ADDR=":8443", HTTPS_CERT_FILE="c.pem", HTTPS_KEY_FILE="k.pem").https_enabled


def test_trailing_slashes_are_removed_from_paths():
    assert Settings(HTTP_PATH="/logs/").HTTP_PATH == "/logs"
    assert Settings(HTTP_FASTLY_PATH="cdn/fastly/").HTTP_FASTLY_PATH == "/cdn/fastly"
    assert Settings(HTTP_PATH="/").HTTP_PATH == "/"
    assert Settings(HTTP_PATH="//").HTTP_PATH == "/"

from typing import Optional

from http_to_sentry.schemas.canonical import Severity

_LEVELS = {
    "fatal": Severity.FATAL,
    "error": Severity.ERROR,
    "warning": Severity.WARNING,
    "warn": Severity.WARNING,
    "debug": Severity.DEBUG,
    "info": Severity.INFO,
    "": Severity.INFO,
}

_STATES = {
    "error": Severity.ERROR,
    "fail": Severity.ERROR,
    "failed": Severity.ERROR,
    "warning": Severity.WARNING,
    "warn": Severity.WARNING,
}


def level_from_string(level: Optional[str]) -> Severity:
    # unknown levels are not an error, they just land on info
    return _LEVELS.get((level or "").strip().lower(), Severity.INFO)


def level_from_response(state: Optional[str], status: int) -> Severity:
    by_state = _STATES.get((state or "").strip().lower())
    if by_state is not None:
        return by_state

    if status >= 500:
        return Severity.ERROR
    if status >= 400:
        return Severity.WARNING
    return Severity.INFO

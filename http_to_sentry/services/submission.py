from dataclasses import dataclass
from typing import Iterable, List, Optional

from http_to_sentry.schemas.canonical import CanonicalEvent
from http_to_sentry.services.sentry_sink import EventSink


@dataclass(frozen=True)
class SubmissionResult:
    event_id: Optional[str] = None

    @property
    def tracked(self) -> bool:
        return bool(self.event_id)


def submit_event(sink: EventSink, event: CanonicalEvent) -> SubmissionResult:
    # no id is still an accepted event, just one we can't point the caller at
    event_id = sink.submit(event)
    return SubmissionResult(event_id=event_id or None)


def submit_batch(sink: EventSink, events: Iterable[CanonicalEvent]) -> List[str]:
    ids: List[str] = []
    for event in events:
        result = submit_event(sink, event)
        if result.tracked:
            ids.append(result.event_id)
    return ids

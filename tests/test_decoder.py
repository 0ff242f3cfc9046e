from http_to_sentry.schemas.payload import GenericPayload
from http_to_sentry.services.decoder import decode_fastly_events, decode_payload


def test_non_json_content_type_is_not_decoded():
    payload, ok = decode_payload("text/plain", b'{"message": "hi"}')
    assert ok is False
    assert payload == GenericPayload()


def test_missing_content_type_is_not_decoded():
    _, ok = decode_payload("", b'{"message": "hi"}')
    assert ok is False


def test_json_content_type_match_is_case_insensitive_substring():
    payload, ok = decode_payload("Application/JSON; charset=utf-8", b'{"message": "hi"}')
    assert ok is True
    assert payload.message == "hi"


def test_full_payload_shape():
    body = (
        b'{"message":"order failed","level":"error","timestamp":"2026-01-29T11:41:12Z",'
        b'"tags":{"service":"checkout"},"extra":{"order":{"id":7,"items":[1,2]},"retry":null},'
        b'"unknown":"ignored"}'
    )
    payload, ok = decode_payload("application/json", body)
    assert ok is True
    assert payload.level == "error"
    assert payload.timestamp == "2026-01-29T11:41:12Z"
    assert payload.tags == {"service": "checkout"}
    assert payload.extra == {"order": {"id": 7, "items": [1, 2]}, "retry": None}


def test_absent_fields_stay_none_and_empty_strings_stay_empty():
    payload, ok = decode_payload("application/json", b'{"message": ""}')
    assert ok is True
    assert payload.message == ""
    assert payload.level is None
    assert payload.tags is None


def test_malformed_json_is_not_decoded():
    payload, ok = decode_payload("application/json", b'{"message": "oops"')
    assert ok is False
    assert payload == GenericPayload()


def test_wrong_shape_is_not_decoded():
    # no partial success: a bad tags value abandons the whole payload
    _, ok = decode_payload("application/json", b'{"message": "m", "tags": {"n": 1}}')
    assert ok is False
    _, ok = decode_payload("application/json", b'["message"]')
    assert ok is False


def test_single_fastly_event():
    events, ok = decode_fastly_events(b'{"response_status":503,"response_state":"ERROR"}')
    assert ok is True
    assert len(events) == 1
    assert events[0].response_status == 503
    assert events[0].response_state == "ERROR"
    assert events[0].host == ""
    assert events[0].fastly_is_edge is False


def test_fastly_batch():
    events, ok = decode_fastly_events(b'[{"host":"a.example"},{"host":"b.example","fastly_is_edge":true}]')
    assert ok is True
    assert [e.host for e in events] == ["a.example", "b.example"]
    assert events[1].fastly_is_edge is True


def test_empty_fastly_batch_is_valid_but_empty():
    events, ok = decode_fastly_events(b"[]")
    assert ok is True
    assert events == []


def test_empty_object_is_a_valid_fastly_event():
    events, ok = decode_fastly_events(b"{}")
    assert ok is True
    assert len(events) == 1


def test_garbage_is_not_a_fastly_event():
    for body in (b"not json", b'"string"', b"[1, 2]", b'{"response_status": [1]}'):
        events, ok = decode_fastly_events(body)
        assert ok is False, body
        assert events == []


def test_null_tag_values_are_dropped_not_fatal():
    body = b'{"message":"order failed","level":"error","tags":{"a":null,"b":"2"}}'
    payload, ok = decode_payload("application/json", body)
    assert ok is True
    assert payload.message == "order failed"
    assert payload.tags == {"b": "2"}


def test_null_fastly_fields_fall_back_to_defaults():
    body = (
        b'{"response_status":503,"response_state":"ERROR","geo_city":null,'
        b'"response_body_size":null,"fastly_is_edge":null}'
    )
    events, ok = decode_fastly_events(body)
    assert ok is True
    assert events[0].geo_city == ""
    assert events[0].response_body_size == 0
    assert events[0].fastly_is_edge is False
    assert events[0].response_status == 503


def test_null_fastly_fields_inside_a_batch():
    events, ok = decode_fastly_events(b'[{"host":"a","tls_client_ja3_md5":null},{"geo_country":null}]')
    assert ok is True
    assert [e.host for e in events] == ["a", ""]

from src.telemetry import scrub_restore_key


class RecordingSpan:
    def __init__(self, recording: bool = True):
        self.recording = recording
        self.attributes: dict[str, str] = {}

    def is_recording(self) -> bool:
        return self.recording

    def set_attribute(self, key: str, value: str) -> None:
        self.attributes[key] = value


def make_scope(query: bytes) -> dict:
    return {
        "type": "http",
        "scheme": "http",
        "path": "/wp-admin",
        "query_string": query,
        "headers": [(b"host", b"old.example")],
    }


def test_restore_key_is_scrubbed_from_span():
    span = RecordingSpan()

    scrub_restore_key(span, make_scope(b"srk=secret-key&page=1"))

    assert span.attributes == {
        "http.target": "/wp-admin?page=1",
        "url.query": "page=1",
        "http.url": "http://old.example/wp-admin?page=1",
    }
    assert all("secret-key" not in value for value in span.attributes.values())


def test_span_without_restore_key_is_untouched():
    span = RecordingSpan()

    scrub_restore_key(span, make_scope(b"srsuccess=1"))

    assert span.attributes == {}


def test_non_recording_span_is_ignored():
    span = RecordingSpan(recording=False)

    scrub_restore_key(span, make_scope(b"srk=secret-key"))

    assert span.attributes == {}

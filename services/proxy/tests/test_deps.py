import pytest

from services.proxy.api.deps import decode_headers, get_processor, parse_query
from services.proxy.core.exceptions import InvalidHeaderEncoding
from services.proxy.services.processor import ProxyRequestProcessor


class TestParseQuery:
    def test_last_value_wins(self):
        assert parse_query("x=1&x=2") == {"x": "2"}

    def test_percent_and_plus_decoding(self):
        assert parse_query("name=John+Doe&city=T%C5%8Dky%C5%8D") == {
            "name": "John Doe",
            "city": "Tōkyō",
        }

    def test_blank_values_are_kept(self):
        assert parse_query("a=&b") == {"a": "", "b": ""}

    def test_empty_query(self):
        assert parse_query("") == {}


class TestDecodeHeaders:
    def test_utf8_values(self):
        raw = [(b"content-type", b"text/plain"), (b"x-name", "山田".encode("utf-8"))]

        assert decode_headers(raw) == {"content-type": "text/plain", "x-name": "山田"}

    def test_repeated_header_keeps_last(self):
        raw = [(b"accept", b"text/html"), (b"accept", b"application/json")]

        assert decode_headers(raw) == {"accept": "application/json"}

    def test_invalid_utf8_rejects_request(self):
        raw = [(b"host", b"example.com"), (b"x-binary", b"\xff\xfe")]

        with pytest.raises(InvalidHeaderEncoding) as exc_info:
            decode_headers(raw)

        assert exc_info.value.header_name == "x-binary"


def test_lifespan_exposes_only_the_processor(make_client):
    with make_client(lambda request: None) as client:
        state = client.app.state

        assert isinstance(state.processor, ProxyRequestProcessor)
        assert not hasattr(state, "config")
        assert not hasattr(state, "http_client")

        request = type("FakeRequest", (), {"app": client.app})()
        assert get_processor(request) is state.processor

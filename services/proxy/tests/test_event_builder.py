import base64
from datetime import datetime, timedelta, timezone

import pytest

from services.proxy.config import ProxyConfig
from services.proxy.core.event_builder import (
    PLACEHOLDER_COOKIES,
    FunctionUrlEventBuilder,
    epoch_millis,
    format_request_time,
)
from services.proxy.models.context import InputContext

FIXED_NOW = datetime(2024, 12, 25, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def builder(proxy_config) -> FunctionUrlEventBuilder:
    return FunctionUrlEventBuilder(proxy_config)


def _context(**overrides) -> InputContext:
    values = {
        "method": "GET",
        "path": "/hello",
        "raw_query": "x=1&x=2",
        "query_params": {"x": "2"},
        "headers": {"host": "example.com", "accept": "*/*"},
        "body": b"",
    }
    values.update(overrides)
    return InputContext(**values)


class TestFunctionUrlEventShape:
    def test_hello_scenario(self, builder):
        event = builder.build(_context(), now=FIXED_NOW)

        assert event["version"] == "2.0"
        assert event["routeKey"] == "$default"
        assert event["rawPath"] == "/hello"
        assert event["rawQueryString"] == "x=1&x=2"
        assert event["queryStringParameters"] == {"x": "2"}
        assert event["body"] == base64.b64encode(b"").decode()
        assert event["isBase64Encoded"] is True

    def test_request_context(self, builder):
        event = builder.build(_context(method="POST", path="/a/b"), now=FIXED_NOW)
        rc = event["requestContext"]

        assert rc["routeKey"] == "$default"
        assert rc["stage"] == "$default"
        assert rc["accountId"] == "anonymous"
        assert rc["apiId"] == "xxxxxxxxxx"
        assert rc["domainName"] == "xxxxxxxxxx.lambda-url.ap-northeast-1.on.aws"
        assert rc["domainPrefix"] == "xxxxxxxxxx"
        assert rc["requestId"] == "xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx"
        assert rc["http"] == {
            "method": "POST",
            "path": "/a/b",
            "protocol": "HTTP/1.1",
            "sourceIp": "1.2.3.4",
            "userAgent": "curl/7.81.0",
        }
        assert rc["time"] == "25/Dec/2024:10:00:00 +0000"
        assert rc["timeEpoch"] == 1735120800000

    def test_headers_and_cookies(self, builder):
        event = builder.build(_context(), now=FIXED_NOW)

        assert event["headers"] == {"host": "example.com", "accept": "*/*"}
        assert event["cookies"] == PLACEHOLDER_COOKIES

    def test_top_level_keys_are_exact(self, builder):
        event = builder.build(_context(), now=FIXED_NOW)

        assert set(event) == {
            "version",
            "routeKey",
            "rawPath",
            "rawQueryString",
            "cookies",
            "headers",
            "queryStringParameters",
            "requestContext",
            "body",
            "isBase64Encoded",
        }

    def test_placeholders_come_from_config(self):
        config = ProxyConfig(
            BACKEND="http://backend:9000/",
            EVENT_ACCOUNT_ID="123456789012",
            EVENT_SOURCE_IP="10.0.0.1",
            _env_file=None,
        )
        event = FunctionUrlEventBuilder(config).build(_context(), now=FIXED_NOW)

        assert event["requestContext"]["accountId"] == "123456789012"
        assert event["requestContext"]["http"]["sourceIp"] == "10.0.0.1"

    def test_uses_current_time_by_default(self, builder):
        before = int(datetime.now(timezone.utc).timestamp() * 1000)
        event = builder.build(_context())
        after = int(datetime.now(timezone.utc).timestamp() * 1000)

        assert before - 1 <= event["requestContext"]["timeEpoch"] <= after + 1


@pytest.mark.parametrize(
    "body",
    [
        b"",
        b"plain text",
        '{"name": "テスト"}'.encode("utf-8"),
        bytes(range(256)),
        b"\xff\xfe\x00\x01",
    ],
)
def test_body_is_always_base64(builder, body):
    event = builder.build(_context(method="POST", body=body), now=FIXED_NOW)

    assert event["isBase64Encoded"] is True
    assert base64.b64decode(event["body"], validate=True) == body


class TestRequestTime:
    def test_non_utc_offset(self):
        jst = timezone(timedelta(hours=9))
        now = datetime(2025, 1, 5, 8, 7, 6, tzinfo=jst)

        assert format_request_time(now) == "05/Jan/2025:08:07:06 +0900"

    def test_naive_datetime_is_utc(self):
        now = datetime(2024, 3, 1, 0, 0, 0)

        assert format_request_time(now) == "01/Mar/2024:00:00:00 +0000"
        assert epoch_millis(now) == 1709251200000

    def test_epoch_millis_keeps_milliseconds(self):
        now = datetime(2024, 12, 25, 10, 0, 0, 123000, tzinfo=timezone.utc)

        assert epoch_millis(now) == 1735120800123

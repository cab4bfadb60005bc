"""Tests for edgar_access.transport.classify."""

import httpx
import pytest

from edgar_access.core.models import ResponseKind
from edgar_access.transport.classify import (
    classify_error,
    classify_response,
    expects_json,
    looks_like_json,
    parse_retry_after,
)

JSON_URL = "https://data.sec.gov/submissions/CIK0000320193.json"


def _response(status: int, body: bytes = b"", content_type: str | None = None, **headers) -> httpx.Response:
    if content_type is not None:
        headers["Content-Type"] = content_type
    return httpx.Response(status, content=body, headers=headers)


class TestExpectsJson:
    @pytest.mark.parametrize(
        "url",
        [
            JSON_URL,
            "https://www.sec.gov/files/company_tickers.json",
            "https://data.sec.gov/submissions/CIK0000320193.json?x=1",
        ],
    )
    def test_json_urls(self, url):
        assert expects_json(url)

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.sec.gov/Archives/edgar/full-index/company.idx",
            "https://www.sec.gov/cgi-bin/browse-edgar?action=getcurrent&output=atom",
            "https://example.com/report.jsonl",
            "https://example.com/page?format=.json",
        ],
    )
    def test_other_urls(self, url):
        assert not expects_json(url)


class TestLooksLikeJson:
    @pytest.mark.parametrize("body", [b"{}", b"[1]", b"  \n\t{\"a\": 1}"])
    def test_json_bodies(self, body):
        assert looks_like_json(body)

    @pytest.mark.parametrize("body", [b"", b"<html>", b"null", b"  <!DOCTYPE html>"])
    def test_non_json_bodies(self, body):
        assert not looks_like_json(body)


class TestParseRetryAfter:
    def test_seconds(self):
        assert parse_retry_after("5") == 5.0
        assert parse_retry_after(" 1.5 ") == 1.5

    def test_missing(self):
        assert parse_retry_after(None) is None

    @pytest.mark.parametrize("value", ["soon", "Wed, 21 Oct 2015 07:28:00 GMT", "nan", "inf"])
    def test_unparseable(self, value):
        assert parse_retry_after(value) is None

    def test_negative_clamped(self):
        assert parse_retry_after("-3") == 0.0


class TestClassifyResponse:
    def test_success(self):
        r = classify_response(JSON_URL, _response(200, b"{}", "application/json"), validate_json=True)
        assert r.kind == ResponseKind.SUCCESS
        assert r.status_code == 200
        assert r.content == b"{}"

    def test_not_found(self):
        r = classify_response(JSON_URL, _response(404), validate_json=True)
        assert r.kind == ResponseKind.NOT_FOUND

    def test_rate_limited_with_hint(self):
        r = classify_response(JSON_URL, _response(429, **{"Retry-After": "3"}), validate_json=True)
        assert r.kind == ResponseKind.RATE_LIMITED
        assert r.retry_after == 3.0

    def test_rate_limited_without_hint(self):
        r = classify_response(JSON_URL, _response(429), validate_json=False)
        assert r.retry_after is None

    @pytest.mark.parametrize("status", [301, 400, 403, 500, 503])
    def test_other_status(self, status):
        r = classify_response(JSON_URL, _response(status, b"nope"), validate_json=True)
        assert r.kind == ResponseKind.OTHER_STATUS
        assert r.status_code == status

    def test_html_instead_of_json(self):
        r = classify_response(JSON_URL, _response(200, b"<html></html>", "text/html"), validate_json=True)
        assert r.kind == ResponseKind.CONTENT_TYPE_MISMATCH
        assert r.content_type == "text/html"

    def test_json_labeled_html_is_success(self, caplog):
        r = classify_response(
            JSON_URL, _response(200, b'{"cik": 1}', "text/html; charset=utf-8"), validate_json=True
        )
        assert r.kind == ResponseKind.SUCCESS
        assert "appears to be JSON" in caplog.text

    def test_html_without_validation(self):
        r = classify_response(JSON_URL, _response(200, b"<html></html>", "text/html"), validate_json=False)
        assert r.kind == ResponseKind.SUCCESS

    def test_missing_content_type(self):
        r = classify_response(JSON_URL, _response(200, b"<html></html>"), validate_json=True)
        assert r.kind == ResponseKind.SUCCESS

    def test_validation_ignores_error_statuses(self):
        r = classify_response(JSON_URL, _response(500, b"<html></html>", "text/html"), validate_json=True)
        assert r.kind == ResponseKind.OTHER_STATUS


class TestClassifyError:
    def test_network_error(self):
        exc = httpx.ConnectError("refused")
        r = classify_error(JSON_URL, exc)
        assert r.kind == ResponseKind.NETWORK_ERROR
        assert r.error is exc
        assert r.status_code is None

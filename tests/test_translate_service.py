"""Tests for the Baidu translation client."""

import hashlib

import requests

from wordle_bot.services.translate_service import BaiduTranslator


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=""):
        self.payload = payload
        self.status_code = status_code
        self.text = text

    def json(self):
        if self.payload is None:
            raise ValueError("no json")
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def translator(session, **kwargs):
    return BaiduTranslator(appid="app", appkey="key", session=session, timeout=3, **kwargs)


def test_translate_success():
    session = FakeSession(FakeResponse({"trans_result": [{"src": "apple", "dst": "苹果"}]}))
    assert translator(session).translate(" apple ") == "苹果"

    call = session.calls[0]
    params = call["params"]
    assert call["timeout"] == 3
    assert params["q"] == "apple"
    assert (params["from"], params["to"]) == ("en", "zh")
    expected = hashlib.md5(f"appapple{params['salt']}key".encode("utf-8")).hexdigest()
    assert params["sign"] == expected


def test_translator_is_callable():
    session = FakeSession(FakeResponse({"trans_result": [{"dst": "鹤"}]}))
    assert translator(session)("crane") == "鹤"


def test_timeout_returns_empty():
    assert translator(FakeSession(error=requests.Timeout("slow"))).translate("apple") == ""


def test_connection_error_returns_empty():
    assert translator(FakeSession(error=requests.ConnectionError("down"))).translate("apple") == ""


def test_api_error_returns_empty():
    session = FakeSession(FakeResponse({"error_code": "54001", "error_msg": "Invalid Sign"}))
    assert translator(session).translate("apple") == ""


def test_http_error_returns_empty():
    assert translator(FakeSession(FakeResponse(status_code=502, text="bad gateway"))).translate("apple") == ""


def test_non_json_returns_empty():
    assert translator(FakeSession(FakeResponse(None))).translate("apple") == ""


def test_unexpected_payload_returns_empty():
    assert translator(FakeSession(FakeResponse({"trans_result": []}))).translate("apple") == ""


def test_disabled_or_unconfigured_skips_request():
    session = FakeSession(FakeResponse({"trans_result": [{"dst": "x"}]}))
    assert translator(session, enabled=False).translate("apple") == ""
    assert BaiduTranslator(session=session).translate("apple") == ""
    assert translator(session).translate("   ") == ""
    assert session.calls == []


def test_detect_language():
    session = FakeSession(FakeResponse({"trans_result": [{"dst": "x"}]}))
    client = translator(session)
    assert client.detect_language("hello") == "en"
    assert client.detect_language("你好") == "zh"
    assert client.detect_language("") == ""

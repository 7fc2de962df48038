from dataclasses import replace
from unittest import mock

import pytest
import requests

from shared.errors import UpstreamError
from station.suggest import fetch_suggestion


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        return self.payload


def _answer(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_suggest_topic_returns_model_text(client, ctx, monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json))
        return FakeResponse(_answer("  Your favourite local walk\n"))

    monkeypatch.setattr(ctx.http, "post", fake_post)
    resp = client.get('/suggest-topic')
    assert resp.status_code == 200
    assert resp.get_json() == {"suggestion": "Your favourite local walk"}

    url, payload = calls[0]
    assert "gemini-2.0-flash:generateContent" in url
    assert url.endswith("key=test-key")
    assert payload["contents"][0]["role"] == "user"


def test_suggest_topic_without_key(client, ctx):
    ctx.settings = replace(ctx.settings, gemini_api_key=None)
    resp = client.get('/suggest-topic')
    assert resp.status_code == 500
    assert resp.get_json()["message"] == "Server configuration error."


def test_suggest_topic_upstream_failure(client, ctx):
    with mock.patch.object(ctx.http, "post", side_effect=requests.ConnectionError("down")) as post:
        resp = client.get('/suggest-topic')
    assert post.call_count == 1
    assert resp.status_code == 500
    assert resp.get_json()["message"] == "Failed to fetch suggestion."


@pytest.mark.parametrize("response", [
    FakeResponse({}, status=429),
    FakeResponse({"candidates": []}),
    FakeResponse({"unexpected": True}),
])
def test_fetch_suggestion_wraps_bad_responses(response):
    session = requests.Session()
    session.post = lambda url, json=None, timeout=None: response
    with pytest.raises(UpstreamError):
        fetch_suggestion(session, "key")

import asyncio
import time

import requests

from sentiment_client import SentimentClient, analyze_note


class FakeResponse:
    def __init__(self, body, status_code=200):
        self.body = body
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.body, Exception):
            raise self.body
        return self.body


class FakeSession:
    def __init__(self, responses=None, error=None, delay=0):
        self.responses = responses or {}
        self.error = error
        self.delay = delay
        self.requests = []

    def post(self, url, json=None, timeout=None):
        self.requests.append((url, json, timeout))
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return self.responses[url.rsplit("/", 1)[-1]]

    def close(self):
        pass


def test_analyze_accepts_short_keys():
    session = FakeSession({"analyze": FakeResponse({"pos": 0.6, "neu": 0.3, "neg": 0.1, "prediction": "positive"})})
    client = SentimentClient(base_url="http://ai.local/", timeout=1, session=session)

    result = asyncio.run(client.analyze("a calm day"))

    assert (result.positive, result.neutral, result.negative) == (0.6, 0.3, 0.1)
    assert result.label == "positive"
    assert result.model == "unknown"
    assert session.requests[0][:2] == ("http://ai.local/analyze", {"text": "a calm day"})


def test_advice_payload_and_result():
    session = FakeSession({"advice": FakeResponse({"advice": "Rest well", "model": "gpt", "source": "llm"})})
    client = SentimentClient(base_url="http://ai.local", timeout=1, session=session)

    result = asyncio.run(client.advise("tired", "😴"))

    assert result.advice == "Rest well"
    assert session.requests[0][1] == {"text": "tired", "emoji": "😴"}


def test_blank_text_makes_no_call():
    session = FakeSession()
    client = SentimentClient(base_url="http://ai.local", timeout=1, session=session)

    assert asyncio.run(client.analyze("   ")) is None
    assert asyncio.run(client.advise(None)) is None
    assert session.requests == []


def test_transport_failure_yields_none():
    session = FakeSession(error=requests.ConnectionError("refused"))
    client = SentimentClient(base_url="http://ai.local", timeout=1, session=session)

    assert asyncio.run(client.analyze("text")) is None
    assert asyncio.run(analyze_note(client, "text", "😄")) == {}


def test_error_status_and_bad_body_yield_none():
    session = FakeSession({
        "analyze": FakeResponse({"detail": "boom"}, status_code=500),
        "advice": FakeResponse(ValueError("not json")),
    })
    client = SentimentClient(base_url="http://ai.local", timeout=1, session=session)

    assert asyncio.run(client.analyze("text")) is None
    assert asyncio.run(client.advise("text")) is None


def test_slow_service_times_out():
    session = FakeSession({"analyze": FakeResponse({"positive": 1})}, delay=0.5)
    client = SentimentClient(base_url="http://ai.local", timeout=0.05, session=session)

    assert asyncio.run(client.analyze("text")) is None


def test_analyze_note_merges_both_results():
    session = FakeSession({
        "analyze": FakeResponse({"positive": 0.1, "neutral": 0.2, "negative": 0.7, "label": "negative",
                                 "model": "kobert", "version": "2"}),
        "advice": FakeResponse({"advice": "Talk to someone", "model": "gpt"}),
    })
    client = SentimentClient(base_url="http://ai.local", timeout=1, session=session)

    fields = asyncio.run(analyze_note(client, "bad day", "😢"))

    assert fields["negative"] == 0.7
    assert fields["ai_label"] == "negative"
    assert fields["ai_version"] == "2"
    assert fields["ai_advice"] == "Talk to someone"
    assert fields["ai_advice_source"] is None

"""
Testing the hint service client and the stale-answer guard.
- Trick: replace requests.post inside hint_client so no network is used.
"""

import requests

import digitduel.hint_client as hint_client
from digitduel.hint_client import FALLBACK_MESSAGE, Hint, build_prompt, suggest_next
from digitduel.hints import HintTracker

from conftest import InlineExecutor, ManualExecutor, fake_advisor

HISTORY = [("1236", 3), ("1256", 2)]


class FakeResponse:
    def __init__(self, body, status_code=200):
        self._body = body
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._body


def gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_empty_history_answers_locally(monkeypatch):
    def fail_post(*args, **kwargs):
        raise AssertionError("no network call expected")

    monkeypatch.setattr(hint_client.requests, "post", fail_post)
    hint = suggest_next([], 4)
    assert hint.ok is True
    assert hint.suggested_guess == "1234"


def test_missing_key_returns_fallback(monkeypatch):
    monkeypatch.setattr(hint_client, "GEMINI_API_KEY", None)
    hint = suggest_next(HISTORY, 4)
    assert hint.ok is False
    assert hint.message == FALLBACK_MESSAGE


def test_good_answer_is_parsed(monkeypatch):
    calls = []

    def fake_post(url, json, headers, timeout):
        calls.append((url, json, headers))
        return FakeResponse(gemini_body('{"suggestedGuess": "1237", "reasoning": "only the last digit is wrong"}'))

    monkeypatch.setattr(hint_client, "GEMINI_API_KEY", "test-key")
    monkeypatch.setattr(hint_client.requests, "post", fake_post)

    hint = suggest_next(HISTORY, 4)
    assert hint.ok is True
    assert hint.suggested_guess == "1237"
    assert hint.reasoning == "only the last digit is wrong"
    assert hint.message == "1237 - only the last digit is wrong"

    url, payload, headers = calls[0]
    assert url.endswith(":generateContent")
    assert headers["x-goog-api-key"] == "test-key"
    assert "Guess: 1236, Correct Digits at Correct Positions: 3" in payload["contents"][0]["parts"][0]["text"]


def test_malformed_answers_fall_back(monkeypatch):
    monkeypatch.setattr(hint_client, "GEMINI_API_KEY", "test-key")
    bodies = [
        gemini_body("not json"),
        gemini_body('{"suggestedGuess": "1237"}'),
        gemini_body('["1237"]'),
        {"candidates": []},
        {},
    ]
    for body in bodies:
        monkeypatch.setattr(hint_client.requests, "post", lambda *a, body=body, **k: FakeResponse(body))
        hint = suggest_next(HISTORY, 4)
        assert hint.ok is False
        assert hint.message == FALLBACK_MESSAGE


def test_network_errors_fall_back(monkeypatch):
    def broken_post(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(hint_client, "GEMINI_API_KEY", "test-key")
    monkeypatch.setattr(hint_client.requests, "post", broken_post)
    assert suggest_next(HISTORY, 4).message == FALLBACK_MESSAGE

    monkeypatch.setattr(hint_client.requests, "post", lambda *a, **k: FakeResponse({}, status_code=503))
    assert suggest_next(HISTORY, 4).message == FALLBACK_MESSAGE


def test_build_prompt_mentions_length():
    prompt = build_prompt(HISTORY, 4)
    assert "4-digit secret" in prompt
    assert "Guess: 1256, Correct Digits at Correct Positions: 2" in prompt


def test_tracker_delivers_answer():
    tracker = HintTracker(InlineExecutor(), fake_advisor)
    token = tracker.request(HISTORY, 4)
    current, status, hint = tracker.status()
    assert current == token
    assert status == "ready"
    assert hint.suggested_guess == "1236"


def test_tracker_drops_superseded_answer():
    executor = ManualExecutor()
    tracker = HintTracker(executor, fake_advisor)

    first = tracker.request([("1256", 2)], 4)
    second = tracker.request(HISTORY, 4)
    assert second > first
    assert tracker.status() == (second, "pending", None)

    # The older call comes back last-but-one: ignored
    executor.finish(0)
    assert tracker.status() == (second, "pending", None)

    executor.finish(1)
    current, status, hint = tracker.status()
    assert (current, status) == (second, "ready")
    assert hint.suggested_guess == "1236"


def test_tracker_drops_answer_after_invalidate():
    executor = ManualExecutor()
    tracker = HintTracker(executor, fake_advisor)
    tracker.request(HISTORY, 4)
    tracker.invalidate()
    executor.finish(0)
    token, status, hint = tracker.status()
    assert status == "idle"
    assert hint is None


def test_tracker_uses_history_snapshot():
    executor = ManualExecutor()
    tracker = HintTracker(executor, fake_advisor)
    history = list(HISTORY)
    tracker.request(history, 4)
    history.insert(0, ("9999", 0))

    executor.finish(0)
    assert tracker.status()[2].suggested_guess == "1236"


def test_tracker_turns_advisor_crash_into_fallback():
    def crashing_advisor(history, secret_length):
        raise RuntimeError("boom")

    executor = ManualExecutor()
    tracker = HintTracker(executor, crashing_advisor)
    tracker.request(HISTORY, 4)
    future, fn, args = executor.jobs[0]
    future.set_exception(RuntimeError("boom"))

    token, status, hint = tracker.status()
    assert status == "ready"
    assert hint == Hint(ok=False, message=FALLBACK_MESSAGE)


def test_unusable_suggestion_falls_back(monkeypatch):
    monkeypatch.setattr(hint_client, "GEMINI_API_KEY", "test-key")
    suggestions = ["123", "12345", "12a4"]
    for suggested in suggestions:
        body = gemini_body('{"suggestedGuess": "%s", "reasoning": "trust me"}' % suggested)
        monkeypatch.setattr(hint_client.requests, "post", lambda *a, body=body, **k: FakeResponse(body))
        hint = suggest_next(HISTORY, 4)
        assert hint.ok is False
        assert hint.message == FALLBACK_MESSAGE

"""
- HTTP call with clear fallback
Ask Gemini for the next guess, given the history so far. If anything goes wrong
(no key, no internet, timeout, bad response), we return a fixed fallback message
so the game still works.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from .config import GEMINI_API_KEY, HINT_API_URL, HINT_LANGUAGE, HINT_MODEL, HINT_TIMEOUT_SECONDS
from .engine import normalize_guess
from .types import History

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "The hint service could not think right now. Check your network or try again later."

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "suggestedGuess": {"type": "STRING"},
        "reasoning": {"type": "STRING"},
    },
    "required": ["suggestedGuess", "reasoning"],
}


@dataclass
class Hint:
    ok: bool
    message: str
    suggested_guess: Optional[str] = None
    reasoning: Optional[str] = None


def first_guess_hint(secret_length: int) -> Hint:
    example = "1234567890"[:secret_length]
    return Hint(
        ok=True,
        message=f"Try any number without repeated digits, for example {example}.",
        suggested_guess=example,
    )


def build_prompt(history: History, secret_length: int) -> str:
    lines = []
    for guess, correct_count in history:
        lines.append(f"Guess: {guess}, Correct Digits at Correct Positions: {correct_count}")
    history_text = "\n".join(lines)

    return (
        'This is a logic game like "Bulls and Cows" or "Mastermind".\n'
        f"The player is trying to find a {secret_length}-digit secret number.\n"
        "Here is the history of guesses and how many digits were in the correct position:\n"
        f"{history_text}\n\n"
        "Based on this data, provide the single most logical next guess.\n"
        f"Explain your reasoning briefly in {HINT_LANGUAGE}."
    )


def _parse_response(body: dict, secret_length: int) -> Hint:
    # The body looks like:
    #   {"candidates": [{"content": {"parts": [{"text": "{\"suggestedGuess\": ...}"}]}}]}
    text = body["candidates"][0]["content"]["parts"][0]["text"]
    data = json.loads(text)

    suggested = data.get("suggestedGuess")
    reasoning = data.get("reasoning")
    if not isinstance(suggested, str) or not isinstance(reasoning, str):
        raise ValueError("Hint payload is missing suggestedGuess or reasoning.")
    # A suggestion we could not even submit counts as a malformed answer
    suggested = normalize_guess(suggested, secret_length)

    return Hint(
        ok=True,
        message=f"{suggested} - {reasoning}",
        suggested_guess=suggested,
        reasoning=reasoning,
    )


def suggest_next(history: History, secret_length: int) -> Hint:
    # 1. Nothing to reason about yet: answer locally
    if len(history) == 0:
        return first_guess_hint(secret_length)

    # 2. No key configured: the service cannot be reached
    if not GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set; returning fallback hint")
        return Hint(ok=False, message=FALLBACK_MESSAGE)

    payload = {
        "contents": [{"parts": [{"text": build_prompt(history, secret_length)}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }

    try:
        response = requests.post(
            f"{HINT_API_URL}/{HINT_MODEL}:generateContent",
            json=payload,
            headers={"x-goog-api-key": GEMINI_API_KEY},
            timeout=HINT_TIMEOUT_SECONDS,
        )
        # If the response was not 200 OK, this will raise an error
        response.raise_for_status()
        return _parse_response(response.json(), secret_length)

    except (requests.RequestException, ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
        # Network failure, bad status or a payload that does not match the schema
        logger.warning("Hint request failed: %s", exc)
        return Hint(ok=False, message=FALLBACK_MESSAGE)

"""
Pure game logic (no HTTP, no storage).
- generate_secret: random digits with no repeats
- count_correct_positions: how many indices are exactly correct (right digit, right place)

We only report correct positions. There is no separate count for digits
that are in the secret but in the wrong place.
"""

from secrets import randbelow
from typing import List

from .errors import InvalidGuessError, InvalidSecretError
from .types import Guess, Secret

DIGITS = "0123456789"
MIN_LENGTH = 3
MAX_LENGTH = 5
DEFAULT_LENGTH = 3

# Difficulty presets for the automated opponent, keyed by secret length
DIFFICULTIES = {
    3: "easy",
    4: "normal",
    5: "hard",
}

RULES: List[str] = [
    "Your opponent sets a secret of 3-5 digits with no repeated digit.",
    "After each guess the opponent answers with the number of correct digits: "
    "digits that match in both value and position.",
    "Example: the secret is 1234. Guessing 1256 gets '2 correct', guessing 1236 gets '3 correct'.",
    "The first player to guess the whole secret wins.",
    "Tap a digit of a past guess to mark it correct or wrong. Notes are for you only.",
    "Lock an input slot to keep its digit for the next guesses.",
]


def difficulty_label(length: int) -> str:
    name = DIFFICULTIES.get(length)
    if name is None:
        return f"{length} digits"
    return f"{length} digits ({name})"


def generate_secret(length: int) -> Secret:
    """
    Pick `length` digits out of a shrinking pool of 0..9.
    Each pick removes the digit from the pool, so digits never repeat.
      generate_secret(4) -> "5036"
    """
    if length < 1 or length > len(DIGITS):
        raise ValueError(f"Cannot build a secret of {length} unique digits.")

    pool = list(DIGITS)
    result = []
    while len(result) < length:
        index = randbelow(len(pool))
        result.append(pool.pop(index))
    return "".join(result)


def count_correct_positions(guess: Guess, secret: Secret) -> int:
    """
    Example:
      secret = "1234"
      guess  = "1256"
      -> 2  (the 1 and the 2 are in the right place)
    """
    n = len(secret)
    if n == 0 or len(guess) != n:
        raise ValueError("Secret and guess must be the same non-zero length.")

    correct = 0
    i = 0
    while i < n:
        if guess[i] == secret[i]:
            correct += 1
        i += 1
    return correct


def is_win(guess: Guess, secret: Secret) -> bool:
    if len(secret) == 0 or len(guess) != len(secret):
        return False
    return count_correct_positions(guess, secret) == len(secret)


def validate_secret(secret: str) -> Secret:
    """Check a secret typed in by a player before any game starts."""
    secret = secret.strip()
    if not all_digits(secret):
        raise InvalidSecretError("The secret may only contain digits.")
    if len(secret) < MIN_LENGTH or len(secret) > MAX_LENGTH:
        raise InvalidSecretError(f"Please set a secret of {MIN_LENGTH}-{MAX_LENGTH} digits.")
    if len(set(secret)) != len(secret):
        raise InvalidSecretError("Digits in the secret must not repeat.")
    return secret


def normalize_guess(guess: str, length: int) -> Guess:
    guess = guess.strip()
    if not all_digits(guess):
        raise InvalidGuessError("A guess may only contain digits.")
    if len(guess) != length:
        raise InvalidGuessError(f"Guess must have exactly {length} digits for this game.")
    return guess


def all_digits(text: str) -> bool:
    # str.isdigit() also accepts superscripts and digits of other scripts
    return text != "" and all(char in DIGITS for char in text)

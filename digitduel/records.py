"""
Guess records of one game, newest first.
"""

from dataclasses import dataclass, field
from time import time
from typing import List, Optional
from uuid import uuid4

from .engine import count_correct_positions
from .errors import DuplicateGuessError, GameError
from .types import Guess, History, NoteState, Secret

NOTE_CYCLE: List[NoteState] = ["none", "correct", "wrong"]


@dataclass
class GuessRecord:
    id: str
    guess: Guess
    correct_count: int = 0
    notes: List[NoteState] = field(default_factory=list)
    created_at: float = field(default_factory=time)


class RecordStore:
    def __init__(self) -> None:
        self._records: List[GuessRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(list(self._records))

    def find(self, record_id: str) -> Optional[GuessRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def contains_guess(self, guess: Guess) -> bool:
        return any(record.guess == guess for record in self._records)

    def append(self, guess: Guess, secret: Optional[Secret] = None) -> GuessRecord:
        """
        Score the guess when a secret is given (automated opponent),
        otherwise start at 0 and wait for the other player to fill it in.
        """
        if self.contains_guess(guess):
            raise DuplicateGuessError(f"You already guessed {guess}.")

        correct_count = 0
        if secret is not None:
            correct_count = count_correct_positions(guess, secret)

        record = GuessRecord(
            id=str(uuid4()),
            guess=guess,
            correct_count=correct_count,
            notes=["none"] * len(guess),
        )
        self._records.insert(0, record)
        return record

    def update(
        self,
        record_id: str,
        correct_count: Optional[int] = None,
        delta: Optional[int] = None,
        notes: Optional[List[NoteState]] = None,
    ) -> Optional[GuessRecord]:
        record = self.find(record_id)
        if record is None:
            return None

        # Validate everything first so a bad field leaves the record untouched
        if correct_count is not None and correct_count < 0:
            raise GameError("Correct count cannot be negative.")
        if notes is not None:
            if len(notes) != len(record.guess):
                raise GameError(f"Expected {len(record.guess)} notes, got {len(notes)}.")
            for note in notes:
                if note not in NOTE_CYCLE:
                    raise GameError(f"Unknown note {note!r}.")

        if correct_count is not None:
            record.correct_count = correct_count
        if delta is not None:
            record.correct_count = max(0, record.correct_count + delta)
        if notes is not None:
            record.notes = list(notes)
        return record

    def remove(self, record_id: str) -> Optional[GuessRecord]:
        record = self.find(record_id)
        if record is not None:
            self._records.remove(record)
        return record

    def cycle_note(self, record_id: str, index: int) -> Optional[GuessRecord]:
        """none -> correct -> wrong -> none"""
        record = self.find(record_id)
        if record is None:
            return None
        if index < 0 or index >= len(record.notes):
            raise GameError(f"No digit at position {index}.")

        current = NOTE_CYCLE.index(record.notes[index])
        record.notes[index] = NOTE_CYCLE[(current + 1) % len(NOTE_CYCLE)]
        return record

    def history(self) -> History:
        return [(record.guess, record.correct_count) for record in self._records]

    def clear(self) -> None:
        self._records = []

"""
One game at the table: the secret, the mode and the guess records.

States:
  NotStarted --start()--> InProgress --restart()--> NotStarted

A correct solve only queues a notice. Players may keep guessing afterwards
(useful for finishing their notes), so there is no "won" state.
"""

import logging
from typing import List, Optional
from uuid import uuid4

from .engine import MAX_LENGTH, MIN_LENGTH, all_digits, generate_secret, normalize_guess, validate_secret
from .errors import DuplicateGuessError, GameNotStartedError, InvalidSecretError
from .records import GuessRecord, RecordStore
from .types import GameMode, Guess, History, NoteState, Secret

logger = logging.getLogger(__name__)

WIN_NOTICE = "Congratulations! You cracked the code!"


class GameSession:
    def __init__(self, session_id: Optional[str] = None) -> None:
        self.id = session_id or str(uuid4())
        self.secret: Secret = ""
        self.mode: Optional[GameMode] = None
        self.secret_visible = False
        self.records = RecordStore()
        self._notices: List[str] = []

    @property
    def started(self) -> bool:
        return self.secret != "" and self.mode is not None

    @property
    def won(self) -> bool:
        if self.mode != "automated":
            return False
        return any(record.correct_count == len(self.secret) for record in self.records)

    # --- Lifecycle ---

    def start(self, secret: Secret, mode: GameMode) -> None:
        if mode == "two_player":
            secret = validate_secret(secret)
        elif not all_digits(secret) or len(set(secret)) != len(secret):
            raise InvalidSecretError("The secret must be unique digits.")

        self.secret = secret
        self.mode = mode
        self.secret_visible = False
        self.records.clear()
        self._notices = []
        logger.info("Session %s started: mode=%s length=%d", self.id, mode, len(secret))

    def start_automated(self, length: int) -> None:
        if length < MIN_LENGTH or length > MAX_LENGTH:
            raise InvalidSecretError(f"Please pick a length of {MIN_LENGTH}-{MAX_LENGTH} digits.")
        self.start(generate_secret(length), "automated")

    def restart(self) -> None:
        self.secret = ""
        self.mode = None
        self.secret_visible = False
        self.records.clear()
        self._notices = []
        logger.info("Session %s restarted", self.id)

    # --- Moves ---

    def require_started(self) -> None:
        if not self.started:
            raise GameNotStartedError("The game has not started yet.")

    def submit_guess(self, guess: Guess) -> GuessRecord:
        self.require_started()
        guess = normalize_guess(guess, len(self.secret))
        if self.records.contains_guess(guess):
            logger.debug("Session %s rejected duplicate guess %s", self.id, guess)
            raise DuplicateGuessError(f"You already guessed {guess}.")

        if self.mode == "automated":
            record = self.records.append(guess, self.secret)
            if record.correct_count == len(self.secret):
                self.notify(WIN_NOTICE)
                logger.info("Session %s solved in %d guesses", self.id, len(self.records))
        else:
            record = self.records.append(guess)
        return record

    def update_record(
        self,
        record_id: str,
        correct_count: Optional[int] = None,
        delta: Optional[int] = None,
        notes: Optional[List[NoteState]] = None,
    ) -> Optional[GuessRecord]:
        return self.records.update(record_id, correct_count=correct_count, delta=delta, notes=notes)

    def cycle_note(self, record_id: str, index: int) -> Optional[GuessRecord]:
        return self.records.cycle_note(record_id, index)

    def remove_record(self, record_id: str) -> Optional[GuessRecord]:
        return self.records.remove(record_id)

    def toggle_secret_visibility(self) -> bool:
        # Revealing the opponent's secret is how a player concedes
        self.secret_visible = not self.secret_visible
        return self.secret_visible

    # --- Reading ---

    def visible_secret(self) -> str:
        if self.mode == "automated" and not self.secret_visible:
            return "*" * len(self.secret)
        return self.secret

    def history(self) -> History:
        return self.records.history()

    def notify(self, message: str) -> None:
        self._notices.append(message)

    def drain_notices(self) -> List[str]:
        notices, self._notices = self._notices, []
        return notices

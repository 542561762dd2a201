"""
In-memory store
Holds every game session in memory. Nothing survives a process restart.

Routes run in a thread pool, so each operation takes the store lock and
sees the session either before or after another operation, never halfway.
Responses are built under the same lock, so a reply never mixes two states.
Methods return None when the session id is unknown.
"""

from concurrent.futures import Executor, ThreadPoolExecutor
from threading import RLock
from typing import Dict, List, Optional, Tuple

from .config import HINT_WORKERS
from .engine import DEFAULT_LENGTH
from .hint_client import Hint
from .hints import Advisor, HintTracker
from .records import GuessRecord
from .schemas import GameStateOut, GuessResponse, RecordOut
from .session import GameSession
from .types import GameMode, NoteState


# --- Small DTO builders so routes only deal with schemas ---

def _to_record_out(record: GuessRecord) -> RecordOut:
    return RecordOut(
        id=record.id,
        guess=record.guess,
        correct_count=record.correct_count,
        notes=list(record.notes),
        created_at=record.created_at,
    )


def _to_game_state(session: GameSession) -> GameStateOut:
    # Drains the notice queue: each notice is delivered once
    return GameStateOut(
        game_id=session.id,
        started=session.started,
        mode=session.mode,
        secret=session.visible_secret(),
        secret_visible=session.secret_visible,
        secret_length=len(session.secret),
        won=session.won,
        records=[_to_record_out(r) for r in session.records],
        notices=session.drain_notices(),
    )


class SessionStore:
    def __init__(self, executor: Optional[Executor] = None, advisor: Optional[Advisor] = None) -> None:
        self._sessions: Dict[str, GameSession] = {}
        self._hints: Dict[str, HintTracker] = {}
        self._lock = RLock()
        self._executor = executor or ThreadPoolExecutor(max_workers=HINT_WORKERS, thread_name_prefix="hint")
        self._advisor = advisor

    def create(self) -> GameSession:
        session = GameSession()
        with self._lock:
            self._sessions[session.id] = session
            self._hints[session.id] = HintTracker(self._executor, self._advisor)
        return session

    def get(self, session_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def snapshot(self, session_id: str) -> Optional[GameStateOut]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            return _to_game_state(session)

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)
            tracker = self._hints.pop(session_id, None)
        if tracker is not None:
            tracker.invalidate()

    # --- Lifecycle ---

    def start(self, session_id: str, mode: GameMode, length: Optional[int] = None,
              secret: Optional[str] = None) -> Optional[GameStateOut]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if mode == "automated":
                session.start_automated(DEFAULT_LENGTH if length is None else length)
            else:
                session.start(secret or "", mode)
            self._hints[session_id].invalidate()
            return _to_game_state(session)

    def restart(self, session_id: str) -> Optional[GameStateOut]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            session.restart()
            self._hints[session_id].invalidate()
            return _to_game_state(session)

    def toggle_secret(self, session_id: str) -> Optional[GameStateOut]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            session.toggle_secret_visibility()
            return _to_game_state(session)

    # --- Records ---
    # Any change to the records makes an in-flight hint stale

    def submit_guess(self, session_id: str, guess: str) -> Optional[GuessResponse]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            record = session.submit_guess(guess)
            self._hints[session_id].invalidate()
            return GuessResponse(
                record=_to_record_out(record),
                won=session.won,
                notices=session.drain_notices(),
            )

    def update_record(self, session_id: str, record_id: str, correct_count: Optional[int] = None,
                      delta: Optional[int] = None,
                      notes: Optional[List[NoteState]] = None) -> Optional[RecordOut]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            record = session.update_record(record_id, correct_count=correct_count, delta=delta, notes=notes)
            if record is None:
                return None
            if correct_count is not None or delta is not None:
                self._hints[session_id].invalidate()
            return _to_record_out(record)

    def cycle_note(self, session_id: str, record_id: str, index: int) -> Optional[RecordOut]:
        # Notes are not sent to the hint service, so pending hints stay valid
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            record = session.cycle_note(record_id, index)
            if record is None:
                return None
            return _to_record_out(record)

    def remove_record(self, session_id: str, record_id: str) -> Optional[GuessRecord]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            record = session.remove_record(record_id)
            if record is not None:
                self._hints[session_id].invalidate()
            return record

    # --- Hints ---

    def request_hint(self, session_id: str) -> Optional[int]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            session.require_started()
            return self._hints[session_id].request(session.history(), len(session.secret))

    def hint_status(self, session_id: str) -> Optional[Tuple[int, str, Optional[Hint]]]:
        with self._lock:
            tracker = self._hints.get(session_id)
        if tracker is None:
            return None
        return tracker.status()

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

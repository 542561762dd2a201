'''
Digit Duel API

Endpoints:
GET    /rules                                   -> rules and difficulty presets
POST   /games                                   -> create and start a game
GET    /games/{id}                              -> read state & records
POST   /games/{id}/start                        -> start again after a restart
POST   /games/{id}/restart                      -> back to setup
POST   /games/{id}/guess                        -> submit a guess
POST   /games/{id}/secret/toggle                -> show / hide the opponent's secret
PATCH  /games/{id}/records/{rid}                -> correct count & notes
POST   /games/{id}/records/{rid}/notes/{index}  -> cycle one note
DELETE /games/{id}/records/{rid}                -> remove a record
POST   /games/{id}/hint                         -> ask for a hint
GET    /games/{id}/hint                         -> read the hint

All state lives in memory (SessionStore).
'''

import logging

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware

from .config import LOG_LEVEL
from .engine import DIFFICULTIES, RULES, difficulty_label
from .errors import DuplicateGuessError, GameError, GameNotStartedError
from .store import SessionStore

from .schemas import (
    StartRequest,
    GuessRequest,
    GuessResponse,
    GameStateOut,
    RecordOut,
    RecordUpdate,
    HintTicketOut,
    HintOut,
    RulesOut,
    DifficultyOut,
)

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Digit Duel API", version="1.0.0")

# Allow everything in dev so the docs and front-end work easily
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

store = SessionStore()


@app.on_event("shutdown")
def _stop_hint_workers():
    store.shutdown()


def get_store() -> SessionStore:
    return store


def _to_http_error(error: GameError) -> HTTPException:
    # Duplicate guesses and moves before the start conflict with the current state;
    # everything else is bad input
    if isinstance(error, (DuplicateGuessError, GameNotStartedError)):
        return HTTPException(status_code=409, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


def _not_found(what: str = "Game") -> HTTPException:
    return HTTPException(status_code=404, detail=f"{what} not found")


# ---------------- Routes ----------------

@app.get("/rules", response_model=RulesOut, summary="Game rules")
def get_rules() -> RulesOut:
    return RulesOut(
        rules=RULES,
        difficulties=[DifficultyOut(length=n, label=difficulty_label(n)) for n in sorted(DIFFICULTIES)],
    )


@app.post("/games", response_model=GameStateOut, summary="Create and start a game")
def create_game(payload: StartRequest, store: SessionStore = Depends(get_store)) -> GameStateOut:
    """
    automated  -> the computer picks a secret of `length` unique digits (3-5, default 3)
    two_player -> `secret` is your own number; your friend enters correct counts by hand
    """
    session = store.create()
    try:
        return store.start(session.id, payload.mode, length=payload.length, secret=payload.secret)
    except GameError as ge:
        store.discard(session.id)
        raise _to_http_error(ge)


@app.get("/games/{game_id}", response_model=GameStateOut, summary="Get current game state")
def get_game(game_id: str, store: SessionStore = Depends(get_store)) -> GameStateOut:
    """
    Note: reading the state also delivers pending notices (e.g. the win message),
    so each notice shows up in exactly one response.
    """
    state = store.snapshot(game_id)
    if not state:
        raise _not_found()
    return state


@app.post("/games/{game_id}/start", response_model=GameStateOut, summary="Start a restarted game")
def start_game(game_id: str, payload: StartRequest, store: SessionStore = Depends(get_store)) -> GameStateOut:
    try:
        state = store.start(game_id, payload.mode, length=payload.length, secret=payload.secret)
    except GameError as ge:
        raise _to_http_error(ge)
    if not state:
        raise _not_found()
    return state


@app.post("/games/{game_id}/restart", response_model=GameStateOut, summary="Back to setup")
def restart_game(game_id: str, store: SessionStore = Depends(get_store)) -> GameStateOut:
    state = store.restart(game_id)
    if not state:
        raise _not_found()
    return state


@app.post("/games/{game_id}/guess", response_model=GuessResponse, summary="Submit a guess")
def submit_guess(game_id: str, payload: GuessRequest, store: SessionStore = Depends(get_store)) -> GuessResponse:
    # session.submit_guess() performs the length, digit and duplicate checks
    try:
        result = store.submit_guess(game_id, payload.guess)
    except GameError as ge:
        logger.debug("Guess rejected for %s: %s", game_id, ge)
        raise _to_http_error(ge)
    if not result:
        raise _not_found()
    return result


@app.post("/games/{game_id}/secret/toggle", response_model=GameStateOut,
          summary="Reveal (concede) or hide the secret")
def toggle_secret(game_id: str, store: SessionStore = Depends(get_store)) -> GameStateOut:
    state = store.toggle_secret(game_id)
    if not state:
        raise _not_found()
    return state


@app.patch("/games/{game_id}/records/{record_id}", response_model=RecordOut, summary="Edit a record")
def update_record(game_id: str, record_id: str, payload: RecordUpdate,
                  store: SessionStore = Depends(get_store)) -> RecordOut:
    if not store.get(game_id):
        raise _not_found()
    try:
        record = store.update_record(
            game_id, record_id,
            correct_count=payload.correct_count,
            delta=payload.delta,
            notes=payload.notes,
        )
    except GameError as ge:
        raise _to_http_error(ge)
    if not record:
        raise _not_found("Record")
    return record


@app.post("/games/{game_id}/records/{record_id}/notes/{index}", response_model=RecordOut,
          summary="Cycle a digit note: none -> correct -> wrong")
def cycle_note(game_id: str, record_id: str, index: int, store: SessionStore = Depends(get_store)) -> RecordOut:
    if not store.get(game_id):
        raise _not_found()
    try:
        record = store.cycle_note(game_id, record_id, index)
    except GameError as ge:
        raise _to_http_error(ge)
    if not record:
        raise _not_found("Record")
    return record


@app.delete("/games/{game_id}/records/{record_id}", summary="Remove a record")
def remove_record(game_id: str, record_id: str, store: SessionStore = Depends(get_store)) -> dict:
    if not store.get(game_id):
        raise _not_found()
    if not store.remove_record(game_id, record_id):
        raise _not_found("Record")
    return {"message": "Record removed."}


@app.post("/games/{game_id}/hint", response_model=HintTicketOut, summary="Ask for a hint")
def request_hint(game_id: str, store: SessionStore = Depends(get_store)) -> HintTicketOut:
    try:
        token = store.request_hint(game_id)
    except GameError as ge:
        raise _to_http_error(ge)
    if token is None:
        raise _not_found()

    # A fast answer (or the local first-guess tip) may already be in
    current, status, _ = store.hint_status(game_id)
    ready = current == token and status == "ready"
    return HintTicketOut(token=token, status="ready" if ready else "pending")


@app.get("/games/{game_id}/hint", response_model=HintOut, summary="Read the latest hint")
def get_hint(game_id: str, store: SessionStore = Depends(get_store)) -> HintOut:
    result = store.hint_status(game_id)
    if result is None:
        raise _not_found()

    token, status, hint = result
    if hint is None:
        return HintOut(token=token, status=status)
    return HintOut(
        token=token,
        status=status,
        ok=hint.ok,
        suggested_guess=hint.suggested_guess,
        reasoning=hint.reasoning,
        message=hint.message,
    )

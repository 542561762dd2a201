"""
Explicit validation & Pydantic models
- Defines the structure of API requests and responses.
- Game rules (digit uniqueness, guess length) are checked by the session, not here,
  so the player gets the same notice whatever the entry point.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, model_validator

from .types import GameMode as Mode, NoteState as Note


# 1. Setup: pick a mode, then either a length (automated) or a secret (two players)
class StartRequest(BaseModel):
    mode: Mode = Field(..., description="'automated' to play against the computer, 'two_player' face to face")
    length: Optional[int] = Field(None, description="Secret length for the automated opponent (3-5)")
    secret: Optional[str] = Field(None, description="Your own secret, two-player mode only (3-5 unique digits)")

    @model_validator(mode="after")
    def check_mode_fields(self) -> "StartRequest":
        if self.mode == "two_player" and self.secret is None:
            raise ValueError("Two-player mode needs a secret.")
        if self.mode == "automated" and self.secret is not None:
            raise ValueError("The automated opponent picks its own secret.")
        return self

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"mode": "automated", "length": 4},
                {"mode": "two_player", "secret": "582"},
            ]
        }
    }


# 2. A guess is sent as text so leading zeros survive
class GuessRequest(BaseModel):
    guess: str = Field(..., description="Digits only, same length as the secret", examples=["0123"])


# 3. Manual bookkeeping on a record
class RecordUpdate(BaseModel):
    correct_count: Optional[int] = Field(None, ge=0, description="Set the correct count")
    delta: Optional[int] = Field(None, description="Add to the correct count (never drops below 0)")
    notes: Optional[List[Note]] = Field(None, description="Replace all notes, one per digit")


class RecordOut(BaseModel):
    id: str = Field(..., description="Unique record id")
    guess: str = Field(..., description="The guess")
    correct_count: int = Field(..., description="Digits right in value and position")
    notes: List[Note] = Field(..., description="Per-digit notes")
    created_at: float = Field(..., description="When the guess was made")


# 4. Everything a screen needs to draw the game
class GameStateOut(BaseModel):
    game_id: str = Field(..., description="Unique ID for the session")
    started: bool = Field(..., description="False until a mode and secret are set")
    mode: Optional[Mode] = Field(None, description="Current mode")
    secret: str = Field(..., description="The secret, masked with '*' while hidden")
    secret_visible: bool = Field(..., description="Whether the automated opponent's secret is revealed")
    secret_length: int = Field(..., description="Number of digits in the secret")
    won: bool = Field(..., description="A guess matched the whole secret (automated mode)")
    records: List[RecordOut] = Field(..., description="Guesses, newest first")
    notices: List[str] = Field(default_factory=list, description="Messages for the player, shown once")


class GuessResponse(BaseModel):
    record: RecordOut = Field(..., description="The new record")
    won: bool = Field(..., description="This game has been solved")
    notices: List[str] = Field(default_factory=list, description="Messages for the player, shown once")


# 5. Hints
class HintTicketOut(BaseModel):
    token: int = Field(..., description="Identifies this request; older answers are dropped")
    status: Literal["pending", "ready"] = Field(..., description="Whether the answer is already in")


class HintOut(BaseModel):
    token: int = Field(..., description="Token of the current request")
    status: Literal["idle", "pending", "ready"] = Field(..., description="idle / pending / ready")
    ok: Optional[bool] = Field(None, description="False when the service failed and message is the fallback")
    suggested_guess: Optional[str] = Field(None, description="Suggested next guess")
    reasoning: Optional[str] = Field(None, description="Why that guess")
    message: Optional[str] = Field(None, description="Text to show the player")


# 6. Rules screen
class DifficultyOut(BaseModel):
    length: int
    label: str


class RulesOut(BaseModel):
    rules: List[str]
    difficulties: List[DifficultyOut]

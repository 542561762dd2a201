"""
Labels for clarity.
"""

from typing import List, Literal, Tuple

Secret = str  # "0".."9" characters, no repeats
Guess = str
GameMode = Literal["automated", "two_player"]
NoteState = Literal["none", "correct", "wrong"]
History = List[Tuple[Guess, int]]  # (guess, correct_count), newest first

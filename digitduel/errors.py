"""
Rule violations a player can trigger.
The message of each error is the short notice shown to the player.
"""


class GameError(ValueError):
    pass


class InvalidSecretError(GameError):
    pass


class InvalidGuessError(GameError):
    pass


class DuplicateGuessError(GameError):
    pass


class GameNotStartedError(GameError):
    pass

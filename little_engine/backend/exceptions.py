"""Exception types raised by the game backend."""

from __future__ import annotations


class LittleEngineError(Exception):
    """Base exception for all game errors."""

    status_code = 400


class ScenarioLoadError(LittleEngineError):
    """Raised when a scenario file or a referenced character file cannot be loaded."""

    status_code = 500


class ChatError(LittleEngineError):
    """Raised when the chat collaborator fails to produce a reply."""

    status_code = 502


class CharacterNotFoundError(LittleEngineError):
    """Raised when a character id is not part of the scenario."""

    status_code = 404

    def __init__(self, character_id: str) -> None:
        self.character_id = character_id
        super().__init__(f"Character not found: {character_id}")


class SuspectNotFoundError(LittleEngineError):
    """Raised when an accusation does not match any character."""

    status_code = 404

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__(f"No suspect found matching: {query!r}")


class ClueLockedError(LittleEngineError):
    """Raised when the player asks to read a time clue that is still sealed."""

    status_code = 403

    def __init__(self, clue_id: str) -> None:
        self.clue_id = clue_id
        super().__init__(f"Time clue is still locked: {clue_id}")


class TimeClueNotFoundError(LittleEngineError):
    """Raised when a time clue id is not part of the scenario."""

    status_code = 404

    def __init__(self, clue_id: str) -> None:
        self.clue_id = clue_id
        super().__init__(f"Time clue not found: {clue_id}")

"""Data models for the mystery game."""

from .character import Character, LyingRules, TimelineEntry, UnlockRule, DEFAULT_GREETING
from .clue import Evidence, TimeClue, START_CONDITION
from .scenario import Case, Scenario, build_keyword_triggers
from .conversation import ConversationTurn, TurnRole, format_history
from .event import Directive, DirectiveKind, UnlockCause, UnlockEvent, UnlockKind
from .game_state import GameState

__all__ = [
    # Character
    "Character",
    "LyingRules",
    "TimelineEntry",
    "UnlockRule",
    "DEFAULT_GREETING",
    # Clue
    "Evidence",
    "TimeClue",
    "START_CONDITION",
    # Scenario
    "Case",
    "Scenario",
    "build_keyword_triggers",
    # Conversation
    "ConversationTurn",
    "TurnRole",
    "format_history",
    # Event
    "Directive",
    "DirectiveKind",
    "UnlockCause",
    "UnlockEvent",
    "UnlockKind",
    # Game State
    "GameState",
]

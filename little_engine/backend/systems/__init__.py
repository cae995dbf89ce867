"""Game systems for the mystery game."""

from .directives import ParsedReply, format_directive, parse_directives
from .unlock_system import UnlockSystem
from .time_system import TimeSystem, format_countdown, system_clock
from .conversation_system import ConversationResult, ConversationSystem, FALLBACK_REPLY
from .accusation_system import AccusationSystem, Verdict

__all__ = [
    "ParsedReply",
    "format_directive",
    "parse_directives",
    "UnlockSystem",
    "TimeSystem",
    "format_countdown",
    "system_clock",
    "ConversationResult",
    "ConversationSystem",
    "FALLBACK_REPLY",
    "AccusationSystem",
    "Verdict",
]

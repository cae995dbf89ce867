"""Conversation system: one active interrogation at a time."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, TYPE_CHECKING

from ..exceptions import CharacterNotFoundError, ChatError
from ..models import (
    Character,
    ConversationTurn,
    Evidence,
    TimeClue,
    TurnRole,
    UnlockEvent,
    format_history,
)
from .directives import parse_directives
from .unlock_system import UnlockSystem

if TYPE_CHECKING:
    from ..ai import LLMClient
    from ..context import GameContext

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "...The line is unclear. Could you say that again?"

PersonaBuilder = Callable[[Character, Sequence[Evidence], Sequence[TimeClue]], str]


@dataclass
class ConversationResult:
    character_id: str
    player_turn: ConversationTurn
    reply_turn: ConversationTurn
    events: List[UnlockEvent] = field(default_factory=list)
    fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "character_id": self.character_id,
            "player_turn": self.player_turn.to_dict(),
            "reply_turn": self.reply_turn.to_dict(),
            "events": [e.to_dict() for e in self.events],
            "fallback": self.fallback,
        }


class ConversationSystem:
    """对话系统 - 管理玩家与当前角色的对话"""

    def __init__(
        self,
        context: GameContext,
        unlock_system: UnlockSystem,
        llm_client: LLMClient,
        persona_builder: PersonaBuilder,
    ):
        self.context = context
        self.unlock_system = unlock_system
        self.llm = llm_client
        self.persona_builder = persona_builder
        self.active_character_id: Optional[str] = None
        self.pending_character_id: Optional[str] = None

    @property
    def pending(self) -> bool:
        return self.pending_character_id is not None

    def open(self, character_id: str) -> List[ConversationTurn]:
        """切换到某个角色；首次对话时由角色先开口（不调用 LLM）"""
        character = self.context.scenario.get_character(character_id)
        if not character:
            raise CharacterNotFoundError(character_id)

        self.active_character_id = character_id
        state = self.context.state
        if not state.history.get(character_id):
            state.add_turn(character_id, TurnRole.CHARACTER, character.greeting)
        return state.get_history(character_id)

    def close(self) -> None:
        self.active_character_id = None

    def build_persona(self, character: Character) -> str:
        state = self.context.state
        return self.persona_builder(
            character,
            self.unlock_system.visible_evidence(state),
            self.unlock_system.unlocked_time_clues(state),
        )

    async def send(self, player_text: str) -> Optional[ConversationResult]:
        """发送玩家消息并获取角色回复

        Returns:
            对话结果；消息为空、没有当前角色、上一条消息仍在等待回复，
            或回复到达时对话已切换，则返回 None
        """
        text = (player_text or "").strip()
        character_id = self.active_character_id
        if not text or not character_id:
            return None
        if self.pending:
            logger.info("Ignoring message to %s while a reply is still pending", character_id)
            return None

        character = self.context.scenario.get_character(character_id)
        if not character:
            raise CharacterNotFoundError(character_id)

        state = self.context.state
        history = state.get_history(character_id)
        player_turn = state.add_turn(character_id, TurnRole.PLAYER, text)
        persona = self.build_persona(character)

        logger.debug("Asking %s with history:\n%s", character_id, format_history(history))
        self.pending_character_id = character_id
        raw_reply: Optional[str]
        try:
            raw_reply = await self.llm.chat(persona, text, history)
        except ChatError as e:
            logger.warning("Chat with %s failed, using fallback line: %s", character_id, e)
            raw_reply = None
        except Exception:
            logger.exception("Chat client for %s raised unexpectedly, using fallback line", character_id)
            raw_reply = None
        finally:
            self.pending_character_id = None

        # await 期间可能切换了角色或重置了游戏
        if self.active_character_id != character_id or self.context.state is not state:
            logger.info("Discarding late reply from %s, conversation is no longer active", character_id)
            return None

        events: List[UnlockEvent] = []
        if raw_reply is None:
            reply_text = FALLBACK_REPLY
        else:
            parsed = parse_directives(raw_reply)
            events.extend(self.unlock_system.apply_directives(state, parsed.directives))
            reply_text = parsed.text or "..."

        reply_turn = state.add_turn(character_id, TurnRole.CHARACTER, reply_text)
        scanned = [text] if raw_reply is None else [text, reply_text]
        events.extend(self.unlock_system.apply_keywords(state, *scanned))

        return ConversationResult(
            character_id=character_id,
            player_turn=player_turn,
            reply_turn=reply_turn,
            events=events,
            fallback=raw_reply is None,
        )

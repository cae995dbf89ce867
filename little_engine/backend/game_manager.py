"""Game manager that wires the scenario, game state and all systems together."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from .ai import LLMClient
from .context import GameContext
from .exceptions import ClueLockedError, TimeClueNotFoundError
from .models import GameState, Scenario, UnlockEvent
from .persona import build_persona
from .storage import GameStore
from .systems import (
    AccusationSystem,
    ConversationResult,
    ConversationSystem,
    TimeSystem,
    UnlockSystem,
    Verdict,
    system_clock,
)
from .systems.conversation_system import PersonaBuilder

logger = logging.getLogger(__name__)


class GameManager:
    """游戏主控制器 - 整合所有子系统

    所有依赖都通过构造函数传入。同步操作在返回前完成读-改-存，
    只有 send_message 会在等待 LLM 时让出控制权。
    """

    def __init__(
        self,
        scenario: Scenario,
        store: GameStore,
        llm_client: LLMClient,
        clock: Callable[[], int] = system_clock,
        persona_builder: PersonaBuilder = build_persona,
    ):
        self.scenario = scenario
        self.store = store
        self.clock = clock

        self.context = GameContext(scenario=scenario, state=self._restore_or_create())

        # 初始化子系统
        self.unlock_system = UnlockSystem(scenario)
        self.time_system = TimeSystem(scenario)
        self.accusation_system = AccusationSystem(scenario)
        self.conversation_system = ConversationSystem(
            self.context,
            self.unlock_system,
            llm_client,
            persona_builder,
        )

        self.unlock_system.sanitize(self.state)
        self._commit(self.unlock_system.evaluate(self.state, self.clock()), force=True)

    @property
    def state(self) -> GameState:
        return self.context.state

    def _restore_or_create(self) -> GameState:
        state = self.store.load()
        if state is not None:
            logger.info("Restored saved game (started at %d)", state.start_time)
            return state
        logger.info("No saved game found, starting a new one")
        return GameState.new(self.scenario, self.clock())

    def _commit(self, events: List[UnlockEvent], force: bool = False) -> List[UnlockEvent]:
        if events or force:
            self.store.save(self.state)
        return events

    # ============================================================
    # 玩家动作
    # ============================================================

    def open_conversation(self, character_id: str) -> Dict[str, Any]:
        history = self.conversation_system.open(character_id)
        self.store.save(self.state)
        return {
            "character_id": character_id,
            "history": [turn.to_dict() for turn in history],
        }

    def close_conversation(self) -> None:
        self.conversation_system.close()

    async def send_message(self, content: str) -> Optional[ConversationResult]:
        result = await self.conversation_system.send(content)
        if result is not None:
            self.store.save(self.state)
        return result

    def tick(self) -> List[UnlockEvent]:
        """定时调用：检查时间线索"""
        return self._commit(self.unlock_system.apply_time(self.state, self.clock()))

    def accuse(self, query: str) -> Verdict:
        verdict = self.accusation_system.accuse(query)
        logger.info("Accusation of %s: %s", verdict.suspect_id, "correct" if verdict.correct else "wrong")
        return verdict

    def read_time_clue(self, clue_id: str) -> Dict[str, Any]:
        clue = self.scenario.get_time_clue(clue_id)
        if not clue:
            raise TimeClueNotFoundError(clue_id)
        self.tick()
        if clue_id not in self.state.unlocked_clues:
            raise ClueLockedError(clue_id)
        return {"id": clue.id, "title": clue.title, "content": clue.content}

    def reset(self) -> None:
        """清除存档并重新开局"""
        self.store.reset()
        self.conversation_system.close()
        self.context.state = GameState.new(self.scenario, self.clock())
        self._commit(self.unlock_system.evaluate(self.state, self.clock()), force=True)
        logger.info("Game reset")

    # ============================================================
    # 游戏状态查询
    # ============================================================

    def get_history(self, character_id: str) -> List[Dict[str, Any]]:
        return [turn.to_dict() for turn in self.state.get_history(character_id)]

    def get_visible_evidence(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self.unlock_system.visible_evidence(self.state)]

    def get_time_clues(self) -> List[Dict[str, Any]]:
        return self.time_system.clue_status(self.state, self.clock())

    def get_characters(self) -> List[Dict[str, Any]]:
        return [c.to_dict() for c in self.scenario.characters]

    def get_game_state_snapshot(self) -> Dict[str, Any]:
        """获取游戏状态快照"""
        now = self.clock()
        active = self.conversation_system.active_character_id
        return {
            "case": self.scenario.case.to_dict(),
            "characters": self.get_characters(),
            "evidence": self.get_visible_evidence(),
            "time_clues": self.time_system.clue_status(self.state, now),
            "elapsed": self.time_system.get_time_display(self.state, now),
            "active_character": active,
            "history": self.get_history(active) if active else [],
            "pending": self.conversation_system.pending,
            "flags": sorted(self.state.flags),
        }

"""Game state data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from .conversation import ConversationTurn, TurnRole
from .scenario import Scenario


@dataclass
class GameState:
    """玩家进度：开局时间、对话历史、已解锁的 flag / 证据 / 线索"""
    start_time: int  # epoch 毫秒

    # 角色 ID -> 按时间顺序的对话
    history: Dict[str, List[ConversationTurn]] = field(default_factory=dict)

    # 全局标记，一旦设置不再清除
    flags: Set[str] = field(default_factory=set)

    unlocked_evidence: Set[str] = field(default_factory=set)
    unlocked_clues: Set[str] = field(default_factory=set)

    @classmethod
    def new(cls, scenario: Scenario, now_ms: int) -> GameState:
        """首次开局：记录开始时间，预先解锁 "start" 证据"""
        state = cls(start_time=now_ms)
        for evidence in scenario.evidences:
            if evidence.available_from_start:
                state.unlocked_evidence.add(evidence.id)
        return state

    # ---------------------------------------------------------------- flags
    def set_flag(self, name: str) -> bool:
        """设置标记；已存在时返回 False"""
        if name in self.flags:
            return False
        self.flags.add(name)
        return True

    def has_flag(self, name: str) -> bool:
        return name in self.flags

    # -------------------------------------------------------------- history
    def get_history(self, character_id: str) -> List[ConversationTurn]:
        return list(self.history.get(character_id, []))

    def add_turn(self, character_id: str, role: TurnRole, text: str) -> ConversationTurn:
        turn = ConversationTurn(role=role, text=text)
        self.history.setdefault(character_id, []).append(turn)
        return turn

    def elapsed_ms(self, now_ms: int) -> int:
        return max(0, now_ms - self.start_time)

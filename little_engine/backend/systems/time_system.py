"""Time system for the countdown of time-gated clues."""

from __future__ import annotations

import time
from typing import Any, Dict, List, TYPE_CHECKING

from ..models import Scenario, TimeClue

if TYPE_CHECKING:
    from ..models import GameState


def system_clock() -> int:
    """当前时间（epoch 毫秒）"""
    return int(time.time() * 1000)


def format_countdown(remaining_seconds: int) -> str:
    minutes, seconds = divmod(max(0, remaining_seconds), 60)
    return f"{minutes}:{seconds:02d}"


class TimeSystem:
    """时间系统 - 计算每条线索的剩余时间"""

    def __init__(self, scenario: Scenario):
        self.scenario = scenario

    def remaining_seconds(self, clue: TimeClue, game_state: GameState, now_ms: int) -> int:
        """剩余秒数，向上取整"""
        remaining_ms = clue.unlock_ms - game_state.elapsed_ms(now_ms)
        if remaining_ms <= 0:
            return 0
        return -(-remaining_ms // 1000)

    def clue_status(self, game_state: GameState, now_ms: int) -> List[Dict[str, Any]]:
        """按场景顺序返回线索的锁定状态（给前端按钮用）"""
        statuses = []
        for clue in self.scenario.time_clues:
            unlocked = clue.id in game_state.unlocked_clues
            remaining = 0 if unlocked else self.remaining_seconds(clue, game_state, now_ms)
            statuses.append({
                "id": clue.id,
                "title": clue.title,
                "unlocked": unlocked,
                "remaining_seconds": remaining,
                "label": clue.title if unlocked else f"Sealed ({format_countdown(remaining)})",
            })
        return statuses

    def get_time_display(self, game_state: GameState, now_ms: int) -> str:
        """游戏开始后的经过时间"""
        elapsed_seconds = game_state.elapsed_ms(now_ms) // 1000
        hours, rest = divmod(elapsed_seconds, 3600)
        if hours:
            return f"{hours}:{format_countdown(rest)}"
        return format_countdown(rest)

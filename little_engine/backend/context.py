"""Application context shared by the game systems."""

from __future__ import annotations

from dataclasses import dataclass

from .models import GameState, Scenario


@dataclass
class GameContext:
    """场景（只读）和当前游戏状态的句柄

    重置游戏时只替换 state，各系统持有同一个 context，始终读到最新状态。
    """
    scenario: Scenario
    state: GameState

"""Conversation data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence


class TurnRole(str, Enum):
    """发言方"""
    PLAYER = "player"
    CHARACTER = "character"


@dataclass(frozen=True)
class ConversationTurn:
    """对话中的一条消息"""
    role: TurnRole
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role.value, "text": self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ConversationTurn:
        """从字典创建；兼容旧存档里的 user / model 写法"""
        role = str(data["role"])
        role = {"user": "player", "model": "character"}.get(role, role)
        return cls(role=TurnRole(role), text=str(data["text"]))


def format_history(turns: Sequence[ConversationTurn], max_turns: int = 20) -> str:
    """格式化对话历史（用于日志和调试）"""
    recent = list(turns)[-max_turns:]
    lines: List[str] = []
    for turn in recent:
        lines.append(f"[{turn.role.value}]: {turn.text}")
    return "\n".join(lines)

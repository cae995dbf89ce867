"""Evidence and time clue data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

START_CONDITION = "start"


@dataclass(frozen=True)
class Evidence:
    """证据配置"""
    id: str
    name: str
    description: str
    unlock_condition: str = START_CONDITION  # "start" 或 flag 名
    keywords: Tuple[str, ...] = ()

    @property
    def available_from_start(self) -> bool:
        return self.unlock_condition == START_CONDITION

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Evidence:
        """从字典创建 Evidence"""
        keywords = data.get("keywords") or []
        if isinstance(keywords, str):
            keywords = [keywords]
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            unlock_condition=str(data.get("unlock_condition") or START_CONDITION),
            keywords=tuple(str(word) for word in keywords if word),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description.strip(),
        }


@dataclass(frozen=True)
class TimeClue:
    """按游戏开始后的经过时间解锁的线索"""
    id: str
    title: str
    content: str
    unlock_minutes: float = 0

    @property
    def unlock_ms(self) -> int:
        return int(round(self.unlock_minutes * 60 * 1000))

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> TimeClue:
        """从字典创建 TimeClue，缺少 id 时按顺序编号"""
        return cls(
            id=str(data.get("id") or f"clue_{index}"),
            title=str(data.get("title", "")),
            content=str(data.get("content", "")),
            unlock_minutes=float(data.get("unlock_minutes", 0) or 0),
        )

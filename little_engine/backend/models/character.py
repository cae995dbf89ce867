"""Character data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

DEFAULT_GREETING = "...What do you want? Make it quick."


@dataclass(frozen=True)
class TimelineEntry:
    """角色行动时间线中的一项"""
    time: str
    action: str


@dataclass(frozen=True)
class LyingRules:
    """角色可以说的谎和不能说的谎"""
    allowed: Tuple[str, ...] = ()
    forbidden: Tuple[str, ...] = ()


@dataclass(frozen=True)
class UnlockRule:
    """告诉角色在什么情况下输出解锁指令"""
    flag: str
    when: str


@dataclass(frozen=True)
class Character:
    """角色配置（从场景文件加载）"""
    id: str
    name: str
    role: str = ""

    # 人设
    world_view: str = ""
    personality: Tuple[str, ...] = ()
    background: str = ""
    secrets: Tuple[str, ...] = ()
    lying_rules: LyingRules = field(default_factory=LyingRules)
    language_style: Tuple[str, ...] = ()
    timeline: Tuple[TimelineEntry, ...] = ()

    # 对话
    system_prompt: str = ""
    greeting: str = DEFAULT_GREETING
    unlock_rules: Tuple[UnlockRule, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Character:
        """从字典创建 Character"""
        directives = data.get("prompt_directives", {}) or {}

        lying = data.get("lying_rules", directives.get("lying_rules", {})) or {}
        style = data.get("language_style", directives.get("language_style", []))
        world_view = data.get("world_view", directives.get("world_view", ""))

        timeline = []
        for entry in data.get("timeline", []) or []:
            if isinstance(entry, dict):
                timeline.append(TimelineEntry(
                    time=str(entry.get("time", "")),
                    action=str(entry.get("action", "")),
                ))

        unlock_rules = []
        for rule in data.get("unlock_rules", []) or []:
            if isinstance(rule, dict) and rule.get("flag"):
                unlock_rules.append(UnlockRule(
                    flag=str(rule["flag"]),
                    when=str(rule.get("when", "")),
                ))

        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            role=str(data.get("role", "")),
            world_view=str(world_view or ""),
            personality=_as_tuple(data.get("personality")),
            background=str(data.get("background", "") or ""),
            secrets=_as_tuple(data.get("secrets")),
            lying_rules=LyingRules(
                allowed=_as_tuple(lying.get("allowed")),
                forbidden=_as_tuple(lying.get("forbidden")),
            ),
            language_style=_as_tuple(style),
            timeline=tuple(timeline),
            system_prompt=str(data.get("system_prompt", "") or ""),
            greeting=str(data.get("greeting") or DEFAULT_GREETING),
            unlock_rules=tuple(unlock_rules),
        )

    def to_dict(self) -> Dict[str, Any]:
        """玩家可见的公开信息"""
        return {"id": self.id, "name": self.name, "role": self.role}


def _as_tuple(value: Optional[Any]) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value else ()
    if isinstance(value, list):
        return tuple(str(item) for item in value)
    return ()

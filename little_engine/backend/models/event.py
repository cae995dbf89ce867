"""Unlock events and reply directives."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class DirectiveKind(str, Enum):
    """回复中可嵌入的指令类型"""
    FLAG_UNLOCK = "flag_unlock"


@dataclass(frozen=True)
class Directive:
    kind: DirectiveKind
    name: str


class UnlockKind(str, Enum):
    """被解锁的对象类型"""
    FLAG = "flag"
    EVIDENCE = "evidence"
    TIME_CLUE = "time_clue"


class UnlockCause(str, Enum):
    """解锁原因，每个对象只记录第一次"""
    START = "start"
    DIRECTIVE = "directive"
    FLAG = "flag"
    KEYWORD = "keyword"
    TIME = "time"


@dataclass(frozen=True)
class UnlockEvent:
    kind: UnlockKind
    item_id: str
    cause: UnlockCause

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "item_id": self.item_id,
            "cause": self.cause.value,
        }

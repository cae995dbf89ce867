"""Scenario aggregate: the immutable description of one case."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from .character import Character
from .clue import Evidence, TimeClue


@dataclass(frozen=True)
class Case:
    """案件概要"""
    title: str
    outline: str
    culprit: str
    truth: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Case:
        return cls(
            title=str(data.get("title", "")),
            outline=str(data.get("outline", "")),
            culprit=str(data.get("culprit", "")),
            truth=str(data.get("truth", "")),
        )

    def to_dict(self) -> Dict[str, Any]:
        # culprit / truth 不对玩家公开
        return {"title": self.title, "outline": self.outline}


@dataclass(frozen=True)
class Scenario:
    """完整场景，加载后只读"""
    case: Case
    characters: Tuple[Character, ...]
    evidences: Tuple[Evidence, ...]
    time_clues: Tuple[TimeClue, ...] = ()
    keyword_triggers: Mapping[str, FrozenSet[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Scenario:
        """从已解析（角色文件已展开）的字典创建 Scenario"""
        characters = tuple(Character.from_dict(c) for c in data.get("characters", []) or [])
        evidences = tuple(Evidence.from_dict(e) for e in data.get("evidences", []) or [])
        time_clues = tuple(
            TimeClue.from_dict(c, index)
            for index, c in enumerate(data.get("time_clues", []) or [])
        )
        return cls(
            case=Case.from_dict(data.get("case", {}) or {}),
            characters=characters,
            evidences=evidences,
            time_clues=time_clues,
            keyword_triggers=build_keyword_triggers(evidences, data.get("keyword_triggers")),
        )

    def get_character(self, character_id: str) -> Optional[Character]:
        for character in self.characters:
            if character.id == character_id:
                return character
        return None

    def get_evidence(self, evidence_id: str) -> Optional[Evidence]:
        for evidence in self.evidences:
            if evidence.id == evidence_id:
                return evidence
        return None

    def get_time_clue(self, clue_id: str) -> Optional[TimeClue]:
        for clue in self.time_clues:
            if clue.id == clue_id:
                return clue
        return None

    @property
    def evidence_ids(self) -> FrozenSet[str]:
        return frozenset(e.id for e in self.evidences)

    @property
    def time_clue_ids(self) -> FrozenSet[str]:
        return frozenset(c.id for c in self.time_clues)


def build_keyword_triggers(
    evidences: Tuple[Evidence, ...],
    extra: Optional[Mapping[str, Any]] = None,
) -> Dict[str, FrozenSet[str]]:
    """合并证据自带的 keywords 与顶层 keyword_triggers，忽略未知证据 ID"""
    known = {e.id for e in evidences}
    table: Dict[str, set] = {e.id: set(e.keywords) for e in evidences if e.keywords}

    for evidence_id, words in (extra or {}).items():
        if evidence_id not in known:
            continue
        if isinstance(words, str):
            words = [words]
        table.setdefault(evidence_id, set()).update(str(w) for w in words or [] if w)

    return {evidence_id: frozenset(words) for evidence_id, words in table.items() if words}

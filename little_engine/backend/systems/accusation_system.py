"""Accusation system: the final verdict."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..exceptions import SuspectNotFoundError
from ..models import Character, Scenario


@dataclass(frozen=True)
class Verdict:
    correct: bool
    suspect_id: str
    suspect_name: str
    message: str
    truth: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correct": self.correct,
            "suspect_id": self.suspect_id,
            "suspect_name": self.suspect_name,
            "message": self.message,
            "truth": self.truth,
        }


class AccusationSystem:
    """指认系统 - 只读比较，不修改游戏状态，可以多次指认"""

    def __init__(self, scenario: Scenario):
        self.scenario = scenario

    def resolve_suspect(self, query: str) -> Character:
        """按 ID、名字、名字/身份包含关系依次匹配"""
        needle = (query or "").strip()
        if not needle:
            raise SuspectNotFoundError(query or "")

        character = self.scenario.get_character(needle)
        if character:
            return character

        folded = needle.casefold()
        for character in self.scenario.characters:
            if character.name.casefold() == folded:
                return character

        for character in self.scenario.characters:
            name = character.name.casefold()
            role = character.role.casefold()
            if (name and (folded in name or name in folded)) or (role and folded in role):
                return character

        raise SuspectNotFoundError(needle)

    def accuse(self, query: str) -> Verdict:
        suspect = self.resolve_suspect(query)
        case = self.scenario.case
        if suspect.id == case.culprit:
            return Verdict(
                correct=True,
                suspect_id=suspect.id,
                suspect_name=suspect.name,
                message=f"Correct! The culprit was {suspect.name}.",
                truth=case.truth,
            )
        return Verdict(
            correct=False,
            suspect_id=suspect.id,
            suspect_name=suspect.name,
            message=f"Wrong! {suspect.name} is not the culprit.",
        )

"""Unlock system: decides when evidence and time clues become visible."""

from __future__ import annotations

import logging
from typing import Iterable, List, TYPE_CHECKING

from ..models import (
    Directive,
    DirectiveKind,
    Evidence,
    Scenario,
    TimeClue,
    UnlockCause,
    UnlockEvent,
    UnlockKind,
)

if TYPE_CHECKING:
    from ..models import GameState

logger = logging.getLogger(__name__)


class UnlockSystem:
    """解锁系统 - flag、关键词、时间三种触发方式

    所有操作都是幂等的：条件已满足的对象不会再产生事件。
    """

    def __init__(self, scenario: Scenario):
        self.scenario = scenario

    # ------------------------------------------------------------ visibility
    def is_evidence_visible(self, evidence: Evidence, game_state: GameState) -> bool:
        """证据可见：开局即有，或 flag 已设置，或已被解锁"""
        return (
            evidence.available_from_start
            or game_state.has_flag(evidence.unlock_condition)
            or evidence.id in game_state.unlocked_evidence
        )

    def visible_evidence(self, game_state: GameState) -> List[Evidence]:
        return [e for e in self.scenario.evidences if self.is_evidence_visible(e, game_state)]

    def unlocked_time_clues(self, game_state: GameState) -> List[TimeClue]:
        return [c for c in self.scenario.time_clues if c.id in game_state.unlocked_clues]

    # -------------------------------------------------------------- triggers
    def apply_directives(self, game_state: GameState, directives: Iterable[Directive]) -> List[UnlockEvent]:
        """处理回复中的 [UNLOCK:flag] 指令"""
        events: List[UnlockEvent] = []
        for directive in directives:
            if directive.kind != DirectiveKind.FLAG_UNLOCK:
                continue
            if game_state.set_flag(directive.name):
                logger.info("Flag set by reply directive: %s", directive.name)
                events.append(UnlockEvent(UnlockKind.FLAG, directive.name, UnlockCause.DIRECTIVE))
        if events:
            events.extend(self.refresh_evidence(game_state))
        return events

    def apply_keywords(self, game_state: GameState, *texts: str) -> List[UnlockEvent]:
        """玩家消息或角色回复中出现触发词时解锁对应证据"""
        haystack = "\n".join(t for t in texts if t).casefold()
        if not haystack:
            return []

        events: List[UnlockEvent] = []
        for evidence in self.scenario.evidences:
            if evidence.id in game_state.unlocked_evidence:
                continue
            words = self.scenario.keyword_triggers.get(evidence.id, ())
            if any(word.casefold() in haystack for word in words):
                events.append(self._unlock_evidence(game_state, evidence, UnlockCause.KEYWORD))
        return events

    def apply_time(self, game_state: GameState, now_ms: int) -> List[UnlockEvent]:
        """经过时间达到 unlock_minutes 的线索解锁"""
        elapsed = game_state.elapsed_ms(now_ms)
        events: List[UnlockEvent] = []
        for clue in self.scenario.time_clues:
            if clue.id in game_state.unlocked_clues:
                continue
            if elapsed >= clue.unlock_ms:
                game_state.unlocked_clues.add(clue.id)
                logger.info("Time clue unlocked: %s (%s)", clue.id, clue.title)
                events.append(UnlockEvent(UnlockKind.TIME_CLUE, clue.id, UnlockCause.TIME))
        return events

    def refresh_evidence(self, game_state: GameState) -> List[UnlockEvent]:
        """把条件已满足但尚未记录的证据写入 unlocked_evidence"""
        events: List[UnlockEvent] = []
        for evidence in self.scenario.evidences:
            if evidence.id in game_state.unlocked_evidence:
                continue
            if evidence.available_from_start:
                events.append(self._unlock_evidence(game_state, evidence, UnlockCause.START))
            elif game_state.has_flag(evidence.unlock_condition):
                events.append(self._unlock_evidence(game_state, evidence, UnlockCause.FLAG))
        return events

    def evaluate(self, game_state: GameState, now_ms: int) -> List[UnlockEvent]:
        """重新检查所有无需新输入的条件"""
        events = self.refresh_evidence(game_state)
        events.extend(self.apply_time(game_state, now_ms))
        return events

    # --------------------------------------------------------------- helpers
    def sanitize(self, game_state: GameState) -> None:
        """去掉场景中已不存在的证据和线索 ID"""
        unknown_evidence = game_state.unlocked_evidence - self.scenario.evidence_ids
        unknown_clues = game_state.unlocked_clues - self.scenario.time_clue_ids
        if unknown_evidence or unknown_clues:
            logger.warning(
                "Dropping unlocked ids not in scenario: evidence=%s clues=%s",
                sorted(unknown_evidence), sorted(unknown_clues),
            )
            game_state.unlocked_evidence -= unknown_evidence
            game_state.unlocked_clues -= unknown_clues

    def _unlock_evidence(self, game_state: GameState, evidence: Evidence, cause: UnlockCause) -> UnlockEvent:
        game_state.unlocked_evidence.add(evidence.id)
        logger.info("Evidence unlocked by %s: %s (%s)", cause.value, evidence.id, evidence.name)
        return UnlockEvent(UnlockKind.EVIDENCE, evidence.id, cause)

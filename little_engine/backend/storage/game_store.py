"""Save, load and reset of GameState against a key-value storage."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Set

from ..models import ConversationTurn, GameState
from .backends import KeyValueStorage

logger = logging.getLogger(__name__)

SAVE_KEY = "little_engine_save"
START_TIME_KEY = "little_engine_start_time"


class GameStore:
    """Serializes GameState to a single JSON blob plus the raw start timestamp."""

    def __init__(self, storage: KeyValueStorage, clock: Callable[[], int]):
        self.storage = storage
        self.clock = clock

    # ------------------------------------------------------------------ save
    def save(self, state: GameState) -> None:
        blob = {
            "start_time": state.start_time,
            "history": {
                character_id: [turn.to_dict() for turn in turns]
                for character_id, turns in state.history.items()
            },
            "flags": sorted(state.flags),
            "unlocked_evidence": sorted(state.unlocked_evidence),
            "unlocked_clues": sorted(state.unlocked_clues),
        }
        self.storage.set(SAVE_KEY, json.dumps(blob, ensure_ascii=False))
        self.storage.set(START_TIME_KEY, str(state.start_time))
        logger.debug("Game state saved (%d flags, %d evidences, %d clues)",
                     len(state.flags), len(state.unlocked_evidence), len(state.unlocked_clues))

    # ------------------------------------------------------------------ load
    def load(self) -> Optional[GameState]:
        """Restore GameState, or None if nothing was ever saved.

        Each field is decoded on its own. A corrupt field falls back to an
        empty collection and the others are still restored.
        """
        raw_blob = self.storage.get(SAVE_KEY)
        raw_start = self.storage.get(START_TIME_KEY)
        if raw_blob is None and raw_start is None:
            return None

        blob = self._decode_blob(raw_blob)
        start_time = self._decode_start_time(blob.get("start_time"))
        if start_time is None:
            start_time = self._decode_start_time(raw_start)
        if start_time is None:
            logger.warning("Saved start time is unrecoverable, countdown restarts now")
            start_time = self.clock()

        return GameState(
            start_time=start_time,
            history=self._field(blob, "history", _decode_history, dict),
            flags=self._field(blob, "flags", _decode_id_set, set),
            unlocked_evidence=self._field(blob, "unlocked_evidence", _decode_id_set, set),
            unlocked_clues=self._field(blob, "unlocked_clues", _decode_id_set, set),
        )

    # ----------------------------------------------------------------- reset
    def reset(self) -> None:
        self.storage.delete(SAVE_KEY)
        self.storage.delete(START_TIME_KEY)
        logger.info("Saved game erased")

    # --------------------------------------------------------------- helpers
    def _decode_blob(self, raw: Optional[str]) -> Dict[str, Any]:
        if raw is None:
            return {}
        try:
            blob = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Saved game is not valid JSON, ignoring it: %s", e)
            return {}
        if not isinstance(blob, dict):
            logger.warning("Saved game has unexpected shape %s, ignoring it", type(blob).__name__)
            return {}
        return blob

    @staticmethod
    def _decode_start_time(value: Any) -> Optional[int]:
        if value is None or isinstance(value, bool):
            return None
        try:
            start = int(value)
        except (TypeError, ValueError):
            return None
        return start if start >= 0 else None

    @staticmethod
    def _field(blob: Dict[str, Any], name: str, decode: Callable[[Any], Any], default: Callable[[], Any]) -> Any:
        if name not in blob:
            return default()
        try:
            return decode(blob[name])
        except (TypeError, ValueError, KeyError, AttributeError) as e:
            logger.warning("Saved field %r is corrupt, starting it empty: %s", name, e)
            return default()


def _decode_history(value: Any) -> Dict[str, List[ConversationTurn]]:
    if not isinstance(value, dict):
        raise TypeError("history must be an object")
    history: Dict[str, List[ConversationTurn]] = {}
    for character_id, turns in value.items():
        try:
            if not isinstance(turns, list):
                raise TypeError("expected a list of turns")
            history[str(character_id)] = [ConversationTurn.from_dict(turn) for turn in turns]
        except (TypeError, ValueError, KeyError, AttributeError) as e:
            logger.warning("Saved history for %r is corrupt, dropping it: %s", character_id, e)
    return history


def _decode_id_set(value: Any) -> Set[str]:
    # 旧版存档里 flags 是 {name: true}
    if isinstance(value, dict):
        return {str(key) for key, enabled in value.items() if enabled}
    if not isinstance(value, list):
        raise TypeError("expected a list of ids")
    return {str(item) for item in value}

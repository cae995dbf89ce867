"""Shared fixtures for the mystery game tests."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Sequence

import pytest

from little_engine.backend.ai import LLMClient
from little_engine.backend.exceptions import ChatError
from little_engine.backend.game_manager import GameManager
from little_engine.backend.models import ConversationTurn, Scenario
from little_engine.backend.storage import GameStore, MemoryStorage

T0 = 1_700_000_000_000

SCENARIO_DATA: Dict[str, Any] = {
    "case": {
        "title": "The Missing Heir",
        "outline": "The heir vanished from the manor overnight.",
        "culprit": "butler",
        "truth": "The butler hid the heir in the wine cellar.",
    },
    "characters": [
        {
            "id": "butler",
            "name": "James Pike",
            "role": "Butler",
            "personality": ["formal", "loyal"],
            "secrets": ["He knows the cellar key is missing."],
            "lying_rules": {"allowed": ["his whereabouts"], "forbidden": ["his name"]},
            "language_style": ["very formal"],
            "timeline": [{"time": "22:00", "action": "Locked the cellar."}],
            "unlock_rules": [{"flag": "cellar_open", "when": "asked about the cellar"}],
        },
        {
            "id": "cook",
            "name": "Agnes Bell",
            "role": "Cook",
            "personality": ["chatty"],
            "greeting": "Mind the soup, dear.",
        },
    ],
    "evidences": [
        {"id": "note", "name": "Ransom note", "description": "A note demanding money.", "unlock_condition": "start"},
        {"id": "cellar_key", "name": "Cellar key", "description": "The key is gone.", "unlock_condition": "cellar_open"},
        {
            "id": "footprints",
            "name": "Muddy footprints",
            "description": "Footprints lead to the garden.",
            "unlock_condition": "garden_seen",
            "keywords": ["garden"],
        },
    ],
    "time_clues": [
        {"id": "letter", "title": "A letter arrives", "content": "The heir owed money.", "unlock_minutes": 5},
        {"id": "police", "title": "Police report", "content": "No sign of forced entry.", "unlock_minutes": 10},
    ],
    "keyword_triggers": {"cellar_key": ["wine rack"]},
}


class FakeClock:
    def __init__(self, now: int = T0):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class ScriptedLLMClient(LLMClient):
    """Returns queued replies in order and records every call."""

    def __init__(self, replies: Optional[List[Any]] = None):
        self.replies = list(replies or [])
        self.calls: List[Dict[str, Any]] = []

    async def chat(self, system_prompt: str, message: str, history: Sequence[ConversationTurn], **params: Any) -> str:
        self.calls.append({"system_prompt": system_prompt, "message": message, "history": list(history)})
        reply = self.replies.pop(0) if self.replies else "..."
        if isinstance(reply, Exception):
            raise reply
        return reply


class FailingLLMClient(LLMClient):
    async def chat(self, system_prompt: str, message: str, history: Sequence[ConversationTurn], **params: Any) -> str:
        raise ChatError("connection refused")


def run(coro):
    return asyncio.run(coro)


@pytest.fixture()
def scenario() -> Scenario:
    return Scenario.from_dict(SCENARIO_DATA)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def store(storage, clock) -> GameStore:
    return GameStore(storage, clock)


@pytest.fixture()
def llm() -> ScriptedLLMClient:
    return ScriptedLLMClient()


@pytest.fixture()
def manager(scenario, store, llm, clock) -> GameManager:
    return GameManager(scenario, store, llm, clock=clock)

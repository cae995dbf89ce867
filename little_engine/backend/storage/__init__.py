"""Persistence for the mystery game."""

from .backends import JsonFileStorage, KeyValueStorage, MemoryStorage
from .game_store import GameStore, SAVE_KEY, START_TIME_KEY

__all__ = [
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "GameStore",
    "SAVE_KEY",
    "START_TIME_KEY",
]

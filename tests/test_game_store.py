import json

from little_engine.backend.models import GameState, TurnRole
from little_engine.backend.storage import (
    GameStore,
    JsonFileStorage,
    MemoryStorage,
    SAVE_KEY,
    START_TIME_KEY,
)

from conftest import T0, FakeClock


def sample_state():
    state = GameState(start_time=T0)
    state.add_turn("butler", TurnRole.CHARACTER, "Good evening.")
    state.add_turn("butler", TurnRole.PLAYER, "Where were you?")
    state.add_turn("cook", TurnRole.CHARACTER, "Mind the soup, dear.")
    state.flags.update({"cellar_open", "b_flag"})
    state.unlocked_evidence.update({"note", "cellar_key"})
    state.unlocked_clues.add("letter")
    return state


def test_load_without_save_returns_none(store):
    assert store.load() is None


def test_round_trip_preserves_everything(store):
    state = sample_state()
    store.save(state)
    assert store.load() == state


def test_round_trip_through_files(tmp_path):
    store = GameStore(JsonFileStorage(tmp_path / "saves"), FakeClock())
    state = sample_state()
    store.save(state)

    reopened = GameStore(JsonFileStorage(tmp_path / "saves"), FakeClock(T0 + 999_999))
    assert reopened.load() == state
    assert (tmp_path / "saves" / f"{SAVE_KEY}.json").exists()


def test_save_overwrites_previous_value(store, storage):
    state = sample_state()
    store.save(state)
    state.flags.add("later")
    store.save(state)
    assert "later" in json.loads(storage.get(SAVE_KEY))["flags"]


def test_reset_erases_both_keys(store, storage):
    store.save(sample_state())
    store.reset()
    assert storage.get(SAVE_KEY) is None
    assert storage.get(START_TIME_KEY) is None
    assert store.load() is None


def test_corrupt_history_does_not_block_evidence(storage, clock):
    blob = {
        "start_time": T0,
        "history": {"butler": [{"role": "nonsense", "text": "x"}]},
        "flags": ["cellar_open"],
        "unlocked_evidence": ["note", "cellar_key"],
        "unlocked_clues": ["letter"],
    }
    storage.set(SAVE_KEY, json.dumps(blob))

    state = GameStore(storage, clock).load()

    assert state.history == {}
    assert state.flags == {"cellar_open"}
    assert state.unlocked_evidence == {"note", "cellar_key"}
    assert state.unlocked_clues == {"letter"}


def test_corrupt_history_for_one_character_keeps_the_others(storage, clock):
    blob = {
        "start_time": T0,
        "history": {
            "butler": [{"role": "character", "text": "Good evening."}],
            "cook": [{"role": "character"}],
            "maid": "not a list",
        },
    }
    storage.set(SAVE_KEY, json.dumps(blob))

    state = GameStore(storage, clock).load()

    assert list(state.history) == ["butler"]
    assert [t.text for t in state.history["butler"]] == ["Good evening."]


def test_corrupt_evidence_does_not_block_history(storage, clock):
    blob = {
        "start_time": T0,
        "history": {"cook": [{"role": "character", "text": "Hello"}]},
        "unlocked_evidence": 42,
    }
    storage.set(SAVE_KEY, json.dumps(blob))

    state = GameStore(storage, clock).load()

    assert [t.text for t in state.history["cook"]] == ["Hello"]
    assert state.unlocked_evidence == set()
    assert state.flags == set()


def test_unreadable_blob_falls_back_to_start_time_key(storage, clock):
    storage.set(SAVE_KEY, "{not json")
    storage.set(START_TIME_KEY, str(T0 - 5000))

    state = GameStore(storage, clock).load()

    assert state.start_time == T0 - 5000
    assert state.history == {}


def test_start_time_only_save_is_restored(storage, clock):
    storage.set(START_TIME_KEY, str(T0 - 1))
    state = GameStore(storage, clock).load()
    assert state.start_time == T0 - 1


def test_unrecoverable_start_time_uses_clock(storage, clock):
    storage.set(SAVE_KEY, json.dumps({"start_time": "soon", "flags": ["x"]}))
    state = GameStore(storage, clock).load()
    assert state.start_time == clock.now
    assert state.flags == {"x"}


def test_legacy_flag_mapping_and_roles_are_understood(storage, clock):
    blob = {
        "start_time": T0,
        "history": {"butler": [{"role": "user", "text": "Hi"}, {"role": "model", "text": "Sir."}]},
        "flags": {"cellar_open": True, "unused": False},
    }
    storage.set(SAVE_KEY, json.dumps(blob))

    state = GameStore(storage, clock).load()

    assert [t.role for t in state.history["butler"]] == [TurnRole.PLAYER, TurnRole.CHARACTER]
    assert state.flags == {"cellar_open"}


def test_memory_storage_delete_missing_key_is_noop():
    storage = MemoryStorage()
    storage.delete("nothing")
    assert storage.get("nothing") is None

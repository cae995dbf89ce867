from little_engine.backend.models import (
    Directive,
    DirectiveKind,
    GameState,
    UnlockCause,
    UnlockKind,
)
from little_engine.backend.systems import UnlockSystem

from conftest import T0

MINUTE = 60 * 1000


def flag(name):
    return Directive(kind=DirectiveKind.FLAG_UNLOCK, name=name)


def visible_ids(unlock, state):
    return [e.id for e in unlock.visible_evidence(state)]


def test_start_evidence_visible_before_any_conversation(scenario):
    state = GameState.new(scenario, T0)
    unlock = UnlockSystem(scenario)
    assert visible_ids(unlock, state) == ["note"]
    assert state.unlocked_evidence == {"note"}


def test_flag_directive_unlocks_evidence(scenario):
    state = GameState.new(scenario, T0)
    unlock = UnlockSystem(scenario)

    events = unlock.apply_directives(state, [flag("cellar_open")])

    assert state.flags == {"cellar_open"}
    assert (UnlockKind.FLAG, "cellar_open", UnlockCause.DIRECTIVE) in [(e.kind, e.item_id, e.cause) for e in events]
    assert (UnlockKind.EVIDENCE, "cellar_key", UnlockCause.FLAG) in [(e.kind, e.item_id, e.cause) for e in events]
    assert "cellar_key" in visible_ids(unlock, state)


def test_flag_set_exactly_once_across_replies(scenario):
    state = GameState.new(scenario, T0)
    unlock = UnlockSystem(scenario)

    first = unlock.apply_directives(state, [flag("cellar_open"), flag("cellar_open")])
    second = unlock.apply_directives(state, [flag("cellar_open")])

    assert len([e for e in first if e.kind == UnlockKind.FLAG]) == 1
    assert second == []
    assert state.flags == {"cellar_open"}


def test_unknown_flag_is_recorded_without_unlocking_evidence(scenario):
    state = GameState.new(scenario, T0)
    unlock = UnlockSystem(scenario)
    events = unlock.apply_directives(state, [flag("mystery_flag")])
    assert [e.kind for e in events] == [UnlockKind.FLAG]
    assert state.unlocked_evidence == {"note"}


def test_keyword_in_player_message_unlocks_evidence(scenario):
    state = GameState.new(scenario, T0)
    unlock = UnlockSystem(scenario)

    events = unlock.apply_keywords(state, "Did anyone go into the GARDEN?", "No.")

    assert [(e.item_id, e.cause) for e in events] == [("footprints", UnlockCause.KEYWORD)]
    assert "footprints" in visible_ids(unlock, state)


def test_top_level_keyword_triggers_are_used(scenario):
    state = GameState.new(scenario, T0)
    unlock = UnlockSystem(scenario)
    events = unlock.apply_keywords(state, "", "I saw him near the wine rack.")
    assert [e.item_id for e in events] == ["cellar_key"]


def test_first_trigger_wins(scenario):
    state = GameState.new(scenario, T0)
    unlock = UnlockSystem(scenario)

    keyword_events = unlock.apply_keywords(state, "wine rack")
    flag_events = unlock.apply_directives(state, [flag("cellar_open")])

    assert [(e.item_id, e.cause) for e in keyword_events] == [("cellar_key", UnlockCause.KEYWORD)]
    assert all(e.kind != UnlockKind.EVIDENCE for e in flag_events)


def test_time_clue_locked_before_delay(scenario):
    state = GameState.new(scenario, T0)
    unlock = UnlockSystem(scenario)
    assert unlock.apply_time(state, T0 + 4 * MINUTE + 59 * 1000) == []
    assert state.unlocked_clues == set()


def test_time_clue_unlocks_at_delay(scenario):
    state = GameState.new(scenario, T0)
    unlock = UnlockSystem(scenario)

    events = unlock.apply_time(state, T0 + 5 * MINUTE)

    assert [(e.kind, e.item_id, e.cause) for e in events] == [(UnlockKind.TIME_CLUE, "letter", UnlockCause.TIME)]
    assert [c.id for c in unlock.unlocked_time_clues(state)] == ["letter"]


def test_time_clues_stay_unlocked_even_if_clock_goes_back(scenario):
    state = GameState.new(scenario, T0)
    unlock = UnlockSystem(scenario)
    unlock.apply_time(state, T0 + 11 * MINUTE)
    assert unlock.apply_time(state, T0) == []
    assert state.unlocked_clues == {"letter", "police"}


def test_evaluate_is_idempotent(scenario):
    state = GameState.new(scenario, T0)
    state.flags.add("cellar_open")
    unlock = UnlockSystem(scenario)

    first = unlock.evaluate(state, T0 + 6 * MINUTE)
    snapshot = (set(state.flags), set(state.unlocked_evidence), set(state.unlocked_clues))
    second = unlock.evaluate(state, T0 + 6 * MINUTE)

    assert {e.item_id for e in first} == {"cellar_key", "letter"}
    assert second == []
    assert (state.flags, state.unlocked_evidence, state.unlocked_clues) == snapshot


def test_sanitize_drops_ids_missing_from_scenario(scenario):
    state = GameState(start_time=T0, unlocked_evidence={"note", "gone"}, unlocked_clues={"letter", "old"})
    UnlockSystem(scenario).sanitize(state)
    assert state.unlocked_evidence == {"note"}
    assert state.unlocked_clues == {"letter"}

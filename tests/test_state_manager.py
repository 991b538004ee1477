import pytest

from pipeline.game_state import GameState, GameStateType, KillerIdentity, StartTrigger, sanitize
from pipeline.state_manager import GAME_STATE_EVENT
from config.killers import DETECTABLE_KILLERS
from core.settings_store import FeatureToggles

BLIGHT = DETECTABLE_KILLERS[0]


@pytest.fixture
def shelter_woods(catalog):
    return catalog.make_map_by_name("Shelter Woods")


@pytest.fixture
def emitted(state_manager):
    events = []
    state_manager.bus.on(GAME_STATE_EVENT, events.append)
    return events


def test_sanitize_is_pure(shelter_woods):
    candidate = GameState(GameStateType.MATCH, map=shelter_woods, killer=BLIGHT)

    assert sanitize(candidate, FeatureToggles(smart_features_enabled=False)) == GameState(GameStateType.UNKNOWN)
    assert sanitize(candidate, FeatureToggles(True, map_detection_enabled=False)).map is None
    assert sanitize(candidate, FeatureToggles(True, killer_detection_enabled=False)).killer is None
    assert sanitize(candidate, FeatureToggles(True)) == candidate
    assert candidate.map is shelter_woods


def test_push_emits_only_on_change(state_manager, emitted, shelter_woods, clock):
    match = GameState(GameStateType.MATCH, map=shelter_woods)

    clock.advance(2)
    assert state_manager.push(match) is True
    assert state_manager.last_change_time == clock.now

    clock.advance(2)
    assert state_manager.push(GameState(GameStateType.MATCH, map=shelter_woods)) is False
    assert state_manager.last_change_time == clock.now - 2
    assert emitted == [match]


def test_leaving_match_clears_map(state_manager, shelter_woods):
    state_manager.push(GameState(GameStateType.MATCH, map=shelter_woods))
    state_manager.push(GameState(GameStateType.MENU))
    assert state_manager.current_state == GameState(GameStateType.MENU)


def test_non_match_states_carry_the_last_map(state_manager, emitted, shelter_woods):
    state_manager.push(GameState(GameStateType.MENU, map=shelter_woods))

    assert state_manager.push(GameState(GameStateType.LOADING)) is True
    assert state_manager.current_state.map == shelter_woods

    # carried-over candidate equals the current state
    assert state_manager.push(GameState(GameStateType.LOADING)) is False
    assert len(emitted) == 2


def test_smart_features_off_forces_unknown(state_manager, settings_store, emitted, shelter_woods):
    state_manager.push(GameState(GameStateType.MATCH, map=shelter_woods))

    settings_store.update(smart_features_enabled=False)

    assert state_manager.current_state == GameState(GameStateType.UNKNOWN)
    assert emitted[-1] == GameState(GameStateType.UNKNOWN)
    assert state_manager.push(GameState(GameStateType.MENU)) is False


def test_disabling_map_detection_reapplies_to_current_state(state_manager, settings_store, shelter_woods):
    state_manager.push(GameState(GameStateType.MATCH, map=shelter_woods, killer=BLIGHT))

    settings_store.update(map_detection_enabled=False)
    assert state_manager.current_state == GameState(GameStateType.MATCH, killer=BLIGHT)

    settings_store.update(killer_detection_enabled=False)
    assert state_manager.current_state == GameState(GameStateType.MATCH)


def test_close_stops_following_settings(state_manager, settings_store, shelter_woods):
    state_manager.push(GameState(GameStateType.MATCH, map=shelter_woods))
    state_manager.close()

    settings_store.update(map_detection_enabled=False)
    assert state_manager.current_state.map == shelter_woods


def test_killer_identity_equality():
    a = KillerIdentity("BLIGHT", StartTrigger(m2=True, label="RUSH (M2)"), ("RUSH",))
    assert a == BLIGHT

"""Tests for save/load through the persistence gateway."""

import json
import logging

import pytest

from droodle.engine.player_state import PlayerState, default_state
from droodle.engine.save import (
    PLAYER_KEY,
    JsonFileStore,
    MemoryStore,
    PersistenceGateway,
    PersistenceReadError,
    decode_state,
    encode_state,
)


class FailingStore(MemoryStore):
    """Refuses the first ``failures`` writes."""

    def __init__(self, failures: int = 10 ** 9) -> None:
        super().__init__()
        self.failures = failures
        self.attempts = 0

    def set(self, key: str, value: str) -> None:
        self.attempts += 1
        if self.failures > 0:
            self.failures -= 1
            raise OSError("disk full")
        super().set(key, value)


def _big_state() -> PlayerState:
    state = PlayerState(
        currency=2 ** 100 + 7,
        click_strength=10 ** 25,
        generator_owned=[3, 2 ** 70, 0],
        generator_base_price=[100, 10 ** 30, 5],
        generator_income_value=[1, 2 ** 65, 9],
    )
    state.income_rate = state.expected_income_rate()
    return state


# ── Round trip ───────────────────────────────────────────────────────────────

def test_round_trip_memory_store_beyond_64_bits():
    gateway = PersistenceGateway(MemoryStore())
    state = _big_state()

    assert gateway.save(state)
    loaded = gateway.load()

    assert loaded == state
    assert loaded is not state


def test_round_trip_json_file_store(tmp_path):
    gateway = PersistenceGateway(JsonFileStore(tmp_path / "saves"))
    state = _big_state()

    assert gateway.save(state)

    path = tmp_path / "saves" / f"{PLAYER_KEY}.json"
    assert path.exists()
    assert json.loads(path.read_text())["currency"] == 2 ** 100 + 7
    assert not path.with_suffix(".json.tmp").exists()
    assert gateway.load() == state


def test_encoded_record_uses_plain_integers():
    data = json.loads(encode_state(_big_state()))
    assert set(data) == {
        "currency", "income_rate", "click_strength",
        "generator_owned", "generator_base_price", "generator_income_value",
    }
    assert all(isinstance(v, int) for v in data["generator_owned"])


def test_round_trip_integers_too_long_for_decimal_text(tmp_path):
    gateway = PersistenceGateway(JsonFileStore(tmp_path))
    state = default_state()
    state.currency = 10 ** 5000 + 3
    state.generator_owned[0] = 7 ** 6000
    state.income_rate = state.expected_income_rate()
    assert gateway.save(state) is True

    data = json.loads((tmp_path / f"{PLAYER_KEY}.json").read_text())
    assert data["currency"].startswith("0x")
    assert data["click_strength"] == state.click_strength
    assert gateway.load() == state
    assert gateway.load_or_init() == state


def test_malformed_hex_field_is_corrupt():
    with pytest.raises(PersistenceReadError):
        decode_state(_record(currency="0xnot-hex"))


def test_load_missing_returns_none(tmp_path):
    assert PersistenceGateway(JsonFileStore(tmp_path)).load() is None
    assert PersistenceGateway(MemoryStore()).load() is None


# ── Corrupt records ──────────────────────────────────────────────────────────

def _record(**overrides) -> str:
    data = json.loads(encode_state(default_state()))
    data.update(overrides)
    return json.dumps(data)


@pytest.mark.parametrize(
    "text",
    [
        "{not json",
        "[]",
        json.dumps({"currency": 5}),
        _record(currency=-1),
        _record(currency=1.5),
        _record(click_strength=True),
        _record(currency="100"),
        _record(generator_owned=[0, 0]),
        _record(generator_base_price="100"),
        _record(generator_income_value=[1, 10, -100, 1000]),
    ],
    ids=[
        "bad-json", "not-object", "missing-fields", "negative", "float",
        "bool", "string", "misaligned", "tiers-not-list", "negative-tier",
    ],
)
def test_corrupt_record_raises_read_error(text):
    with pytest.raises(PersistenceReadError):
        decode_state(text)


def test_income_mismatch_is_recomputed(caplog):
    text = _record(generator_owned=[2, 1, 0, 0], income_rate=999)
    with caplog.at_level(logging.WARNING):
        state = decode_state(text)
    assert state.income_rate == 12
    assert "income_rate" in caplog.text


# ── Startup ──────────────────────────────────────────────────────────────────

def test_load_or_init_persists_defaults_immediately():
    store = MemoryStore()
    gateway = PersistenceGateway(store)

    state = gateway.load_or_init()

    assert state == default_state()
    assert decode_state(store.get(PLAYER_KEY)) == default_state()


def test_load_or_init_replaces_corrupt_save(caplog):
    store = MemoryStore()
    store.set(PLAYER_KEY, "garbage")
    gateway = PersistenceGateway(store)

    with caplog.at_level(logging.WARNING):
        state = gateway.load_or_init()

    assert state == default_state()
    assert decode_state(store.get(PLAYER_KEY)) == default_state()
    assert "Corrupt save" in caplog.text


def test_load_or_init_replaces_undecodable_file(tmp_path, caplog):
    (tmp_path / f"{PLAYER_KEY}.json").write_bytes(b'{"currency": \xff\xfe}')
    gateway = PersistenceGateway(JsonFileStore(tmp_path))

    with caplog.at_level(logging.WARNING):
        state = gateway.load_or_init()

    assert state == default_state()
    assert gateway.load() == default_state()
    assert "Corrupt save" in caplog.text


def test_load_or_init_replaces_deeply_nested_record():
    store = MemoryStore()
    store.set(PLAYER_KEY, "[" * 100_000 + "]" * 100_000)
    gateway = PersistenceGateway(store)

    assert gateway.load_or_init() == default_state()
    assert decode_state(store.get(PLAYER_KEY)) == default_state()


def test_load_or_init_returns_saved_player():
    store = MemoryStore()
    gateway = PersistenceGateway(store)
    saved = _big_state()
    gateway.save(saved)

    assert gateway.load_or_init() == saved


def test_load_or_init_survives_failed_first_save():
    gateway = PersistenceGateway(FailingStore())
    assert gateway.load_or_init() == default_state()


# ── Writes and the save timer ────────────────────────────────────────────────

def test_failed_save_is_logged_not_raised(caplog):
    gateway = PersistenceGateway(FailingStore())
    with caplog.at_level(logging.WARNING):
        assert gateway.save(default_state()) is False
    assert "disk full" in caplog.text


def test_unencodable_record_is_logged_not_raised(caplog):
    class RejectingStore(MemoryStore):
        def set(self, key, value):
            raise ValueError("record too large")

    gateway = PersistenceGateway(RejectingStore())
    with caplog.at_level(logging.WARNING):
        assert gateway.save(default_state()) is False
    assert "record too large" in caplog.text


def test_timer_saves_once_per_interval():
    store = MemoryStore()
    gateway = PersistenceGateway(store, period=1.0)
    state = default_state()

    assert gateway.tick(state, 0.5) is False
    assert store.get(PLAYER_KEY) is None
    assert gateway.tick(state, 0.5) is True
    assert store.get(PLAYER_KEY) is not None


def test_timer_retries_after_failure_with_current_state():
    store = FailingStore(failures=1)
    gateway = PersistenceGateway(store, period=1.0)
    state = default_state()

    assert gateway.tick(state, 1.0) is False
    state.currency = 4242
    assert gateway.tick(state, 1.0) is True

    assert store.attempts == 2
    assert decode_state(store.get(PLAYER_KEY)).currency == 4242


def test_timer_coalesces_long_stall_into_one_save():
    store = FailingStore(failures=0)
    gateway = PersistenceGateway(store, period=1.0)
    gateway.tick(default_state(), 10.0)
    assert store.attempts == 1


def test_unreadable_store_raises_read_error():
    class BrokenStore(MemoryStore):
        def get(self, key):
            raise OSError("permission denied")

    with pytest.raises(PersistenceReadError):
        PersistenceGateway(BrokenStore()).load()

"""Save/load — persists the player's economy through a key/value store."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from droodle.data.balance import BALANCE
from droodle.engine.player_state import PlayerState, default_state
from droodle.engine.timers import IntervalTimer

logger = logging.getLogger(__name__)

SAVE_DIR = Path.home() / ".droodle"
PLAYER_KEY = "Player"

_INT_FIELDS = ("currency", "income_rate", "click_strength")
_TIER_FIELDS = ("generator_owned", "generator_base_price", "generator_income_value")

# Python refuses decimal int<->str conversions past 4300 digits; larger
# values are stored as "0x..." hex strings, which have no such limit.
_MAX_DECIMAL_BITS = 13_000
_HEX_PREFIX = "0x"


class PersistenceError(Exception):
    """Base class for save/load failures."""


class PersistenceReadError(PersistenceError):
    """The stored record is missing fields, malformed, or unreadable."""


class PersistenceWriteError(PersistenceError):
    """The store refused to write the record."""


# ── Stores ───────────────────────────────────────────────────────


class MemoryStore:
    """Dict-backed store for tests and headless sessions."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """One ``<key>.json`` file per key inside a directory."""

    def __init__(self, directory: Path = SAVE_DIR) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text()

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(value)
        # Readers never see a half-written save
        os.replace(tmp, path)


# ── Serialisation helpers ────────────────────────────────────────


def _encode_int(value: int) -> int | str:
    if value.bit_length() > _MAX_DECIMAL_BITS:
        return hex(value)
    return value


def _state_to_dict(state: PlayerState) -> dict:
    s = state
    return {
        "currency": _encode_int(s.currency),
        "income_rate": _encode_int(s.income_rate),
        "click_strength": _encode_int(s.click_strength),
        "generator_owned": [_encode_int(v) for v in s.generator_owned],
        "generator_base_price": [_encode_int(v) for v in s.generator_base_price],
        "generator_income_value": [_encode_int(v) for v in s.generator_income_value],
    }


def _check_int(name: str, value: object) -> int:
    if isinstance(value, str) and value.startswith(_HEX_PREFIX):
        try:
            value = int(value, 16)
        except ValueError:
            raise PersistenceReadError(f"{name} is not a hex integer: {value[:32]!r}") from None
    # bool is an int subclass; a stray true/false is still corruption
    if not isinstance(value, int) or isinstance(value, bool):
        raise PersistenceReadError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise PersistenceReadError(f"{name} must be non-negative, got {value}")
    return value


def _dict_to_state(d: dict) -> PlayerState:
    if not isinstance(d, dict):
        raise PersistenceReadError("save record is not an object")

    missing = [k for k in _INT_FIELDS + _TIER_FIELDS if k not in d]
    if missing:
        raise PersistenceReadError(f"save record missing {', '.join(missing)}")

    ints = {name: _check_int(name, d[name]) for name in _INT_FIELDS}

    tiers: dict[str, list[int]] = {}
    for name in _TIER_FIELDS:
        values = d[name]
        if not isinstance(values, list):
            raise PersistenceReadError(f"{name} must be a list")
        tiers[name] = [_check_int(f"{name}[{i}]", v) for i, v in enumerate(values)]

    if len({len(v) for v in tiers.values()}) != 1:
        raise PersistenceReadError("generator lists have different lengths")

    state = PlayerState(**ints, **tiers)

    expected = state.expected_income_rate()
    if state.income_rate != expected:
        logger.warning(
            "Saved income_rate %d disagrees with generators (%d); using generators",
            state.income_rate, expected,
        )
        state.income_rate = expected
    return state


def encode_state(state: PlayerState) -> str:
    return json.dumps(_state_to_dict(state), indent=2)


def decode_state(text: str) -> PlayerState:
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise PersistenceReadError(f"save record is not valid JSON: {exc}") from exc
    return _dict_to_state(data)


# ── Public API ───────────────────────────────────────────────────


class PersistenceGateway:
    """Loads the player at startup and snapshots it on a repeating timer."""

    def __init__(
        self,
        store=None,
        key: str = PLAYER_KEY,
        period: float = BALANCE.timers.save_period_s,
    ) -> None:
        self.store = store if store is not None else JsonFileStore()
        self.key = key
        self._timer = IntervalTimer(period)

    def load(self) -> PlayerState | None:
        """Load the saved player. Returns None if no save exists.

        Raises:
            PersistenceReadError: the record exists but can't be decoded.
        """
        try:
            text = self.store.get(self.key)
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceReadError(f"could not read save: {exc}") from exc
        if text is None:
            return None
        return decode_state(text)

    def save(self, state: PlayerState) -> bool:
        """Persist the player. Returns False (and logs) if the write failed."""
        try:
            self.store.set(self.key, encode_state(state))
        except (OSError, ValueError) as exc:
            err = PersistenceWriteError(f"could not write save: {exc}")
            logger.warning("%s; will retry on the next save interval", err)
            return False
        return True

    def load_or_init(self) -> PlayerState:
        """Startup path: the saved player, or fresh defaults saved right away."""
        try:
            state = self.load()
        except PersistenceReadError as exc:
            logger.warning("Corrupt save (%s); starting fresh", exc)
            state = None

        if state is not None:
            logger.info("Loaded saved player (%d tiers)", state.tier_count)
            return state

        state = default_state()
        self.save(state)
        return state

    def tick(self, state: PlayerState, dt: float) -> bool:
        """Advance the save timer; saves once if any interval completed.

        Returns True only when a save happened and succeeded.
        """
        if self._timer.advance(dt) == 0:
            return False
        return self.save(state)

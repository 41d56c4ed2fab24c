"""Droodle Web — Flask server that wraps the simulation in a JSON API.

The game loop is driven lazily: each API request catches up on elapsed
wall-clock time before acting, so passive income keeps flowing between
requests without a background thread.
"""

from __future__ import annotations

import logging
import threading
import time

from flask import Flask, jsonify, request

from droodle.data.balance import BALANCE
from droodle.data.tiers import tier_name
from droodle.engine.economy import PurchaseStatus, can_afford, format_amount, get_tier_price
from droodle.engine.save import PersistenceGateway
from droodle.engine.simulation import Simulation, StepReport

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Flask app
# ---------------------------------------------------------------------------

app = Flask(__name__)

# ---------------------------------------------------------------------------
# In-memory game session (single-player)
# ---------------------------------------------------------------------------

# Flask may serve requests on several threads; the simulation itself is
# single-threaded, so every request holds this lock while it touches it.
_lock = threading.Lock()
_gateway: PersistenceGateway | None = None
_sim: Simulation | None = None
_last_tick: float = 0.0


def configure(gateway: PersistenceGateway | None = None, simulation: Simulation | None = None) -> None:
    """Choose where the session is saved, or hand in a ready simulation."""
    global _gateway, _sim, _last_tick
    with _lock:
        _gateway = gateway
        _sim = simulation
        _last_tick = time.monotonic()


def _ensure_game() -> Simulation:
    """Initialise the game if not yet started."""
    global _gateway, _sim, _last_tick
    if _sim is None:
        if _gateway is None:
            _gateway = PersistenceGateway()
        _sim = Simulation.start(_gateway)
        _last_tick = time.monotonic()
        logger.info("Game session started")
    return _sim


def _do_ticks(sim: Simulation) -> StepReport:
    """Catch up game time since the last call (queued input goes first)."""
    global _last_tick
    now = time.monotonic()
    dt = max(now - _last_tick, 0.0)
    _last_tick = now
    return sim.step(dt)


def _state_json(sim: Simulation, report: StepReport | None = None) -> dict:
    """Build the JSON blob sent to the frontend."""
    s = sim.state
    price_digits = BALANCE.economy.price_scientific_digits

    tiers = []
    for i in range(s.tier_count):
        price = get_tier_price(s, i)
        tiers.append({
            "index": i,
            "name": tier_name(i),
            "owned": s.generator_owned[i],
            "price": format_amount(price, price_digits),
            "price_raw": price,
            "income_value": s.generator_income_value[i],
            "can_afford": can_afford(s, i),
        })

    return {
        "droodles": format_amount(s.currency),
        "droodles_raw": s.currency,
        "dps": format_amount(s.income_rate),
        "dps_raw": s.income_rate,
        "click_strength": s.click_strength,
        "tiers": tiers,
        "markers": [
            {"x": m.x, "y": m.y, "opacity": m.opacity}
            for m in sim.effects.markers
        ],
        "sounds": [cue.name.lower() for cue in report.sounds] if report else [],
        "clock": sim.clock,
    }


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.route("/api/state")
def api_state():
    with _lock:
        sim = _ensure_game()
        report = _do_ticks(sim)
        return jsonify(_state_json(sim, report))


@app.route("/api/action/click", methods=["POST"])
def action_click():
    body = request.get_json(silent=True) or {}
    try:
        x = float(body["x"])
        y = float(body["y"])
    except (KeyError, TypeError, ValueError):
        return jsonify({"error": "click needs numeric x and y"}), 400

    with _lock:
        sim = _ensure_game()
        sim.push_click(x, y)
        report = _do_ticks(sim)
        data = _state_json(sim, report)
        outcome = report.clicks[0] if report.clicks else None
        data["click"] = (
            {"kind": outcome.kind.name.lower(), "reward": outcome.reward}
            if outcome is not None else None
        )
        return jsonify(data)


@app.route("/api/action/buy/<int:tier_index>", methods=["POST"])
def action_buy(tier_index: int):
    with _lock:
        sim = _ensure_game()
        sim.push_purchase(tier_index)
        report = _do_ticks(sim)
        data = _state_json(sim, report)
        status = report.purchases[0].status if report.purchases else PurchaseStatus.INVALID_TIER
        data["purchase_status"] = status.name.lower()
        return jsonify(data)


@app.route("/api/action/save", methods=["POST"])
def action_save():
    with _lock:
        sim = _ensure_game()
        _do_ticks(sim)
        return jsonify({"saved": sim.save()})


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run_server(host: str = "127.0.0.1", port: int = 5000, debug: bool = False) -> None:
    """Start the Flask development server; saves once more on the way out."""
    try:
        app.run(host=host, port=port, debug=debug, use_reloader=False)
    finally:
        with _lock:
            if _sim is not None:
                _sim.shutdown()

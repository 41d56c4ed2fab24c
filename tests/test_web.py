"""Tests for the Flask JSON API."""

import pytest

from droodle.engine.player_state import default_state
from droodle.engine.save import MemoryStore, PersistenceGateway
from droodle.engine.simulation import Simulation
from droodle.web import server


@pytest.fixture
def sim(fixed_rng):
    simulation = Simulation(
        default_state(),
        gateway=PersistenceGateway(MemoryStore()),
        rng=fixed_rng(3),
    )
    server.configure(simulation=simulation)
    yield simulation
    server.configure()


@pytest.fixture
def client(sim):
    return server.app.test_client()


def test_state(client):
    data = client.get("/api/state").get_json()
    assert data["droodles"] == "0.0"
    assert data["dps"] == "0.0"
    assert len(data["tiers"]) == 4
    assert data["tiers"][0]["name"] == "Pirate"
    assert data["tiers"][0]["price"] == "10.0"
    assert data["tiers"][0]["can_afford"] is False


def test_click_inside(client):
    data = client.post("/api/action/click", json={"x": 300, "y": 300}).get_json()
    assert data["click"] == {"kind": "normal", "reward": 10}
    assert data["droodles"] == "1.0"
    assert data["sounds"] == ["click"]
    assert len(data["markers"]) == 1


def test_click_outside(client):
    data = client.post("/api/action/click", json={"x": 5, "y": 5}).get_json()
    assert data["click"] is None
    assert data["droodles"] == "0.0"


def test_click_needs_coordinates(client):
    resp = client.post("/api/action/click", json={"x": "left"})
    assert resp.status_code == 400


def test_buy(client, sim):
    data = client.post("/api/action/buy/0").get_json()
    assert data["purchase_status"] == "insufficient_funds"

    sim.state.currency = 100
    data = client.post("/api/action/buy/0").get_json()
    assert data["purchase_status"] == "applied"
    assert data["sounds"] == ["purchase"]
    assert data["tiers"][0]["owned"] == 1
    assert data["tiers"][0]["price"] == "11.0"
    assert data["dps_raw"] == 1


def test_buy_unknown_tier(client):
    data = client.post("/api/action/buy/9").get_json()
    assert data["purchase_status"] == "invalid_tier"


def test_save(client, sim):
    sim.state.currency = 50
    assert client.post("/api/action/save").get_json() == {"saved": True}
    assert sim.gateway.load().currency == 50


def test_state_marks_affordable_tiers(client, sim):
    sim.state.currency = 1_000
    tiers = client.get("/api/state").get_json()["tiers"]
    assert [t["can_afford"] for t in tiers] == [True, True, False, False]

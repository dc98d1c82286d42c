from __future__ import annotations

import pytest

from app import app as flask_app
from turing.blueprint import BLUEPRINTS

EXAMPLE = BLUEPRINTS["example"]


@pytest.fixture
def client():
    flask_app.config["TESTING"] = True
    with flask_app.test_client() as client:
        yield client


def test_index_page(client) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"Turing Machine Diagnostic" in resp.data
    assert b"Begin in state A." in resp.data


def test_examples_endpoint(client) -> None:
    data = client.get("/api/examples").get_json()
    names = [e["name"] for e in data["examples"]]
    assert names == list(BLUEPRINTS)


def test_run_example(client) -> None:
    resp = client.post("/api/run", json={"blueprint": EXAMPLE})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["checksum"] == 3
    assert data["steps"] == 6
    assert data["final_state"] == "A"
    assert data["tape"] == "... 0  1  1 [0] 1  0  0 ..."


def test_run_with_overrides(client) -> None:
    resp = client.post("/api/run", json={"blueprint": EXAMPLE, "steps": 0, "radius": 1, "states": 2})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["checksum"] == 0
    assert data["tape"] == "... 0 [0] 0 ..."


def test_run_rejects_swapped_branches(client) -> None:
    bad = EXAMPLE.replace("  If the current value is 0:", "  If the current value is 1:", 1)
    resp = client.post("/api/run", json={"blueprint": bad})
    assert resp.status_code == 400
    data = resp.get_json()
    assert data["kind"] == "BranchOrderError"
    assert data["line"] == 5


def test_run_rejects_truncated_input(client) -> None:
    short = EXAMPLE.split("\nIn state B:")[0]
    resp = client.post("/api/run", json={"blueprint": short, "states": 2})
    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "TruncatedInputError"


@pytest.mark.parametrize(
    "blueprint",
    ["", "Begin in state A.\nPerform a diagnostic checksum after 6 steps.\n"],
)
def test_run_rejects_blueprint_without_state_blocks(client, blueprint) -> None:
    resp = client.post("/api/run", json={"blueprint": blueprint})
    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "TruncatedInputError"


def test_run_busy_beaver_example(client) -> None:
    resp = client.post("/api/run", json={"blueprint": BLUEPRINTS["busy-beaver"]})
    assert resp.status_code == 200
    assert resp.get_json()["checksum"] == 4


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"blueprint": 42},
        {"blueprint": EXAMPLE, "steps": "six"},
        {"blueprint": EXAMPLE, "steps": -1},
        {"blueprint": EXAMPLE, "states": True},
    ],
)
def test_run_rejects_bad_requests(client, body) -> None:
    resp = client.post("/api/run", json=body)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_run_rejects_non_json_body(client) -> None:
    resp = client.post("/api/run", data="not json", content_type="text/plain")
    assert resp.status_code == 400

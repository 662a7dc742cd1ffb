"""
Tests for the component HTTP endpoints.

These use FastAPI's TestClient against the real application and the
shapely-backed kernel, checking discovery, the three solve outcomes
and CSV export.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from kerfin.main import app  # type: ignore

SQUARE = {
    "controlPoints": [[[0, 0, 0], [0, 10, 0]], [[10, 0, 0], [10, 10, 0]]],
    "uDomain": [0, 10],
    "vDomain": [0, 10],
}


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_health_and_library(client: TestClient) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}
    lib = client.get("/api/library").json()
    assert lib["name"] == "KERF-IN"
    assert lib["componentCount"] == 4


def test_list_and_get_components(client: TestClient) -> None:
    resp = client.get("/api/components")
    assert resp.status_code == 200
    ids = {c["componentId"] for c in resp.json()}
    assert "14993506-b176-42b4-aacc-0575d28f43f1" in ids
    cnc = client.get("/api/components/cnc").json()
    assert cnc["subcategory"] == "Fabrication"
    assert [p["nickname"] for p in cnc["inputs"]] == ["srf", "Patterns", "Thickness", "DrillBit", "Offset"]
    assert client.get("/api/components/unknown").status_code == 404


def test_solve_zigzag(client: TestClient) -> None:
    resp = client.post("/api/components/zig zag/solve", json={"inputs": [SQUARE, 3, 3]})
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    segments = data["outputs"][0]
    assert len(segments) == 8
    assert segments[0]["points"] == [[0.0, 0.0, 0.0], [2.5, 0.0, 0.0]]
    assert segments[0]["closed"] is False


def test_solve_skipped_and_error(client: TestClient) -> None:
    skipped = client.post("/api/components/laser/solve", json={"inputs": [SQUARE]}).json()
    assert skipped["status"] == "skipped"
    assert skipped["outputs"] == [] and skipped["messages"] == []

    error = client.post(
        "/api/components/straight lines/solve",
        json={"inputs": [SQUARE, 2, 4, 2, 3]},
    ).json()
    assert error["status"] == "error"
    assert error["messages"][0]["level"] == "error"


def test_solve_laser_returns_loops_and_region(client: TestClient) -> None:
    body = {"inputs": [SQUARE, [{"points": [[2, 5, 0], [8, 5, 0]]}], 3.0, 1.0]}
    data = client.post("/api/components/laser/solve", json=body).json()
    assert data["status"] == "ok"
    loops, region = data["outputs"]
    assert len(loops) == 1 and loops[0]["closed"] is True
    assert region["area"] == pytest.approx(88.0)
    assert len(region["holes"]) == 1


def test_export_csv(client: TestClient) -> None:
    resp = client.post(
        "/api/components/straight lines/export",
        json={"inputs": [SQUARE, 2, 1, 2, 3]},
    )
    assert resp.status_code == 200
    lines = resp.text.strip().split("\n")
    assert lines[0] == "curve,index,x,y,z"
    # Six rectangles of five points each.
    assert len(lines) == 1 + 6 * 5

    rejected = client.post(
        "/api/components/straight lines/export",
        json={"inputs": [SQUARE, 2, 4, 2, 3]},
    )
    assert rejected.status_code == 422

from fastapi.testclient import TestClient

from styleprompt.app.main import create_app
from styleprompt.app.settings import Settings


def _client() -> TestClient:
    return TestClient(create_app(Settings()))


def test_health_reports_catalog() -> None:
    response = _client().get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["genre_count"] > 0


def test_prompt_endpoint_is_deterministic_with_seed() -> None:
    client = _client()
    payload = {"description": "smooth jazz night", "seed": 42}
    first = client.post("/prompts", json=payload).json()
    second = client.post("/prompts", json=payload).json()
    assert first["prompt"] == second["prompt"]
    assert first["genre"]["components"] == ["jazz"]


def test_prompt_endpoint_fills_missing_seed() -> None:
    response = _client().post("/prompts", json={"description": "ambient drift"})
    assert response.status_code == 200
    assert response.json()["seed"] >= 0


def test_remix_endpoint_rewrites_field() -> None:
    prompt = 'genre: "jazz"\nbpm: "between 80 and 160"\nmood: "smooth"'
    response = _client().post(
        "/remix",
        json={"prompt": prompt, "field": "mood", "seed": 4, "trace": True},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["field"] == "mood"
    assert body["prompt"].startswith('genre: "jazz"\nbpm: "between 80 and 160"\nmood: "')
    assert body["trace"][-1]["branch_taken"] == "replaced"


def test_coherence_endpoint_and_validation() -> None:
    client = _client()
    response = client.post(
        "/coherence",
        json={
            "instruments": ["distorted guitar"],
            "production_tags": ["intimate bedroom recording"],
            "creativity_level": 30,
        },
    )
    assert response.json()["conflicts"] == ["distorted-intimate"]
    invalid = client.post("/remix", json={"prompt": "x", "field": "lyrics"})
    assert invalid.status_code == 422

import datetime as dt

import pytest

from runner.score_store import JsonScoreStore
from runner.scoreboard import ScoreService
from runner.server import create_app


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock(dt.datetime(2026, 10, 17, 12, 0, tzinfo=dt.timezone.utc))


@pytest.fixture
def client(tmp_path, clock):
    app = create_app(service=ScoreService(JsonScoreStore(tmp_path), clock=clock))
    app.config["TESTING"] = True
    return app.test_client()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True}


def test_submit_score(client):
    resp = client.post("/api/score", json={"twitter": "@me" + "x" * 50, "wallet": "0xabc", "score": 321})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["ok"] is True
    entry = body["entry"]
    assert entry["score"] == 321
    assert len(entry["twitter"]) == 40
    assert entry["date"] == "2026-10-17"
    assert entry["createdAt"].endswith("Z")


@pytest.mark.parametrize(
    "payload",
    [{"score": -5}, {"score": "100"}, {"twitter": "@me"}, {"score": None}, {"score": 10**400}],
)
def test_invalid_score_is_400(client, payload):
    resp = client.post("/api/score", json=payload)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid score"}


def test_non_json_body_is_400(client):
    resp = client.post("/api/score", data="score=5", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid score"}


def test_daily_leaderboard(client, clock):
    for name, score in [("a", 5), ("b", 50), ("c", 20)]:
        client.post("/api/score", json={"twitter": name, "score": score})
    body = client.get("/api/leaderboard/daily").get_json()
    assert body["date"] == "2026-10-17"
    assert [r["twitter"] for r in body["leaderboard"]] == ["b", "c", "a"]

    other = client.get("/api/leaderboard/daily?date=2026-10-01").get_json()
    assert other == {"date": "2026-10-01", "leaderboard": []}


def test_winners_and_compute(client, clock):
    client.post("/api/score", json={"twitter": "old", "score": 7})
    assert client.get("/api/winners").get_json() == {}

    clock.now = clock.now + dt.timedelta(days=1)
    client.post("/api/score", json={"twitter": "today", "score": 70})
    winners = client.get("/api/winners").get_json()
    assert list(winners) == ["2026-10-17"]
    assert winners["2026-10-17"]["twitter"] == "old"

    resp = client.post("/api/winners/compute")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["ok"] is True
    assert body["winners"] == winners


def test_create_app_from_data_dir(tmp_path):
    app = create_app(data_dir=str(tmp_path))
    resp = app.test_client().post("/api/score", json={"score": 1})
    assert resp.status_code == 200
    assert (tmp_path / "scores.json").exists()


def test_bad_stored_score_does_not_break_reads(tmp_path, clock):
    store = JsonScoreStore(tmp_path)
    app = create_app(service=ScoreService(store, clock=clock))
    client = app.test_client()
    client.post("/api/score", json={"twitter": "good", "score": 3})
    store.append_score({"id": "x", "date": "2026-10-17", "score": "oops", "twitter": "bad", "wallet": ""})

    resp = client.get("/api/leaderboard/daily")
    assert resp.status_code == 200
    assert [r["twitter"] for r in resp.get_json()["leaderboard"]] == ["good"]

    clock.now = clock.now + dt.timedelta(days=1)
    resp = client.get("/api/winners")
    assert resp.status_code == 200
    assert resp.get_json()["2026-10-17"]["twitter"] == "good"

from datetime import datetime, timedelta, timezone
from urllib.parse import quote
from fastapi.testclient import TestClient
from logit.main import app
from logit.route_keys import to_route_key
from helpers import auth_headers

client = TestClient(app)

def log(headers, when, *exercises):
    body = {
        "title": "Session",
        "performedAt": when.strftime("%Y-%m-%dT%H:%M"),
        "exercises": [{"name": name, "sets": sets} for name, sets in exercises],
    }
    r = client.post("/workouts", headers=headers, json=body)
    assert r.status_code == 201
    return r.json()["id"]

def seeded_user():
    H = auth_headers(client)
    now = datetime.now(timezone.utc)
    log(H, now - timedelta(days=10), ("bench press", [{"reps": 5, "weightLb": 100}]), ("Row", [{"reps": 10, "weightLb": 50}]))
    log(H, now - timedelta(days=3), ("Bench  Press", [{"reps": 3, "weightLb": 120}]))
    return H

def test_exercise_list_summaries():
    H = seeded_user()
    rows = client.get("/exercises", headers=H).json()
    assert [r["key"] for r in rows] == ["bench press", "row"]
    bench = rows[0]
    assert bench["routeKey"] == to_route_key("bench press")
    assert bench["sessionCount"] == 2
    assert bench["totalVolume"] == 860
    assert bench["bestWeight"] == 120.0
    assert bench["daysSinceLastHit"] == 3

def test_exercise_detail_by_route_key():
    H = seeded_user()
    r = client.get(f"/exercises/{to_route_key('bench press')}", headers=H)
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "Bench Press"
    assert body["sessionsCount"] == 2
    assert body["totalVolume"] == 860
    assert body["averageRepsPerSet"] == 4.0
    assert body["averageVolumePerSession"] == 430.0
    assert [s["totalVolume"] for s in body["sessions"]] == [360, 500]
    assert [p["bestWeight"] for p in body["chart"]] == [100.0, 120.0]

def test_exercise_detail_by_plain_name():
    H = seeded_user()
    r = client.get(f"/exercises/{quote('ROW')}", headers=H)
    assert r.status_code == 200
    assert r.json()["key"] == "row"

def test_unknown_exercise_is_404():
    H = seeded_user()
    r = client.get(f"/exercises/{to_route_key('sled push')}", headers=H)
    assert r.status_code == 404
    assert r.json() == {"error": "Exercise not found."}
    assert client.get("/exercises/sled%20push", headers=H).status_code == 404

def test_other_users_keys_do_not_resolve():
    seeded_user()
    stranger = auth_headers(client)
    assert client.get(f"/exercises/{to_route_key('bench press')}", headers=stranger).status_code == 404

def test_dashboard():
    H = seeded_user()
    body = client.get("/dashboard", headers=H).json()
    assert body["totalWorkouts"] == 2
    assert body["totalExercises"] == 3
    assert body["totalSets"] == 3
    assert body["totalWeightLifted"] == 1360
    assert len(body["weeklySeries"]) == 12
    assert len(body["weeklyBars"]) == 7
    assert body["personalBests"][0] == {
        "lift": "Bench Press",
        "weight": 120.0,
        "reps": 3,
        "performedAt": body["personalBests"][0]["performedAt"],
    }

def test_dashboard_empty_user():
    body = client.get("/dashboard", headers=auth_headers(client)).json()
    assert body["totalWorkouts"] == 0
    assert body["monthChange"] == 0.0
    assert body["personalBests"] == []

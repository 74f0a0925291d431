from datetime import timedelta

from fastapi.testclient import TestClient

from runlog.core.time_utils import utcnow
from runlog.main import app

from conftest import USER, goal_data, log_run

AUTH = {"Authorization": f"Bearer {USER}"}


def get_client():
    return TestClient(app)


def test_root_ok():
    client = get_client()
    r = client.get("/")
    assert r.status_code == 200
    data = r.json()
    assert "message" in data


def test_goals_require_bearer_token():
    client = get_client()
    assert client.get("/api/goals").status_code == 401
    assert client.get("/api/goals", headers={"Authorization": "Basic abc"}).status_code == 401


def test_create_and_list_run():
    client = get_client()
    payload = {
        "date": utcnow().date().isoformat(),
        "title": "Test Run",
        "notes": "",
        "distanceMi": 5.0,
        "duration": "00:40:00",
        "runType": "easy",
    }
    cr = client.post("/api/runs", json=payload, headers=AUTH)
    assert cr.status_code == 201, cr.text
    run = cr.json()
    assert run["pace"] == "8:00/mi"

    lr = client.get("/api/runs", headers=AUTH)
    assert lr.status_code == 200
    assert any(r["title"] == "Test Run" for r in lr.json())

    # runs are private to their owner
    other = client.get("/api/runs", headers={"Authorization": "Bearer someone-else"})
    assert other.json() == []


def test_create_goal_returns_camel_case():
    client = get_client()
    r = client.post("/api/goals", json=goal_data(description="  steady  "), headers=AUTH)
    assert r.status_code == 201, r.text
    goal = r.json()
    assert goal["userId"] == USER
    assert goal["targetValue"] == 20
    assert goal["isCompleted"] is False
    assert goal["completedAt"] is None
    assert goal["description"] == "steady"


def test_create_goal_rejects_bad_window():
    client = get_client()
    now = utcnow()
    data = goal_data(startDate=now.isoformat(), endDate=(now - timedelta(days=1)).isoformat())
    assert client.post("/api/goals", json=data, headers=AUTH).status_code == 422
    assert client.post("/api/goals", json=goal_data(targetValue=0), headers=AUTH).status_code == 422


def test_progress_sums_runs_in_window():
    client = get_client()
    goal = client.post("/api/goals", json=goal_data(), headers=AUTH).json()
    log_run(5.0)
    log_run(3.0)
    log_run(9.0, day=utcnow().date() - timedelta(days=30))  # before the window
    log_run(9.0, user_id="someone-else")

    r = client.get("/api/goals/progress/all", headers=AUTH)
    assert r.status_code == 200
    (progress,) = r.json()
    assert progress["goalId"] == goal["id"]
    assert progress["currentValue"] == 8.0
    assert progress["progressPercentage"] == 40.0
    assert progress["remainingValue"] == 12.0
    assert progress["isCompleted"] is False
    assert 22 <= progress["daysRemaining"] <= 23


def test_progress_per_goal_type():
    client = get_client()
    log_run(5.0, seconds=2400)
    log_run(10.0, seconds=4800)
    specs = {
        "FREQUENCY": ({"targetValue": 4, "targetUnit": "runs"}, 2.0),
        "TIME": ({"targetValue": 2, "targetUnit": "hours"}, 2.0),
        "LONGEST_RUN": ({"targetValue": 10, "targetUnit": "miles"}, 10.0),
        "PACE": ({"targetValue": 8.5, "targetUnit": "min/mile"}, 8.0),
    }
    ids = {}
    for gtype, (overrides, _) in specs.items():
        ids[gtype] = client.post("/api/goals", json=goal_data(type=gtype, **overrides), headers=AUTH).json()["id"]

    by_goal = {p["goalId"]: p for p in client.get("/api/goals/progress/all", headers=AUTH).json()}
    for gtype, (_, expected) in specs.items():
        assert by_goal[ids[gtype]]["currentValue"] == expected, gtype

    assert by_goal[ids["FREQUENCY"]]["progressPercentage"] == 50.0
    assert by_goal[ids["TIME"]]["isCompleted"] is True
    assert by_goal[ids["LONGEST_RUN"]]["isCompleted"] is True
    # faster than the target pace counts as done
    assert by_goal[ids["PACE"]]["isCompleted"] is True
    assert by_goal[ids["PACE"]]["progressPercentage"] == 100.0


def test_complete_goal_once():
    client = get_client()
    goal = client.post("/api/goals", json=goal_data(), headers=AUTH).json()

    r = client.post(f"/api/goals/{goal['id']}/complete", headers=AUTH)
    assert r.status_code == 200
    done = r.json()
    assert done["isCompleted"] is True
    assert done["completedAt"] > done["startDate"]
    assert done["currentValue"] == done["targetValue"]

    again = client.post(f"/api/goals/{goal['id']}/complete", headers=AUTH)
    assert again.status_code == 400
    assert again.json()["detail"] == "Goal is already completed"

    # completed goals drop out of progress and cannot be edited
    assert client.get("/api/goals/progress/all", headers=AUTH).json() == []
    edit = client.put(f"/api/goals/{goal['id']}", json={"title": "x"}, headers=AUTH)
    assert edit.status_code == 400


def test_complete_goal_that_has_not_started():
    client = get_client()
    now = utcnow()
    future = goal_data(
        startDate=(now + timedelta(days=3)).isoformat(),
        endDate=(now + timedelta(days=10)).isoformat(),
    )
    goal = client.post("/api/goals", json=future, headers=AUTH).json()
    r = client.post(f"/api/goals/{goal['id']}/complete", headers=AUTH)
    assert r.status_code == 400


def test_update_goal_and_manual_completion():
    client = get_client()
    goal = client.post("/api/goals", json=goal_data(), headers=AUTH).json()

    r = client.put(f"/api/goals/{goal['id']}", json={"title": "New title", "targetValue": 30}, headers=AUTH)
    assert r.status_code == 200
    assert r.json()["title"] == "New title"
    assert r.json()["targetValue"] == 30

    bad = client.put(
        f"/api/goals/{goal['id']}",
        json={"endDate": (utcnow() - timedelta(days=30)).isoformat()},
        headers=AUTH,
    )
    assert bad.status_code == 422

    r = client.put(f"/api/goals/{goal['id']}", json={"currentValue": 31}, headers=AUTH)
    assert r.json()["isCompleted"] is True
    assert r.json()["completedAt"] is not None


def test_delete_is_soft_and_scoped_to_owner():
    client = get_client()
    goal = client.post("/api/goals", json=goal_data(), headers=AUTH).json()

    other = {"Authorization": "Bearer someone-else"}
    assert client.get(f"/api/goals/{goal['id']}", headers=other).status_code == 403
    assert client.delete(f"/api/goals/{goal['id']}", headers=other).status_code == 403

    assert client.delete(f"/api/goals/{goal['id']}", headers=AUTH).status_code == 204
    assert client.get(f"/api/goals/{goal['id']}", headers=AUTH).status_code == 404
    assert client.get("/api/goals", headers=AUTH).json() == []


def test_list_orders_active_goals_first():
    client = get_client()
    first = client.post("/api/goals", json=goal_data(title="first"), headers=AUTH).json()
    client.post("/api/goals", json=goal_data(title="second"), headers=AUTH)
    client.post(f"/api/goals/{first['id']}/complete", headers=AUTH)

    titles = [g["title"] for g in client.get("/api/goals", headers=AUTH).json()]
    assert titles == ["second", "first"]


def test_manual_value_does_not_complete_goal_before_start():
    client = get_client()
    now = utcnow()
    future = goal_data(
        targetValue=10,
        startDate=(now + timedelta(days=3)).isoformat(),
        endDate=(now + timedelta(days=10)).isoformat(),
    )
    goal = client.post("/api/goals", json=future, headers=AUTH).json()

    r = client.put(f"/api/goals/{goal['id']}", json={"currentValue": 10}, headers=AUTH)
    assert r.status_code == 200
    assert r.json()["currentValue"] == 10
    assert r.json()["isCompleted"] is False
    assert r.json()["completedAt"] is None


def test_progress_is_not_done_before_start_time():
    client = get_client()
    now = utcnow()
    later = goal_data(
        targetValue=5,
        startDate=(now + timedelta(hours=2)).isoformat(),
        endDate=(now + timedelta(days=10)).isoformat(),
    )
    client.post("/api/goals", json=later, headers=AUTH)
    log_run(6.0)

    (progress,) = client.get("/api/goals/progress/all", headers=AUTH).json()
    assert progress["isCompleted"] is False

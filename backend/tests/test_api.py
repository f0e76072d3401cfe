import pytest
from fastapi.testclient import TestClient

from conftest import leg_points
from formcoach.main import app


@pytest.fixture
def client():
    # Context manager runs the lifespan so the session store exists
    with TestClient(app) as client:
        yield client


def keypoints(points, score=0.9):
    return [{"name": name, "x": x, "y": y, "score": score} for name, (x, y) in points.items()]


def squat_payload(knee_angle):
    return {"keypoints": keypoints(leg_points(knee_angle))}


def create(client, exercise="squat"):
    response = client.post("/api/sessions", json={"exercise": exercise})
    assert response.status_code == 201
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["exercises"] == 8


def test_list_exercises(client):
    data = client.get("/api/exercises").json()
    assert "tree_pose" in data["exercises"]
    assert len(data["exercises"]) == 8
    assert data["default"] == "squat"


def test_create_session(client):
    data = create(client, "pushup")
    assert data["exercise"] == "pushup"
    assert data["reps"] == 0
    assert data["state"] == "waiting"
    assert not data["fallback_used"]


def test_unknown_exercise_reports_fallback(client):
    data = create(client, "zumba")
    assert data["exercise"] == "squat"
    assert data["requested_exercise"] == "zumba"
    assert data["fallback_used"]


def test_frames_count_a_squat(client):
    session = create(client)
    responses = [
        client.post(f"/api/sessions/{session['id']}/frames", json=squat_payload(a)).json()
        for a in [170] * 5 + [140] * 5 + [95] * 5 + [130] * 5 + [170] * 5
    ]

    last = responses[-1]
    assert last["session_id"] == session["id"]
    assert last["result"]["reps"] == 1
    assert any(r["feedback"]["rep_completed"] for r in responses)
    assert any("success" in r["feedback"]["sounds"] for r in responses)

    state = client.get(f"/api/sessions/{session['id']}").json()
    assert state["reps"] == 1
    assert state["frames_processed"] == len(responses)


def test_missing_joints_are_reported(client):
    session = create(client)
    data = client.post(
        f"/api/sessions/{session['id']}/frames",
        json={"keypoints": keypoints({"nose": (300, 100)})},
    ).json()

    assert not data["result"]["is_correct"]
    assert "BODY_NOT_VISIBLE" in data["result"]["error_codes"]
    assert "left_knee" in data["feedback"]["highlight_joints"]
    assert data["tracking_quality"] == "poor"


def test_switch_exercise(client):
    session = create(client)
    data = client.put(f"/api/sessions/{session['id']}/exercise", json={"exercise": "plank"}).json()
    assert data["exercise"] == "plank"
    assert data["reps"] == 0
    assert data["state"] == "waiting"


def test_reset_session(client):
    session = create(client)
    client.post(f"/api/sessions/{session['id']}/frames", json=squat_payload(170))
    data = client.post(f"/api/sessions/{session['id']}/reset").json()
    assert data["frames_processed"] == 0
    assert data["reps"] == 0


def test_frame_timestamps_time_a_plank_hold(client):
    session = create(client, "plank")
    plank = keypoints({"left_shoulder": (200, 300), "left_hip": (350, 300), "left_ankle": (500, 300)})
    responses = [
        client.post(
            f"/api/sessions/{session['id']}/frames",
            json={"keypoints": plank, "timestamp": 50.0 + 0.5 * i},
        ).json()
        for i in range(9)
    ]
    assert responses[-1]["result"]["state"] == "holding"
    assert responses[-1]["result"]["hold_seconds"] == pytest.approx(4.0)
    assert responses[-1]["result"]["reps"] == 4


def test_delete_session(client):
    session = create(client)
    assert client.delete(f"/api/sessions/{session['id']}").status_code == 204
    assert client.get(f"/api/sessions/{session['id']}").status_code == 404
    assert client.delete(f"/api/sessions/{session['id']}").status_code == 404


def test_unknown_session_is_404(client):
    response = client.post("/api/sessions/nope/frames", json={"keypoints": []})
    assert response.status_code == 404


def test_score_out_of_range_is_rejected(client):
    session = create(client)
    response = client.post(
        f"/api/sessions/{session['id']}/frames",
        json={"keypoints": [{"name": "nose", "x": 1, "y": 1, "score": 1.5}]},
    )
    assert response.status_code == 422

from fastapi.testclient import TestClient


def test_goals_health(client: TestClient):
    r = client.get("/api/goals/health")
    assert r.status_code == 200
    assert r.json() == {"status": "OK", "service": "goals-api"}


def test_detailed_health_checks_database(client: TestClient):
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "healthy"
    assert data["database"] is True


def test_requests_are_counted(client: TestClient):
    client.get("/api/goals")
    client.get("/api/goals")
    metrics = client.app.state.context.metrics
    count = metrics.registry.get_sample_value(
        "http_requests_total", {"method": "GET", "path": "/api/goals", "status_code": "200"}
    )
    assert count == 2.0


def test_process_time_header(client: TestClient):
    r = client.get("/api/goals/health")
    assert "x-process-time" in r.headers


def test_request_path_label_is_templated(client: TestClient):
    client.get("/api/goals/missing")
    client.get("/api/goals/also-missing")
    metrics = client.app.state.context.metrics
    count = metrics.registry.get_sample_value(
        "http_requests_total", {"method": "GET", "path": "/api/goals/{goal_id}", "status_code": "404"}
    )
    assert count == 2.0

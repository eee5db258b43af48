async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Healthy"
    assert body["data"]["status"] == "ok"


async def test_correlation_id_is_echoed(client):
    resp = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})
    assert resp.headers["X-Correlation-ID"] == "abc-123"


async def test_request_id_is_used_as_correlation_id(client):
    resp = await client.get("/health", headers={"X-Request-ID": "req-9"})
    assert resp.headers["X-Correlation-ID"] == "req-9"


async def test_correlation_id_is_generated(client):
    resp = await client.get("/health")
    assert len(resp.headers["X-Correlation-ID"]) == 36


async def test_error_envelope_carries_request_context(client, world):
    resp = await client.get("/api/auth/me", headers={"X-Correlation-ID": "trace-1"})
    assert resp.status_code == 401
    body = resp.json()
    assert body["success"] is False
    assert body["data"] is None
    assert body["correlationId"] == "trace-1"
    assert body["path"] == "/api/auth/me"
    assert body["timestamp"]


async def test_unknown_route_uses_error_envelope(client):
    resp = await client.get("/api/does-not-exist")
    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["type"] == "http_error"


async def test_validation_error_details(client):
    resp = await client.post("/api/auth/login", json={"email": "not-an-email"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"]["type"] == "validation_error"
    assert "password is required" in body["message"]
    assert any(d["loc"][-1] == "password" for d in body["error"]["details"])


async def test_openapi_lists_resource_groups(client):
    resp = await client.get("/openapi.json")
    assert resp.status_code == 200
    paths = resp.json()["paths"]
    for path in (
        "/api/auth/login",
        "/api/business/{business_id}/exams",
        "/api/exams/{exam_id}/courses",
        "/api/batches/add-user",
        "/api/batches/{batch_id}/contents",
        "/api/permission",
        "/api/teachers/profile",
        "/api/announcements",
    ):
        assert path in paths

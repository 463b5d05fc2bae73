import json


def test_security_headers_are_set(client):
    response = client.get("/health")
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "SAMEORIGIN"
    assert response.headers["cross-origin-resource-policy"] == "cross-origin"
    assert "content-security-policy" in response.headers


def test_large_responses_are_compressed(client):
    for index in range(40):
        client.post("/categories", json={"name": f"Category number {index}", "slug": f"category-{index}"})

    response = client.get("/categories", headers={"accept-encoding": "gzip"})

    assert response.status_code == 200
    assert response.headers.get("content-encoding") == "gzip"
    assert len(response.json()) == 40


def test_body_size_limit(make_client, pool, settings_factory):
    settings = settings_factory(max_body_bytes=64)
    client = make_client(settings, pool)

    response = client.post("/categories", json={"name": "x" * 200})

    assert response.status_code == 413
    assert response.json() == {"ok": False, "error": "Payload Too Large"}


def test_body_size_limit_counts_streamed_bodies(make_client, pool, settings_factory):
    settings = settings_factory(max_body_bytes=64)
    client = make_client(settings, pool)
    body = json.dumps({"name": "x" * 130}).encode()

    async def chunks():
        for start in range(0, len(body), 32):
            yield body[start : start + 32]

    response = client.post("/categories", content=chunks(), headers={"content-type": "application/json"})

    assert response.status_code == 413
    assert response.json() == {"ok": False, "error": "Payload Too Large"}
    assert client.get("/categories").json() == []


def test_small_streamed_body_passes_the_ceiling(make_client, pool, settings_factory):
    settings = settings_factory(max_body_bytes=64)
    client = make_client(settings, pool)

    async def chunks():
        yield b'{"name": '
        yield b'"Small"}'

    response = client.post("/categories", content=chunks(), headers={"content-type": "application/json"})

    assert response.status_code == 201


def test_rate_limit_applies_to_api_prefix_only(make_client, pool, settings_factory):
    settings = settings_factory(rate_limit_requests=2)
    client = make_client(settings, pool)

    assert client.get("/api/health").status_code == 200
    assert client.get("/api/categories").status_code == 200
    limited = client.get("/api/health")
    assert limited.status_code == 429
    assert limited.json() == {"ok": False, "error": "Too Many Requests"}
    assert int(limited.headers["retry-after"]) >= 1

    for _ in range(3):
        assert client.get("/health").status_code == 200


def test_cors_allows_configured_origin(make_client, pool, settings_factory):
    settings = settings_factory(cors_origins=["https://example.com"])
    client = make_client(settings, pool)

    allowed = client.get("/health", headers={"origin": "https://example.com"})
    other = client.get("/health", headers={"origin": "https://evil.example"})

    assert allowed.headers["access-control-allow-origin"] == "https://example.com"
    assert "access-control-allow-origin" not in other.headers


def test_no_cors_headers_without_configuration(client):
    response = client.get("/health", headers={"origin": "https://example.com"})
    assert "access-control-allow-origin" not in response.headers

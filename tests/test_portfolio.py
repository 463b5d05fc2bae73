ITEM = {
    "title": "Clinic Queue System",
    "slug": "clinic-queue-system",
    "summary": "Queue display for a clinic",
    "body": "Long form description",
    "cover": "/images/BG1.jpg",
}


def test_create_portfolio_item(client):
    response = client.post("/portfolio", json=ITEM)
    assert response.status_code == 201
    created = response.json()
    for key, value in ITEM.items():
        assert created[key] == value
    assert created["id"]
    assert created["created_at"]


def test_create_requires_title(client):
    response = client.post("/portfolio", json={"slug": "untitled"})
    assert response.status_code == 400
    assert response.json() == {"message": "title is required"}
    assert client.get("/portfolio").json() == []


def test_lookup_by_slug_matches_lookup_by_id(client):
    created = client.post("/portfolio", json=ITEM).json()

    by_id = client.get(f"/portfolio/{created['id']}")
    by_slug = client.get(f"/portfolio/{ITEM['slug']}")

    assert by_id.status_code == 200
    assert by_id.json() == by_slug.json() == created


def test_unknown_slug_is_404(client):
    response = client.get("/portfolio/no-such-project")
    assert response.status_code == 404


def test_partial_update_changes_only_supplied_field(client):
    created = client.post("/portfolio", json=ITEM).json()

    response = client.put(f"/portfolio/{created['id']}", json={"summary": "Updated summary"})
    assert response.status_code == 200

    fetched = client.get(f"/portfolio/{created['id']}").json()
    assert fetched["summary"] == "Updated summary"
    for key in ("title", "slug", "body", "cover"):
        assert fetched[key] == created[key]


def test_update_missing_item_is_404(client):
    assert client.put("/portfolio/999", json={"title": "Nope"}).status_code == 404


def test_delete_portfolio_item(client):
    created = client.post("/portfolio", json=ITEM).json()

    assert client.delete(f"/portfolio/{created['id']}").status_code == 204
    assert client.delete(f"/portfolio/{created['id']}").status_code == 404
    assert client.get(f"/portfolio/{ITEM['slug']}").status_code == 404


def test_non_numeric_id_on_write_routes_is_404(client):
    assert client.delete("/portfolio/abc").status_code == 404
    response = client.put("/portfolio/abc", json={"title": "Nope"})
    assert response.status_code == 404
    assert "message" in response.json()


def test_list_portfolio_newest_first(client):
    client.post("/portfolio", json={"title": "Older"})
    client.post("/portfolio", json={"title": "Newer"})

    titles = [item["title"] for item in client.get("/portfolio").json()]

    assert titles == ["Newer", "Older"]

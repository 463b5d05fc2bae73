def test_upload_stores_file(client, settings):
    response = client.post(
        "/upload",
        files={"file": ("cover.png", b"fake-image-bytes", "image/png")},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["originalname"] == "cover.png"
    stored = settings.app.public_dir / "uploads" / data["filename"]
    assert stored.read_bytes() == b"fake-image-bytes"

    served = client.get(f"/uploads/{data['filename']}")
    assert served.status_code == 200
    assert served.content == b"fake-image-bytes"


def test_upload_without_file_is_400(client):
    response = client.post("/upload", data={"note": "no file here"})
    assert response.status_code == 400
    assert response.json() == {"message": "file is required"}


def test_upload_larger_than_json_ceiling_is_accepted(client, settings):
    contents = b"x" * (settings.app.max_body_bytes + 10)

    response = client.post("/upload", files={"file": ("big.bin", contents, "application/octet-stream")})

    assert response.status_code == 200
    stored = settings.app.public_dir / "uploads" / response.json()["filename"]
    assert stored.stat().st_size == len(contents)


def test_upload_over_upload_limit_is_413(make_client, pool, settings_factory):
    settings = settings_factory(max_upload_bytes=1024)
    client = make_client(settings, pool)

    response = client.post("/upload", files={"file": ("big.bin", b"x" * 4096, "application/octet-stream")})

    assert response.status_code == 413
    assert response.json() == {"ok": False, "error": "Payload Too Large"}

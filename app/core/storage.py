from __future__ import annotations

from pathlib import Path
from uuid import uuid4


def uploads_dir(public_dir: Path) -> Path:
    return Path(public_dir) / "uploads"


def ensure_upload_dir(public_dir: Path) -> Path:
    path = uploads_dir(public_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def store_upload(public_dir: Path, contents: bytes) -> str:
    """Write ``contents`` under a random name and return that name."""

    file_name = uuid4().hex
    destination = ensure_upload_dir(public_dir) / file_name
    with destination.open("wb") as buffer:
        buffer.write(contents)
    return file_name

import re
from typing import Any

from app.core.db import ConnectionPool
from app.services import exceptions

PORTFOLIO_COLUMNS = "id, title, slug, summary, body, cover, created_at, updated_at"
OPTIONAL_FIELDS = ("slug", "summary", "body", "cover")
_NUMERIC_ID = re.compile(r"[0-9]+")


class PortfolioRepository:
    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    def list(self) -> list[dict[str, Any]]:
        return self.pool.query(f"SELECT {PORTFOLIO_COLUMNS} FROM portfolio ORDER BY id DESC")

    def get(self, identifier: int | str) -> dict[str, Any]:
        """Look an item up by numeric id, or by slug for anything else."""

        identifier = str(identifier)
        if _NUMERIC_ID.fullmatch(identifier):
            sql = f"SELECT {PORTFOLIO_COLUMNS} FROM portfolio WHERE id = :value"
            value: int | str = int(identifier)
        else:
            sql = f"SELECT {PORTFOLIO_COLUMNS} FROM portfolio WHERE slug = :value"
            value = identifier
        rows = self.pool.query(sql, {"value": value})
        if not rows:
            raise exceptions.NotFoundError("Portfolio item not found")
        return rows[0]

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        title = data.get("title")
        if not title or not title.strip():
            raise exceptions.ValidationError("title is required")
        params = {"title": title}
        params.update({field: data.get(field) or None for field in OPTIONAL_FIELDS})
        result = self.pool.execute(
            "INSERT INTO portfolio (title, slug, summary, body, cover) "
            "VALUES (:title, :slug, :summary, :body, :cover)",
            params,
        )
        return self.get(result.lastrowid)

    def update(self, item_id: int, data: dict[str, Any]) -> dict[str, Any]:
        params = {field: data.get(field) for field in ("title",) + OPTIONAL_FIELDS}
        params["id"] = item_id
        result = self.pool.execute(
            "UPDATE portfolio SET title = COALESCE(:title, title), slug = COALESCE(:slug, slug), "
            "summary = COALESCE(:summary, summary), body = COALESCE(:body, body), "
            "cover = COALESCE(:cover, cover), updated_at = CURRENT_TIMESTAMP WHERE id = :id",
            params,
        )
        if not result.rowcount:
            raise exceptions.NotFoundError("Portfolio item not found")
        return self.get(item_id)

    def delete(self, item_id: int) -> None:
        result = self.pool.execute("DELETE FROM portfolio WHERE id = :id", {"id": item_id})
        if not result.rowcount:
            raise exceptions.NotFoundError("Portfolio item not found")

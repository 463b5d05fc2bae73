from typing import Any

from app.core.db import ConnectionPool
from app.services import exceptions

CATEGORY_COLUMNS = "id, name, slug, parent_id, created_at, updated_at"


class CategoryRepository:
    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    def list(self) -> list[dict[str, Any]]:
        return self.pool.query(f"SELECT {CATEGORY_COLUMNS} FROM categories ORDER BY id DESC")

    def get(self, category_id: int) -> dict[str, Any]:
        rows = self.pool.query(
            f"SELECT {CATEGORY_COLUMNS} FROM categories WHERE id = :id",
            {"id": category_id},
        )
        if not rows:
            raise exceptions.NotFoundError("Category not found")
        return rows[0]

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        name = data.get("name")
        if not name or not name.strip():
            raise exceptions.ValidationError("name is required")
        result = self.pool.execute(
            "INSERT INTO categories (name, slug, parent_id) VALUES (:name, :slug, :parent_id)",
            {"name": name, "slug": data.get("slug") or None, "parent_id": data.get("parent_id")},
        )
        return self.get(result.lastrowid)

    def update(self, category_id: int, data: dict[str, Any]) -> dict[str, Any]:
        """Apply a partial update.

        ``name`` and ``slug`` keep their stored value when omitted or null,
        ``parent_id`` is always written so omitting it moves the category to
        the root.
        """

        result = self.pool.execute(
            "UPDATE categories SET name = COALESCE(:name, name), slug = COALESCE(:slug, slug), "
            "parent_id = :parent_id, updated_at = CURRENT_TIMESTAMP WHERE id = :id",
            {
                "name": data.get("name"),
                "slug": data.get("slug"),
                "parent_id": data.get("parent_id"),
                "id": category_id,
            },
        )
        if not result.rowcount:
            raise exceptions.NotFoundError("Category not found")
        return self.get(category_id)

    def delete(self, category_id: int) -> None:
        result = self.pool.execute("DELETE FROM categories WHERE id = :id", {"id": category_id})
        if not result.rowcount:
            raise exceptions.NotFoundError("Category not found")

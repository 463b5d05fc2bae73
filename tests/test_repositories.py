import pytest

from app.repositories import CategoryRepository, PortfolioRepository
from app.services import exceptions


class _UntouchablePool:
    def query(self, *args, **kwargs):
        raise AssertionError("storage should not be used")

    execute = query


@pytest.mark.parametrize("payload", [{}, {"name": None}, {"name": ""}, {"name": "   "}])
def test_category_create_requires_name_without_touching_storage(payload):
    repository = CategoryRepository(_UntouchablePool())
    with pytest.raises(exceptions.ValidationError):
        repository.create(payload)


@pytest.mark.parametrize("payload", [{}, {"title": None}, {"title": ""}])
def test_portfolio_create_requires_title_without_touching_storage(payload):
    repository = PortfolioRepository(_UntouchablePool())
    with pytest.raises(exceptions.ValidationError):
        repository.create(payload)


def test_category_list_is_newest_first(pool):
    repository = CategoryRepository(pool)
    for name in ("a", "b", "c"):
        repository.create({"name": name})
    assert [row["name"] for row in repository.list()] == ["c", "b", "a"]


def test_category_update_keeps_name_and_slug_but_overwrites_parent(pool):
    repository = CategoryRepository(pool)
    parent = repository.create({"name": "Parent"})
    child = repository.create({"name": "Child", "slug": "child", "parent_id": parent["id"]})

    updated = repository.update(child["id"], {"name": None, "slug": None})

    assert updated["name"] == "Child"
    assert updated["slug"] == "child"
    assert updated["parent_id"] is None


def test_category_missing_rows_raise_not_found(pool):
    repository = CategoryRepository(pool)
    with pytest.raises(exceptions.NotFoundError):
        repository.get(42)
    with pytest.raises(exceptions.NotFoundError):
        repository.update(42, {"name": "x"})
    with pytest.raises(exceptions.NotFoundError):
        repository.delete(42)


def test_portfolio_get_by_id_or_slug(pool):
    repository = PortfolioRepository(pool)
    created = repository.create({"title": "Clinic queue", "slug": "clinic-queue"})

    assert repository.get(str(created["id"])) == repository.get("clinic-queue")
    assert repository.get(created["id"])["title"] == "Clinic queue"


def test_portfolio_numeric_looking_slug_is_treated_as_id(pool):
    repository = PortfolioRepository(pool)
    repository.create({"title": "Numbers", "slug": "2024"})
    with pytest.raises(exceptions.NotFoundError):
        repository.get("2024")


def test_portfolio_update_only_changes_supplied_fields(pool):
    repository = PortfolioRepository(pool)
    created = repository.create(
        {"title": "Site", "slug": "site", "summary": "Old", "body": "Body", "cover": "/images/a.jpg"}
    )

    updated = repository.update(created["id"], {"summary": "New"})

    assert updated["summary"] == "New"
    for field in ("title", "slug", "body", "cover"):
        assert updated[field] == created[field]

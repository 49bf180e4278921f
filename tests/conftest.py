from typing import Any

import pytest
from jinja2 import Environment

from app.config import ROOT
from app.pages import templates_factory
from domain.models import ContentRecord


def method_document(*paragraphs: str) -> dict[str, Any]:
    return {
        "nodeType": "document",
        "data": {},
        "content": [
            {
                "nodeType": "paragraph",
                "data": {},
                "content": [
                    {"nodeType": "text", "value": p, "marks": [], "data": {}}
                ],
            }
            for p in paragraphs
        ],
    }


def image_asset(id: str = "img1", width: int = 1200, height: int = 800) -> dict[str, Any]:
    return {
        "sys": {"id": id, "type": "Asset"},
        "fields": {
            "title": f"{id} title",
            "file": {
                "url": f"//images.ctfassets.net/space/{id}/photo.jpg",
                "details": {"image": {"width": width, "height": height}},
                "contentType": "image/jpeg",
            },
        },
    }


def recipe_record(
    slug: str,
    *,
    id: str | None = None,
    title: str | None = None,
    cooking_time: int = 30,
    ingredients: list[str] | None = None,
) -> ContentRecord:
    return ContentRecord(
        id=id or f"id-{slug}",
        content_type="recipe",
        fields={
            "title": title or slug.replace("-", " ").title(),
            "slug": slug,
            "cookingTime": cooking_time,
            "ingredients": ["pasta", "cheese"] if ingredients is None else ingredients,
            "method": method_document("Boil the pasta.", "Add the cheese."),
            "featuredImage": image_asset(f"img-{slug}"),
            "thumbnail": image_asset(f"thumb-{slug}", 600, 400),
        },
    )


class FakeContent:
    """In memory content source that records every query it is asked."""

    def __init__(self, records: list[ContentRecord]) -> None:
        self.records = records
        self.queries: list[tuple[str, dict[str, str]]] = []

    async def entries(self, content_type: str, **filters: str) -> list[ContentRecord]:
        self.queries.append((content_type, filters))
        found = [r for r in self.records if r.content_type == content_type]
        for key, value in filters.items():
            name = key.removeprefix("fields.")
            found = [r for r in found if r.fields.get(name) == value]
        return found


class BrokenContent:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    async def entries(self, content_type: str, **filters: str) -> list[ContentRecord]:
        raise self.exc


@pytest.fixture
def templates() -> Environment:
    return templates_factory(ROOT / "assets/html")


@pytest.fixture
def records() -> list[ContentRecord]:
    return [recipe_record("pasta-bake"), recipe_record("lemon-cake", ingredients=["lemons", "flour", "sugar"])]


@pytest.fixture
def content(records: list[ContentRecord]) -> FakeContent:
    return FakeContent(records)

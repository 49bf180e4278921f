from typing import Any, Sequence

from jinja2 import Environment

from domain.models import ContentRecord


class RecipeCard:
    def __init__(self, record: ContentRecord) -> None:
        self.record = record

    @property
    def key(self) -> str:
        return self.record.id

    @property
    def title(self) -> str:
        return self.record.fields.get("title", "")

    @property
    def slug(self) -> str:
        return self.record.fields.get("slug", "")

    @property
    def cooking_time(self) -> str:
        return f"Takes approx {self.record.fields.get('cookingTime')} mins to make"

    @property
    def thumbnail(self) -> dict[str, Any] | None:
        asset = self.record.fields.get("thumbnail") or self.record.fields.get(
            "featuredImage"
        )
        if not asset:
            return None
        file = asset.get("fields", {}).get("file", {})
        if "url" not in file:
            return None
        image = file.get("details", {}).get("image", {})
        return {
            "src": "https:" + file["url"],
            "width": image.get("width"),
            "height": image.get("height"),
        }


class RecipeList:
    def __init__(
        self,
        records: Sequence[ContentRecord],
        *,
        environment: Environment,
        template_name: str = "index.html",
    ) -> None:
        self.cards = [RecipeCard(r) for r in records]
        self.env = environment
        self.name = template_name

    def render(self) -> str:
        return self.env.get_template(self.name).render(cards=self.cards)

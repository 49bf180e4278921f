from dataclasses import dataclass, field
from typing import Any, Final

from domain.rich_text import Node


type Slug = str


class RecipeNotFound(Exception):
    pass


class RecipeShapeError(ValueError):
    pass


@dataclass(frozen=True)
class ContentRecord:
    """One entry as returned by the content service, links already resolved."""

    id: str
    content_type: str
    fields: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"<ContentRecord(id={self.id}, content_type={self.content_type})>"


@dataclass(frozen=True)
class ImageRef:
    url: str
    width: int | None = None
    height: int | None = None
    title: str = ""

    @property
    def src(self) -> str:
        # Asset urls come back protocol relative: //images.ctfassets.net/...
        return "https:" + self.url


@dataclass(frozen=True)
class Recipe:
    id: str
    slug: Slug
    title: str
    cooking_time: int | float
    ingredients: tuple[str, ...]
    method: Node
    featured_image: ImageRef

    @property
    def ingredients_text(self) -> str:
        if not self.ingredients:
            return ""
        return ", ".join(self.ingredients) + "."


class Pending:
    """Stands in for a recipe whose data has not been generated yet."""

    def __repr__(self) -> str:
        return "PENDING"


PENDING: Final = Pending()

import logging
from typing import Any, Protocol

from domain.models import (
    ContentRecord,
    ImageRef,
    Recipe,
    RecipeNotFound,
    RecipeShapeError,
    Slug,
)
from domain.rich_text import RichTextError, parse_document


logger = logging.getLogger(__name__)


SLUG_FIELD = "slug"


def routable(slug: Slug) -> bool:
    """A slug fits in one path segment: no separators, no parent references."""
    return "/" not in slug and "\\" not in slug and slug not in (".", "..")


class ContentSource(Protocol):
    async def entries(
        self, content_type: str, **filters: str
    ) -> list[ContentRecord]: ...


async def fetch_listing(
    content_type: str,
    *,
    content: ContentSource,
) -> list[ContentRecord]:
    return await content.entries(content_type)


async def discover_routes(
    content_type: str,
    *,
    content: ContentSource,
) -> list[Slug]:
    """Slugs of every record of the content type, first occurrence wins."""
    records = await content.entries(content_type)
    slugs: dict[Slug, ContentRecord] = {}
    for record in records:
        slug = record.fields.get(SLUG_FIELD)
        if not slug:
            logger.warning("%r has no %s, skipping.", record, SLUG_FIELD)
        elif not routable(slug):
            logger.warning(
                "%r has an unroutable %s %r, skipping.", record, SLUG_FIELD, slug
            )
        elif slug in slugs:
            logger.warning(
                "Duplicate %s %r on %s, already routed to %s.",
                SLUG_FIELD,
                slug,
                record.id,
                slugs[slug].id,
            )
        else:
            slugs[slug] = record
    return list(slugs)


async def fetch_detail(
    content_type: str,
    slug: Slug,
    *,
    content: ContentSource,
) -> Recipe:
    if not slug:
        raise ValueError("Provide a slug.")

    records = await content.entries(content_type, **{f"fields.{SLUG_FIELD}": slug})
    if not records:
        raise RecipeNotFound(slug)
    if len(records) > 1:
        logger.warning(
            "%d records share %s %r, using %s.",
            len(records),
            SLUG_FIELD,
            slug,
            records[0].id,
        )
    return shape_recipe(records[0])


def _field(record: ContentRecord, name: str) -> Any:
    value = record.fields.get(name)
    if value is None:
        raise RecipeShapeError(f"{record!r} has no '{name}' field.")
    return value


def image_ref(asset: dict[str, Any]) -> ImageRef:
    fields = asset.get("fields") or {}
    file = fields.get("file") or {}
    image = (file.get("details") or {}).get("image") or {}
    if "url" not in file:
        raise RecipeShapeError(f"Asset {asset.get('sys', {}).get('id')} has no file.")
    return ImageRef(
        url=file["url"],
        width=image.get("width"),
        height=image.get("height"),
        title=fields.get("title", ""),
    )


def shape_recipe(record: ContentRecord) -> Recipe:
    try:
        method = parse_document(_field(record, "method"))
    except RichTextError as e:
        raise RecipeShapeError(f"{record!r} has an unreadable method: {e}") from e

    return Recipe(
        id=record.id,
        slug=_field(record, SLUG_FIELD),
        title=_field(record, "title"),
        cooking_time=_field(record, "cookingTime"),
        ingredients=tuple(record.fields.get("ingredients") or ()),
        method=method,
        featured_image=image_ref(_field(record, "featuredImage")),
    )

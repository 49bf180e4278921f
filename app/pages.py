"""Pipelines joined to their views: fetch the content for a route and render it."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.html.recipe_detail import RecipeDetail
from app.html.recipe_list import RecipeList
from domain.models import PENDING, Slug
from domain.services import ContentSource, fetch_detail, fetch_listing


def recipe_path(slug: Slug) -> str:
    return f"/recipes/{slug}"


def templates_factory(html_dir: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(html_dir),
        autoescape=select_autoescape(),
    )


async def render_listing(
    content_type: str,
    *,
    content: ContentSource,
    templates: Environment,
) -> str:
    records = await fetch_listing(content_type, content=content)
    return RecipeList(records, environment=templates).render()


async def render_recipe(
    content_type: str,
    slug: Slug,
    *,
    content: ContentSource,
    templates: Environment,
) -> str:
    recipe = await fetch_detail(content_type, slug, content=content)
    return RecipeDetail(recipe, environment=templates).render()


def render_pending(templates: Environment) -> str:
    return RecipeDetail(PENDING, environment=templates).render()

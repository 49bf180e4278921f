"""Command line entrypoint: export the site as static files, or serve it."""

import argparse
import asyncio
import logging
from pathlib import Path

from rich.logging import RichHandler
import uvicorn

from app import config
from app.app import create_app
from app.pages import recipe_path, render_listing, render_recipe, templates_factory
from domain.contentful import ContentfulClient
from domain.models import RecipeNotFound, RecipeShapeError, Slug
from domain.services import ContentSource, discover_routes


logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def write_page(out_dir: Path, path: str, html: str) -> Path:
    target = out_dir / path.strip("/") / "index.html"
    if not target.resolve().is_relative_to(out_dir.resolve()):
        raise ValueError(f"{path} would be written outside {out_dir}.")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(html, encoding="utf-8")
    return target


async def export_site(
    out_dir: Path,
    *,
    content: ContentSource,
    html_dir: Path,
    content_type: str = "recipe",
) -> list[Slug]:
    """Write the listing and one page per recipe. Returns the slugs written.

    Recipes that vanished since discovery or cannot be shaped are logged and
    skipped. Content service errors abort the export.
    """
    templates = templates_factory(html_dir)
    slugs = await discover_routes(content_type, content=content)
    logger.info("Exporting %d recipes to %s", len(slugs), out_dir)

    listing = await render_listing(content_type, content=content, templates=templates)
    write_page(out_dir, "/", listing)

    async def export_recipe(slug: Slug) -> Slug | None:
        try:
            html = await render_recipe(
                content_type, slug, content=content, templates=templates
            )
        except RecipeNotFound:
            logger.warning("%s disappeared since discovery, skipping.", slug)
            return None
        except RecipeShapeError as e:
            logger.warning("Could not export %s: %s", slug, e)
            return None
        write_page(out_dir, recipe_path(slug), html)
        return slug

    # A failing task cancels the rest before the caller closes the client.
    async with asyncio.TaskGroup() as tasks:
        jobs = [tasks.create_task(export_recipe(slug)) for slug in slugs]
    return [job.result() for job in jobs if job.result() is not None]


async def build(cfg: config.Config, out_dir: Path) -> list[Slug]:
    client = ContentfulClient.from_config(cfg)
    try:
        return await export_site(
            out_dir,
            content=client,
            html_dir=cfg.html_dir,
            content_type=cfg.content_type,
        )
    finally:
        await client.aclose()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render the recipe site from Contentful")
    commands = parser.add_subparsers(dest="command", required=True)

    build_cmd = commands.add_parser("build", help="Export every page as static html")
    build_cmd.add_argument("--out", type=Path, default=None, help="Output directory")

    serve_cmd = commands.add_parser("serve", help="Serve pages, regenerating them as they go stale")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    cfg = config.Config()  # pyright: ignore[reportCallIssue]
    configure_logging(cfg.log_level)

    match args.command:
        case "build":
            out_dir = cfg.output_dir if args.out is None else args.out
            slugs = asyncio.run(build(cfg, out_dir))
            logger.info("Wrote %d recipe pages.", len(slugs))
        case "serve":
            uvicorn.run(create_app(cfg), host=args.host, port=args.port)
        case _:
            raise ValueError(f"Unknown command: {args.command}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

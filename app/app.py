import asyncio
import contextlib
import functools
import logging
from typing import Awaitable, Callable

from starlette.applications import Starlette
from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import HTMLResponse, RedirectResponse, Response
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from app import config
from app.pages import (
    recipe_path,
    render_listing,
    render_pending,
    render_recipe,
    templates_factory,
)
from app.revalidate import PageCache
from domain.contentful import ContentfulClient
from domain.models import RecipeNotFound
from domain.services import ContentSource, discover_routes


logger = logging.getLogger(__name__)


type Generate = Callable[[], Awaitable[str]]


async def regenerate(
    pages: PageCache,
    path: str,
    generate: Generate,
    revalidate: float | None,
) -> None:
    """Replace a stale page, keeping the old one if generation fails."""
    if not pages.begin(path):
        return
    try:
        html = await generate()
    except RecipeNotFound:
        logger.info("%s no longer exists, evicting.", path)
        pages.evict(path)
    except Exception:
        logger.exception("Regenerating %s failed, serving the stale page.", path)
    else:
        pages.put(path, html, revalidate=revalidate)
    finally:
        pages.end(path)


async def serve_page(
    pages: PageCache,
    path: str,
    generate: Generate,
    *,
    revalidate: float | None,
    pending: Callable[[], str] | None = None,
) -> Response:
    page = pages.get(path)
    if page is not None:
        if pages.is_stale(page) and not pages.in_flight(path):
            task = BackgroundTask(regenerate, pages, path, generate, revalidate)
            return HTMLResponse(page.html, background=task)
        return HTMLResponse(page.html)

    claimed = pages.begin(path)
    if not claimed and pending is not None:
        return HTMLResponse(pending())

    try:
        html = await generate()
    except RecipeNotFound:
        logger.info("Nothing at %s, redirecting home.", path)
        return RedirectResponse("/", status_code=307)
    finally:
        if claimed:
            pages.end(path)

    pages.put(path, html, revalidate=revalidate)
    return HTMLResponse(html)


def _listing(app: Starlette) -> Generate:
    state = app.state
    return functools.partial(
        render_listing,
        state.config.content_type,
        content=state.content,
        templates=state.templates,
    )


def _recipe(app: Starlette, slug: str) -> Generate:
    state = app.state
    return functools.partial(
        render_recipe,
        state.config.content_type,
        slug,
        content=state.content,
        templates=state.templates,
    )


async def prerender(app: Starlette) -> None:
    """Generate the listing and every discovered recipe up front."""
    state = app.state
    slugs = await discover_routes(state.config.content_type, content=state.content)
    logger.info("Prerendering %d recipes.", len(slugs))

    jobs = {"/": (_listing(app), state.config.listing_revalidate_seconds)}
    for slug in slugs:
        jobs[recipe_path(slug)] = (_recipe(app, slug), state.config.revalidate_seconds)

    results = await asyncio.gather(
        *(generate() for generate, _ in jobs.values()), return_exceptions=True
    )
    for (path, (_, revalidate)), result in zip(jobs.items(), results):
        if isinstance(result, BaseException):
            logger.warning("Could not prerender %s: %r", path, result)
        else:
            state.pages.put(path, result, revalidate=revalidate)


async def homepage(request: Request) -> Response:
    app = request.app
    return await serve_page(
        app.state.pages,
        "/",
        _listing(app),
        revalidate=app.state.config.listing_revalidate_seconds,
    )


async def recipe_detail(request: Request) -> Response:
    app = request.app
    slug = request.path_params["slug"]
    return await serve_page(
        app.state.pages,
        recipe_path(slug),
        _recipe(app, slug),
        revalidate=app.state.config.revalidate_seconds,
        pending=functools.partial(render_pending, app.state.templates),
    )


def create_app(
    conf: config.Config | None = None,
    *,
    content: ContentSource | None = None,
) -> Starlette:
    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        cfg = config.Config() if conf is None else conf  # pyright: ignore[reportCallIssue]
        client = ContentfulClient.from_config(cfg) if content is None else None

        app.state.config = cfg
        app.state.content = client if content is None else content
        app.state.templates = templates_factory(cfg.html_dir)
        app.state.pages = PageCache()

        try:
            if cfg.prerender:
                await prerender(app)
            yield
        finally:
            if client is not None:
                await client.aclose()

    # Without a config up front the settings are only read at startup.
    if conf is None:
        debug, assets_dir = False, config.ROOT / "assets"
    else:
        debug, assets_dir = conf.env == config.Env.local, conf.assets_dir

    return Starlette(
        debug=debug,
        routes=[
            Route("/", homepage),
            Route("/recipes/{slug}", recipe_detail),
            Mount("/assets", StaticFiles(directory=assets_dir, check_dir=False)),
        ],
        lifespan=lifespan,
    )


app = create_app()

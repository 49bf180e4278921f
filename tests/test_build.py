from pathlib import Path

import pytest

from app.build import export_site, parse_args, write_page
from app.config import ROOT
from conftest import FakeContent, recipe_record


def test_write_page(tmp_path: Path) -> None:
    assert write_page(tmp_path, "/", "home") == tmp_path / "index.html"
    target = write_page(tmp_path, "/recipes/pasta-bake", "pasta")
    assert target == tmp_path / "recipes" / "pasta-bake" / "index.html"
    assert target.read_text() == "pasta"


@pytest.mark.asyncio
async def test_export_site(tmp_path: Path, content: FakeContent) -> None:
    written = await export_site(tmp_path, content=content, html_dir=ROOT / "assets/html")

    assert written == ["pasta-bake", "lemon-cake"]
    assert 'data-key="id-lemon-cake"' in (tmp_path / "index.html").read_text()
    lemon = (tmp_path / "recipes" / "lemon-cake" / "index.html").read_text()
    assert "lemons, flour, sugar." in lemon


@pytest.mark.asyncio
async def test_export_site_skips_vanished_recipes(tmp_path: Path) -> None:
    class Vanishing(FakeContent):
        async def entries(self, content_type: str, **filters: str):
            if filters.get("fields.slug") == "lemon-cake":
                return []
            return await super().entries(content_type, **filters)

    content = Vanishing([recipe_record("pasta-bake"), recipe_record("lemon-cake")])
    written = await export_site(tmp_path, content=content, html_dir=ROOT / "assets/html")

    assert written == ["pasta-bake"]
    assert not (tmp_path / "recipes" / "lemon-cake").exists()


@pytest.mark.asyncio
async def test_export_empty_site(tmp_path: Path) -> None:
    written = await export_site(tmp_path, content=FakeContent([]), html_dir=ROOT / "assets/html")
    assert written == []
    assert 'class="card"' not in (tmp_path / "index.html").read_text()


def test_parse_args() -> None:
    args = parse_args(["build", "--out", "site"])
    assert args.command == "build"
    assert args.out == Path("site")

    args = parse_args(["serve", "--port", "9000"])
    assert (args.command, args.host, args.port) == ("serve", "127.0.0.1", 9000)


def test_write_page_stays_in_out_dir(tmp_path: Path) -> None:
    out_dir = tmp_path / "out"
    with pytest.raises(ValueError, match="outside"):
        write_page(out_dir, "/recipes/../../escape", "boo")
    assert not (tmp_path / "escape").exists()


@pytest.mark.asyncio
async def test_export_site_ignores_escaping_slugs(tmp_path: Path) -> None:
    out_dir = tmp_path / "out"
    content = FakeContent([recipe_record("../escape"), recipe_record("pasta-bake")])

    written = await export_site(out_dir, content=content, html_dir=ROOT / "assets/html")

    assert written == ["pasta-bake"]
    files = {p.relative_to(tmp_path) for p in tmp_path.rglob("*") if p.is_file()}
    assert files == {
        Path("out/index.html"),
        Path("out/recipes/pasta-bake/index.html"),
    }


@pytest.mark.asyncio
async def test_export_site_skips_malformed_recipes(tmp_path: Path) -> None:
    broken = recipe_record("lemon-cake")
    broken.fields.pop("featuredImage")
    content = FakeContent([recipe_record("pasta-bake"), broken])

    written = await export_site(tmp_path, content=content, html_dir=ROOT / "assets/html")

    assert written == ["pasta-bake"]
    assert not (tmp_path / "recipes" / "lemon-cake").exists()

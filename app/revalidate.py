"""Generated pages kept in memory, each with its own revalidation interval."""

from dataclasses import dataclass
import time
from typing import Callable


@dataclass(frozen=True)
class Page:
    html: str
    generated_at: float
    revalidate: float | None = None


class PageCache:
    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self.pages: dict[str, Page] = {}
        self.generating: set[str] = set()

    def get(self, path: str) -> Page | None:
        return self.pages.get(path)

    def put(self, path: str, html: str, *, revalidate: float | None = None) -> Page:
        page = Page(html=html, generated_at=self.clock(), revalidate=revalidate)
        self.pages[path] = page
        return page

    def evict(self, path: str) -> None:
        self.pages.pop(path, None)

    def is_stale(self, page: Page) -> bool:
        if page.revalidate is None:
            return False
        return self.clock() - page.generated_at >= page.revalidate

    # A path is claimed for the duration of one generation so concurrent
    # requests do not fetch the same route twice.
    def begin(self, path: str) -> bool:
        if path in self.generating:
            return False
        self.generating.add(path)
        return True

    def end(self, path: str) -> None:
        self.generating.discard(path)

    def in_flight(self, path: str) -> bool:
        return path in self.generating

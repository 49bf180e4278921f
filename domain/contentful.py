"""Client for the Contentful content delivery api."""

import logging
from typing import Any, Self

import httpx

from domain.models import ContentRecord


logger = logging.getLogger(__name__)


TIMEOUT = 20


class ContentSourceError(Exception):
    def __init__(self, status_code: int, error_id: str, message: str) -> None:
        super().__init__(f"{status_code} {error_id}: {message}")
        self.status_code = status_code
        self.error_id = error_id
        self.message = message


def contentful_client_factory(
    space_id: str,
    access_token: str,
    *,
    environment: str = "master",
    host: str = "cdn.contentful.com",
    timeout: float = TIMEOUT,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=f"https://{host}/spaces/{space_id}/environments/{environment}/",
        headers={
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/vnd.contentful.delivery.v1+json",
        },
        timeout=timeout,
    )


def _is_link(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and value.get("sys", {}).get("type") == "Link"
        and "fields" not in value
    )


class _Includes:
    """Linked assets and entries that came back alongside a page of entries."""

    def __init__(self, items: list[dict[str, Any]], includes: dict[str, Any]) -> None:
        self.index: dict[tuple[str, str], dict[str, Any]] = {}
        for link_type, resources in includes.items():
            for resource in resources:
                self.index[(link_type, resource["sys"]["id"])] = resource
        for item in items:
            self.index.setdefault(("Entry", item["sys"]["id"]), item)

    def lookup(self, link: dict[str, Any]) -> dict[str, Any] | None:
        sys = link["sys"]
        return self.index.get((sys.get("linkType", ""), sys.get("id", "")))

    def resolve(self, value: Any) -> Any:
        # Only one level deep: resolved resources are not themselves resolved.
        if _is_link(value):
            resolved = self.lookup(value)
            if resolved is None:
                logger.debug("Unresolvable link %s", value["sys"])
            return resolved
        if isinstance(value, list):
            resolved_items = (self.resolve(v) for v in value)
            return [v for v in resolved_items if v is not None]
        if isinstance(value, dict):
            return {k: self.resolve(v) for k, v in value.items()}
        return value


def records_from_response(data: dict[str, Any]) -> list[ContentRecord]:
    items: list[dict[str, Any]] = data.get("items", [])
    includes = _Includes(items, data.get("includes", {}))
    return [
        ContentRecord(
            id=item["sys"]["id"],
            content_type=item["sys"]["contentType"]["sys"]["id"],
            fields=includes.resolve(item.get("fields", {})),
        )
        for item in items
    ]


class ContentfulClient:
    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self.http_client = http_client

    @classmethod
    def from_config(cls, config: Any) -> Self:
        return cls(
            contentful_client_factory(
                config.contentful_space_id,
                config.contentful_access_key,
                environment=config.contentful_environment,
                host=config.contentful_host,
                timeout=config.request_timeout,
            )
        )

    async def entries(self, content_type: str, **filters: str) -> list[ContentRecord]:
        """All entries of a content type, in the order the service returns them.

        Keyword filters are passed straight through as query params, so a field
        filter reads `await client.entries("recipe", **{"fields.slug": slug})`.
        """
        params = {"content_type": content_type, **filters}
        logger.debug("Querying entries %s", params)
        resp = await self.http_client.get("entries", params=params)
        if resp.is_error:
            raise _error_from_response(resp)
        return records_from_response(resp.json())

    async def aclose(self) -> None:
        await self.http_client.aclose()


def _error_from_response(resp: httpx.Response) -> ContentSourceError:
    try:
        body = resp.json()
    except ValueError:
        return ContentSourceError(resp.status_code, "Unknown", resp.text)
    return ContentSourceError(
        resp.status_code,
        body.get("sys", {}).get("id", "Unknown"),
        body.get("message", ""),
    )

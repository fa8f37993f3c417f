"""Page operations against a Wiki.js instance.

Usage:
    async with GraphQLClient.from_config(config) as client:
        pages = await list_pages(client)
        docs = filter_pages(pages, "/en/docs", recursive=True)
        outcome = await delete_pages(client, docs)
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from wikit.api.client import GraphQLClient
from wikit.api.models import Page, PageSummary, PageWithContent, ResponseResult
from wikit.errors import WikitError
from wikit.ui.core.async_action import BatchOutcome

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

LOCALE_PATTERN = re.compile(r"^[a-z]{2}(-[a-z]{2,4})?$", re.IGNORECASE)

LIST_PAGES_QUERY = """query {
  pages {
    list(limit: 500, orderBy: PATH) {
      id
      path
      title
      isPublished
      isPrivate
      locale
      contentType
      createdAt
      updatedAt
    }
  }
}"""

PAGE_BY_PATH_QUERY = """query ($path: String!, $locale: String!) {
  pages {
    singleByPath(path: $path, locale: $locale) {
      id
      path
      title
      content
      contentType
      description
      isPublished
      isPrivate
      locale
      tags {
        id
        title
      }
      editor
      createdAt
      updatedAt
      hash
    }
  }
}"""

DELETE_PAGE_MUTATION = """mutation ($id: Int!) {
  pages {
    delete(id: $id) {
      responseResult {
        succeeded
        errorCode
        slug
        message
      }
    }
  }
}"""

MOVE_PAGE_MUTATION = """mutation ($id: Int!, $destinationPath: String!, $destinationLocale: String!) {
  pages {
    move(id: $id, destinationPath: $destinationPath, destinationLocale: $destinationLocale) {
      responseResult {
        succeeded
        errorCode
        slug
        message
      }
    }
  }
}"""

RENDER_PAGE_MUTATION = """mutation ($id: Int!) {
  pages {
    render(id: $id) {
      responseResult {
        succeeded
        errorCode
        slug
        message
      }
    }
  }
}"""


async def list_pages(client: GraphQLClient) -> list[Page]:
    """Fetch every page (ordered by path)."""
    data = await client.execute(LIST_PAGES_QUERY)
    pages = [Page.model_validate(item) for item in data["pages"]["list"]]
    logger.debug(f"Fetched {len(pages)} pages")
    return pages


def _split_prefix(prefix: str) -> tuple[Optional[str], str]:
    """Split ``/en/docs`` into ``("en", "docs")``.

    A path without a leading locale segment (``docs``) matches every locale.
    """
    parts = [part for part in prefix.strip().split("/") if part]
    if parts and prefix.strip().startswith("/") and LOCALE_PATTERN.match(parts[0]):
        return parts[0], "/".join(parts[1:])
    return None, "/".join(parts)


def _is_under(path: str, base: str, recursive: bool) -> bool:
    if not base:
        rest = path
    elif path == base:
        return True
    elif path.startswith(base + "/"):
        rest = path[len(base) + 1:]
    else:
        return False
    return recursive or "/" not in rest


def filter_pages(
    pages: Sequence[Page],
    prefix: str = "",
    recursive: bool = False,
    search: Optional[str] = None,
    limit: int = 0,
) -> list[Page]:
    """Select pages under ``prefix``.

    Args:
        pages: Pages to filter.
        prefix: Path prefix, optionally locale-qualified (``/en/docs``).
        recursive: Include nested pages, not just direct children.
        search: Case-insensitive match against title or path.
        limit: Maximum number of results (0 = all).
    """
    locale, base = _split_prefix(prefix)
    needle = search.lower() if search else None
    selected: list[Page] = []

    for page in pages:
        if locale is not None and page.locale != locale:
            continue
        if prefix and not _is_under(page.path, base, recursive):
            continue
        if needle and needle not in page.title.lower() and needle not in page.path.lower():
            continue
        selected.append(page)

    if limit > 0:
        selected = selected[:limit]
    return selected


async def get_page(client: GraphQLClient, path: str, locale: str = "en") -> Optional[PageWithContent]:
    """Fetch a page with its content, or None if it does not exist."""
    data = await client.execute(PAGE_BY_PATH_QUERY, {"path": path, "locale": locale})
    item = data["pages"]["singleByPath"]
    if item is None:
        return None
    return PageWithContent.model_validate(item)


def _result(data: dict[str, Any], operation: str) -> ResponseResult:
    return ResponseResult.model_validate(data["pages"][operation]["responseResult"])


async def delete_page(client: GraphQLClient, page_id: int) -> ResponseResult:
    """Delete one page by id."""
    data = await client.execute(DELETE_PAGE_MUTATION, {"id": int(page_id)})
    result = _result(data, "delete")
    if result.succeeded:
        logger.info(f"Deleted page {page_id}")
    else:
        logger.warning(f"Delete of page {page_id} failed: {result.message}")
    return result


async def delete_pages(
    client: GraphQLClient,
    pages: Sequence[Page],
    on_progress: Optional[ProgressCallback] = None,
) -> BatchOutcome:
    """Delete pages one at a time, collecting per-page failures.

    A failed page never stops the batch. Callers decide what an all-failed
    outcome means (see ``BatchOutcome.raise_if_all_failed``).
    """
    outcome = BatchOutcome()
    for index, page in enumerate(pages, start=1):
        try:
            result = await delete_page(client, page.id)
        except WikitError as exc:
            outcome.record_failure(f"{page.full_path}: {exc}")
        else:
            if result.succeeded:
                outcome.record_success()
            else:
                outcome.record_failure(f"{page.full_path}: {result.message or 'delete failed'}")
        if on_progress is not None:
            on_progress(index, len(pages))

    logger.info(
        f"Batch delete finished: {outcome.succeeded}/{outcome.total} deleted, {outcome.failed} failed"
    )
    return outcome


async def move_page(
    client: GraphQLClient,
    page_id: int,
    destination_path: str,
    destination_locale: str = "en",
) -> ResponseResult:
    """Move a page to another path and/or locale."""
    data = await client.execute(
        MOVE_PAGE_MUTATION,
        {
            "id": int(page_id),
            "destinationPath": destination_path,
            "destinationLocale": destination_locale,
        },
    )
    result = _result(data, "move")
    logger.info(f"Move page {page_id} -> {destination_locale}/{destination_path}: {result.succeeded}")
    return result


async def render_page(client: GraphQLClient, page_id: int) -> ResponseResult:
    """Re-render a page."""
    data = await client.execute(RENDER_PAGE_MUTATION, {"id": int(page_id)})
    return _result(data, "render")


async def fetch_pages_with_content(
    client: GraphQLClient,
    on_progress: Optional[ProgressCallback] = None,
) -> list[PageWithContent]:
    """Fetch every page with content.

    Pages whose content cannot be fetched are kept without content.
    """
    pages = await list_pages(client)
    result: list[PageWithContent] = []
    for index, page in enumerate(pages, start=1):
        try:
            full = await get_page(client, page.path, page.locale)
        except WikitError as exc:
            logger.warning(f"Failed to fetch content for {page.full_path}: {exc}")
            full = None
        if full is None:
            full = PageWithContent(**page.model_dump(), editor="unknown")
        result.append(full)
        if on_progress is not None:
            on_progress(index, len(pages))
    return result


async def export_pages(
    client: GraphQLClient,
    path: Path,
    include_content: bool = False,
    on_progress: Optional[ProgressCallback] = None,
) -> int:
    """Write every page to a JSON file.

    Returns:
        Number of exported pages.
    """
    pages: Sequence[Page]
    if include_content:
        pages = await fetch_pages_with_content(client, on_progress)
    else:
        pages = await list_pages(client)

    summary = PageSummary.from_pages(list(pages))
    document = {
        "pages": [page.model_dump(by_alias=True, exclude_none=True) for page in pages],
        "exportedAt": datetime.now(timezone.utc).isoformat(),
        "instanceId": client.instance_id,
        "includeContent": include_content,
        "summary": {
            "totalPages": summary.total_pages,
            "publishedPages": summary.published_pages,
            "unpublishedPages": summary.unpublished_pages,
        },
    }

    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    logger.info(f"Exported {len(pages)} pages to {path}")
    return len(pages)

"""Typed records for Wiki.js API responses."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model accepting camelCase API fields."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Page(ApiModel):
    """A page as returned by ``pages.list``."""

    id: int
    path: str
    title: str = ""
    locale: str = "en"
    is_published: bool = True
    is_private: bool = False
    content_type: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def full_path(self) -> str:
        """Locale-qualified path (``/en/docs/setup``)."""
        return f"/{self.locale}/{self.path}"


class PageTag(ApiModel):
    id: int
    title: str


class PageWithContent(Page):
    """A page with its source content (``pages.singleByPath``)."""

    content: str = ""
    description: Optional[str] = None
    editor: str = "markdown"
    tags: list[PageTag] = Field(default_factory=list)
    hash: Optional[str] = None


class ResponseResult(ApiModel):
    """Mutation result envelope."""

    succeeded: bool
    error_code: int = 0
    slug: Optional[str] = None
    message: Optional[str] = None


class PageSummary(ApiModel):
    """Aggregate counts over a page list."""

    total_pages: int = 0
    published_pages: int = 0
    unpublished_pages: int = 0
    pages_by_locale: dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_pages(cls, pages: list[Page]) -> "PageSummary":
        by_locale: dict[str, int] = {}
        for page in pages:
            by_locale[page.locale] = by_locale.get(page.locale, 0) + 1
        published = sum(1 for page in pages if page.is_published)
        return cls(
            total_pages=len(pages),
            published_pages=published,
            unpublished_pages=len(pages) - published,
            pages_by_locale=by_locale,
        )


class SystemInfo(ApiModel):
    """Subset of ``system.info``."""

    current_version: Optional[str] = None
    latest_version: Optional[str] = None
    platform: Optional[str] = None
    operating_system: Optional[str] = None
    db_type: Optional[str] = None
    hostname: Optional[str] = None
    pages_total: Optional[int] = None
    users_total: Optional[int] = None
    groups_total: Optional[int] = None


class SiteConfig(ApiModel):
    """Subset of ``site.config``."""

    host: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    company: Optional[str] = None
    logo_url: Optional[str] = None


class HealthStatus(ApiModel):
    """Result of a connectivity check."""

    is_healthy: bool
    response_time_ms: int
    message: str
    version: str = "unknown"


class InstanceStatus(ApiModel):
    """Status overview for one instance."""

    instance_id: str
    instance_name: str
    site_title: str = ""
    version: Optional[str] = None
    summary: PageSummary = Field(default_factory=PageSummary)
    health: Optional[HealthStatus] = None

    @property
    def locales(self) -> list[str]:
        return sorted(self.summary.pages_by_locale)

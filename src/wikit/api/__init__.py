"""Wiki.js GraphQL API access."""

from wikit.api.client import GraphQLClient
from wikit.api.models import (
    HealthStatus,
    InstanceStatus,
    Page,
    PageSummary,
    PageWithContent,
    ResponseResult,
    SiteConfig,
    SystemInfo,
)

__all__ = [
    "GraphQLClient",
    "HealthStatus",
    "InstanceStatus",
    "Page",
    "PageSummary",
    "PageWithContent",
    "ResponseResult",
    "SiteConfig",
    "SystemInfo",
]

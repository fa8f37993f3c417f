"""Instance-level queries: system info, site config, health and status."""

from __future__ import annotations

import asyncio
import logging
import time

from wikit.api.client import GraphQLClient
from wikit.api.models import HealthStatus, InstanceStatus, PageSummary, SiteConfig, SystemInfo
from wikit.api.pages import list_pages
from wikit.errors import WikitError

logger = logging.getLogger(__name__)

SYSTEM_INFO_QUERY = """query {
  system {
    info {
      currentVersion
      latestVersion
      platform
      operatingSystem
      dbType
      hostname
      pagesTotal
      usersTotal
      groupsTotal
    }
  }
}"""

SITE_CONFIG_QUERY = """query {
  site {
    config {
      host
      title
      description
      company
      logoUrl
    }
  }
}"""


async def get_system_info(client: GraphQLClient) -> SystemInfo:
    data = await client.execute(SYSTEM_INFO_QUERY)
    return SystemInfo.model_validate(data["system"]["info"])


async def get_site_config(client: GraphQLClient) -> SiteConfig:
    data = await client.execute(SITE_CONFIG_QUERY)
    return SiteConfig.model_validate(data["site"]["config"])


async def check_health(client: GraphQLClient) -> HealthStatus:
    """Check an instance by fetching its system info.

    Never raises for API or transport failures; they are reported as an
    unhealthy status.
    """
    started = time.monotonic()
    try:
        info = await get_system_info(client)
    except WikitError as exc:
        elapsed = int((time.monotonic() - started) * 1000)
        logger.warning(f"Health check failed [{client.instance_id}]: {exc}")
        return HealthStatus(
            is_healthy=False,
            response_time_ms=elapsed,
            message=str(exc) or exc.__class__.__name__,
        )

    elapsed = int((time.monotonic() - started) * 1000)
    return HealthStatus(
        is_healthy=True,
        response_time_ms=elapsed,
        message="Instance is responding normally",
        version=info.current_version or "unknown",
    )


async def get_instance_status(
    client: GraphQLClient,
    instance_name: str | None = None,
) -> InstanceStatus:
    """Collect site, version, page counts and health for one instance.

    If the instance is unreachable the status carries placeholder values
    and an unhealthy ``health`` entry instead of raising.
    """
    instance_id = client.instance_id or client.url
    name = instance_name or instance_id
    health = await check_health(client)
    if not health.is_healthy:
        return InstanceStatus(
            instance_id=instance_id,
            instance_name=name,
            site_title="Unavailable",
            health=health,
        )

    try:
        site, info, pages = await asyncio.gather(
            get_site_config(client),
            get_system_info(client),
            list_pages(client),
        )
    except WikitError as exc:
        logger.warning(f"Status query failed [{instance_id}]: {exc}")
        return InstanceStatus(
            instance_id=instance_id,
            instance_name=name,
            site_title="Unavailable",
            health=HealthStatus(
                is_healthy=False,
                response_time_ms=health.response_time_ms,
                message=str(exc),
            ),
        )

    return InstanceStatus(
        instance_id=instance_id,
        instance_name=name,
        site_title=site.title,
        version=info.current_version,
        summary=PageSummary.from_pages(pages),
        health=health,
    )

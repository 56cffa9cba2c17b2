"""
Typed fetch helpers.

Each helper is ``fetch_with_retry`` over one repository read, with a declared
fallback of the same shape as its success value:

    fetch_categories          -> []
    fetch_category_by_slug    -> None
    fetch_published_tools     -> []
    fetch_tools_by_category   -> []
    fetch_tool_by_slug        -> None
    fetch_admin_table_counts  -> 0
    fetch_featured_tools      -> []
    fetch_latest_blog_posts   -> []
    fetch_comparison_posts    -> []
    fetch_post_by_slug        -> None
    fetch_posts_by_category   -> []
"""
from datetime import datetime, timedelta, timezone
from typing import Any

from futureagent.core.init_settings import settings
from futureagent.data.records import (
    BlogPostRecord,
    BlogPostSummary,
    CategoryRecord,
    ComparisonLink,
    FeaturedTool,
    ToolRecord,
)
from futureagent.data.repository import ToolRepository
from futureagent.data.retry import fetch_with_retry


def visibility_cutoff(now: datetime | None = None) -> datetime:
    """Latest publish date still treated as live.

    Rows scheduled within the buffer count as published, which absorbs
    timezone skew between the authoring client and the serving region.
    """
    now = now or datetime.now(timezone.utc)
    return now + timedelta(hours=settings.SCHEDULE_BUFFER_HOURS)


async def fetch_categories(repo: ToolRepository) -> list[CategoryRecord]:
    return await fetch_with_retry(repo.list_categories, [], operation="fetch_categories")


async def fetch_category_by_slug(repo: ToolRepository, slug: str) -> CategoryRecord | None:
    return await fetch_with_retry(
        lambda: repo.category_by_slug(slug), None, operation="fetch_category_by_slug",
    )


async def fetch_published_tools(repo: ToolRepository) -> list[ToolRecord]:
    cutoff = visibility_cutoff()
    return await fetch_with_retry(
        lambda: repo.published_tools(cutoff), [], operation="fetch_published_tools",
    )


async def fetch_tools_by_category(repo: ToolRepository, category_name: str) -> list[ToolRecord]:
    return await fetch_with_retry(
        lambda: repo.tools_in_category(category_name), [], operation="fetch_tools_by_category",
    )


async def fetch_tool_by_slug(repo: ToolRepository, slug: str) -> ToolRecord | None:
    return await fetch_with_retry(
        lambda: repo.tool_by_slug(slug), None, operation="fetch_tool_by_slug",
    )


async def fetch_admin_table_counts(
    repo: ToolRepository,
    table: str,
    where: tuple[str, Any] | None = None,
) -> int:
    return await fetch_with_retry(
        lambda: repo.count_rows(table, where), 0, operation=f"count_{table}",
    )


async def fetch_featured_tools(repo: ToolRepository) -> list[FeaturedTool]:
    return await fetch_with_retry(
        lambda: repo.featured_tools(limit=3), [], operation="fetch_featured_tools",
    )


async def fetch_latest_blog_posts(repo: ToolRepository) -> list[BlogPostSummary]:
    cutoff = visibility_cutoff()
    return await fetch_with_retry(
        lambda: repo.latest_posts(cutoff, limit=3), [], operation="fetch_latest_blog_posts",
    )


async def fetch_comparison_posts(repo: ToolRepository) -> list[ComparisonLink]:
    return await fetch_with_retry(repo.comparison_posts, [], operation="fetch_comparison_posts")


async def fetch_post_by_slug(repo: ToolRepository, slug: str) -> BlogPostRecord | None:
    cutoff = visibility_cutoff()
    return await fetch_with_retry(
        lambda: repo.post_by_slug(slug, cutoff), None, operation="fetch_post_by_slug",
    )


async def fetch_posts_by_category(repo: ToolRepository, category_slug: str) -> list[BlogPostSummary]:
    cutoff = visibility_cutoff()
    return await fetch_with_retry(
        lambda: repo.posts_in_category(category_slug, cutoff), [], operation="fetch_posts_by_category",
    )

"""
Persistence access for the directory.

Every method returns a ``QueryResult`` instead of raising: database errors are
reported as ``error`` with a message, mirroring the hosted database client's
``{data, error}`` convention. Callers decide whether to retry, default, or fail.

Each call opens its own session, so reads may run concurrently under
``asyncio.gather`` without sharing an ``AsyncSession``.
"""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from futureagent.data.records import (
    AffiliateLinkRecord,
    BlogPostRecord,
    BlogPostSummary,
    CategoryRecord,
    ComparisonLink,
    FeaturedTool,
    FeatureRecord,
    PricingPlanRecord,
    ToolRecord,
)
from futureagent.data.retry import QueryResult
from futureagent.models import (
    AffiliateClick,
    AffiliateLink,
    BlogPost,
    Category,
    Tool,
    ToolCon,
    ToolFeature,
    ToolIntegration,
    ToolPricingPlan,
    ToolPro,
)

T = TypeVar("T")

# Tables the admin dashboard may count
COUNTABLE_TABLES = {
    "ai_tools": Tool,
    "blog_posts": BlogPost,
    "categories": Category,
    "affiliate_links": AffiliateLink,
    "affiliate_clicks": AffiliateClick,
}


# Connect failures (refused, DNS, timeout) surface from the driver unwrapped
PERSISTENCE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


def _error_message(exc: BaseException) -> str:
    orig = getattr(exc, "orig", None)
    message = str(orig) if orig is not None else str(exc)
    return message or type(exc).__name__


class ToolRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def _run(self, query: Callable[[AsyncSession], Awaitable[T]]) -> QueryResult[T]:
        try:
            async with self._session_factory() as session:
                return QueryResult.ok(await query(session))
        except PERSISTENCE_ERRORS as exc:
            return QueryResult.fail(_error_message(exc))

    async def _all(self, stmt: Any, record: type[T]) -> QueryResult[list[T]]:
        async def query(session: AsyncSession) -> list[T]:
            rows = (await session.execute(stmt)).scalars().all()
            return [record.model_validate(row) for row in rows]
        return await self._run(query)

    async def _one(self, stmt: Any, record: type[T]) -> QueryResult[T | None]:
        async def query(session: AsyncSession) -> T | None:
            row = (await session.execute(stmt)).scalars().first()
            return None if row is None else record.model_validate(row)
        return await self._run(query)

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    async def list_categories(self) -> QueryResult[list[CategoryRecord]]:
        stmt = select(Category).order_by(Category.name.asc())
        return await self._all(stmt, CategoryRecord)

    async def category_by_slug(self, slug: str) -> QueryResult[CategoryRecord | None]:
        return await self._one(select(Category).where(Category.slug == slug), CategoryRecord)

    # -------------------------------------------------------------------------
    # Tools
    # -------------------------------------------------------------------------

    async def published_tools(self, visible_before: datetime) -> QueryResult[list[ToolRecord]]:
        stmt = (
            select(Tool)
            .where(Tool.published.is_(True))
            .where(Tool.published_date <= visible_before)
            .order_by(Tool.published_date.desc(), Tool.rating.desc())
        )
        return await self._all(stmt, ToolRecord)

    async def tools_in_category(self, category_name: str) -> QueryResult[list[ToolRecord]]:
        stmt = (
            select(Tool)
            .where(Tool.published.is_(True))
            .where(func.lower(Tool.category) == category_name.lower())
            .order_by(Tool.rating.desc())
        )
        return await self._all(stmt, ToolRecord)

    async def tool_by_slug(self, slug: str) -> QueryResult[ToolRecord | None]:
        return await self._one(select(Tool).where(Tool.slug == slug), ToolRecord)

    async def featured_tools(self, limit: int = 3) -> QueryResult[list[FeaturedTool]]:
        stmt = (
            select(Tool)
            .where(Tool.published.is_(True))
            .where(Tool.featured.is_(True))
            .order_by(Tool.rating.desc())
            .limit(limit)
        )
        return await self._all(stmt, FeaturedTool)

    async def find_tools(self, tokens: list[str]) -> QueryResult[list[ToolRecord]]:
        """Tools whose slug or exact name is one of ``tokens``."""
        stmt = select(Tool).where(or_(Tool.slug.in_(tokens), Tool.name.in_(tokens)))
        return await self._all(stmt, ToolRecord)

    # -------------------------------------------------------------------------
    # Tool children (ordered by sort_order)
    # -------------------------------------------------------------------------

    async def tool_pros(self, tool_id: int) -> QueryResult[list[str]]:
        stmt = select(ToolPro.text).where(ToolPro.tool_id == tool_id).order_by(ToolPro.sort_order.asc())
        return await self._run(lambda session: self._texts(session, stmt))

    async def tool_cons(self, tool_id: int) -> QueryResult[list[str]]:
        stmt = select(ToolCon.text).where(ToolCon.tool_id == tool_id).order_by(ToolCon.sort_order.asc())
        return await self._run(lambda session: self._texts(session, stmt))

    async def tool_integrations(self, tool_id: int) -> QueryResult[list[str]]:
        stmt = (
            select(ToolIntegration.integration_name)
            .where(ToolIntegration.tool_id == tool_id)
            .order_by(ToolIntegration.sort_order.asc())
        )
        return await self._run(lambda session: self._texts(session, stmt))

    async def top_pricing_plan(self, tool_id: int) -> QueryResult[PricingPlanRecord | None]:
        stmt = (
            select(ToolPricingPlan)
            .where(ToolPricingPlan.tool_id == tool_id)
            .order_by(ToolPricingPlan.sort_order.asc())
            .limit(1)
        )
        return await self._one(stmt, PricingPlanRecord)

    async def tool_features(self, tool_id: int, limit: int = 3) -> QueryResult[list[FeatureRecord]]:
        stmt = (
            select(ToolFeature)
            .where(ToolFeature.tool_id == tool_id)
            .order_by(ToolFeature.sort_order.asc())
            .limit(limit)
        )
        return await self._all(stmt, FeatureRecord)

    async def affiliate_link_for_tool(self, tool_id: int) -> QueryResult[AffiliateLinkRecord | None]:
        stmt = select(AffiliateLink).where(AffiliateLink.tool_id == tool_id)
        return await self._one(stmt, AffiliateLinkRecord)

    @staticmethod
    async def _texts(session: AsyncSession, stmt: Any) -> list[str]:
        return list((await session.execute(stmt)).scalars().all())

    # -------------------------------------------------------------------------
    # Affiliate links
    # -------------------------------------------------------------------------

    async def affiliate_link_by_slug(self, slug: str) -> QueryResult[AffiliateLinkRecord | None]:
        stmt = select(AffiliateLink).where(AffiliateLink.slug == slug)
        return await self._one(stmt, AffiliateLinkRecord)

    async def record_click(
        self,
        *,
        tool_id: int | None,
        tool_slug: str,
        user_ip: str,
        user_agent: str,
        referrer: str,
    ) -> QueryResult[int]:
        async def insert(session: AsyncSession) -> int:
            click = AffiliateClick(
                tool_id=tool_id,
                tool_slug=tool_slug,
                user_ip=user_ip,
                user_agent=user_agent,
                referrer=referrer,
            )
            session.add(click)
            await session.commit()
            return click.id
        return await self._run(insert)

    # -------------------------------------------------------------------------
    # Blog posts
    # -------------------------------------------------------------------------

    async def latest_posts(self, visible_before: datetime, limit: int = 3) -> QueryResult[list[BlogPostSummary]]:
        stmt = (
            select(BlogPost)
            .where(BlogPost.published.is_(True))
            .where(BlogPost.published_date <= visible_before)
            .order_by(BlogPost.created_at.desc())
            .limit(limit)
        )
        return await self._all(stmt, BlogPostSummary)

    async def post_by_slug(self, slug: str, visible_before: datetime) -> QueryResult[BlogPostRecord | None]:
        stmt = (
            select(BlogPost)
            .where(BlogPost.slug == slug)
            .where(BlogPost.published.is_(True))
            .where(BlogPost.published_date <= visible_before)
        )
        return await self._one(stmt, BlogPostRecord)

    async def posts_in_category(
        self,
        category_slug: str,
        visible_before: datetime,
    ) -> QueryResult[list[BlogPostSummary]]:
        stmt = (
            select(BlogPost)
            .where(BlogPost.category_slug == category_slug)
            .where(BlogPost.published.is_(True))
            .where(BlogPost.published_date <= visible_before)
            .order_by(BlogPost.published_date.desc())
        )
        return await self._all(stmt, BlogPostSummary)

    async def comparison_posts(self) -> QueryResult[list[ComparisonLink]]:
        stmt = (
            select(BlogPost)
            .where(BlogPost.published.is_(True))
            .where(BlogPost.slug.ilike("%-vs-%"))
            .order_by(BlogPost.published_date.desc())
        )
        return await self._all(stmt, ComparisonLink)

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    async def count_rows(
        self,
        table: str,
        where: tuple[str, Any] | None = None,
    ) -> QueryResult[int]:
        model = COUNTABLE_TABLES.get(table)
        if model is None:
            return QueryResult.fail(f"Unknown table: {table}")

        stmt = select(func.count()).select_from(model)
        if where is not None:
            column, value = where
            if column not in model.__table__.c:
                return QueryResult.fail(f"Unknown column: {table}.{column}")
            stmt = stmt.where(model.__table__.c[column] == value)

        async def query(session: AsyncSession) -> int:
            return (await session.execute(stmt)).scalar_one()
        return await self._run(query)

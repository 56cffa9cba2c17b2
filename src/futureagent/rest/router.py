"""
REST API Routes.

Read endpoints go through the typed fetch helpers, so a database outage
degrades to empty lists (or 404 for single records) instead of a 5xx.
"""
import asyncio
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse

from futureagent.comparison import (
    Comparison,
    ToolReview,
    build_comparison,
    build_tool_review,
    parse_compare_tokens,
)
from futureagent.core.database import get_repository
from futureagent.data.fetchers import (
    fetch_admin_table_counts,
    fetch_categories,
    fetch_category_by_slug,
    fetch_comparison_posts,
    fetch_featured_tools,
    fetch_latest_blog_posts,
    fetch_post_by_slug,
    fetch_posts_by_category,
    fetch_published_tools,
    fetch_tool_by_slug,
    fetch_tools_by_category,
)
from futureagent.data.records import (
    BlogPostRecord,
    BlogPostSummary,
    CategoryRecord,
    ComparisonLink,
    FeaturedTool,
    ToolRecord,
)
from futureagent.data.repository import ToolRepository
from futureagent.rest.schemas import AdminCounts

router = APIRouter(prefix="/api/v1", tags=["REST API"])


# =============================================================================
# Categories
# =============================================================================

@router.get("/categories", response_model=list[CategoryRecord])
async def list_categories(repo: ToolRepository = Depends(get_repository)):
    """All categories, by name."""
    return await fetch_categories(repo)


@router.get("/categories/{slug}", response_model=CategoryRecord)
async def get_category(slug: str, repo: ToolRepository = Depends(get_repository)):
    category = await fetch_category_by_slug(repo, slug)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("/categories/{slug}/tools", response_model=list[ToolRecord])
async def get_category_tools(slug: str, repo: ToolRepository = Depends(get_repository)):
    """Published tools filed under the category's display name."""
    category = await fetch_category_by_slug(repo, slug)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return await fetch_tools_by_category(repo, category.name)


@router.get("/categories/{slug}/posts", response_model=list[BlogPostSummary])
async def get_category_posts(slug: str, repo: ToolRepository = Depends(get_repository)):
    """Live posts filed under the category slug, newest first."""
    return await fetch_posts_by_category(repo, slug)


# =============================================================================
# Tools
# =============================================================================

@router.get("/tools", response_model=list[ToolRecord])
async def list_tools(repo: ToolRepository = Depends(get_repository)):
    """Directory listing: live tools, newest first, then by rating."""
    return await fetch_published_tools(repo)


@router.get("/tools/featured", response_model=list[FeaturedTool])
async def list_featured_tools(repo: ToolRepository = Depends(get_repository)):
    return await fetch_featured_tools(repo)


@router.get("/tools/{slug}", response_model=ToolRecord)
async def get_tool(slug: str, repo: ToolRepository = Depends(get_repository)):
    tool = await fetch_tool_by_slug(repo, slug)
    if tool is None or not tool.published:
        raise HTTPException(status_code=404, detail="Tool not found")
    return tool


@router.get("/tools/{slug}/review", response_model=ToolReview)
async def get_tool_review(slug: str, repo: ToolRepository = Depends(get_repository)):
    """Review page model: the tool with its pros, cons, pricing and features."""
    review = await build_tool_review(repo, slug)
    if review is None:
        raise HTTPException(status_code=404, detail="Tool not found")
    return review


# =============================================================================
# Blog posts
# =============================================================================

@router.get("/posts/latest", response_model=list[BlogPostSummary])
async def list_latest_posts(repo: ToolRepository = Depends(get_repository)):
    return await fetch_latest_blog_posts(repo)


@router.get("/posts/comparisons", response_model=list[ComparisonLink])
async def list_comparison_posts(repo: ToolRepository = Depends(get_repository)):
    """Published "<a>-vs-<b>" articles."""
    return await fetch_comparison_posts(repo)


@router.get("/posts/{slug}", response_model=BlogPostRecord)
async def get_post(slug: str, repo: ToolRepository = Depends(get_repository)):
    post = await fetch_post_by_slug(repo, slug)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


# =============================================================================
# Comparison
# =============================================================================

@router.get("/compare", response_model=Comparison)
async def compare_tools(tools: str | None = None, repo: ToolRepository = Depends(get_repository)):
    """
    Compare two tools given as ``?tools=<a>,<b>`` (slugs or names).

    A single token redirects to the directory with that tool preselected;
    any other count is not found.
    """
    tokens = parse_compare_tokens(tools)
    if len(tokens) == 1:
        return RedirectResponse(
            f"/tools?compare=true&preselect={quote(tokens[0])}", status_code=307,
        )
    if len(tokens) != 2:
        raise HTTPException(status_code=404, detail="Comparison not found")
    return await build_comparison(repo, tokens[0], tokens[1])


# =============================================================================
# Admin dashboard
# =============================================================================

@router.get("/admin/counts", response_model=AdminCounts)
async def admin_counts(repo: ToolRepository = Depends(get_repository)):
    (
        tools,
        published_tools,
        posts,
        published_posts,
        categories,
        affiliate_links,
        affiliate_clicks,
    ) = await asyncio.gather(
        fetch_admin_table_counts(repo, "ai_tools"),
        fetch_admin_table_counts(repo, "ai_tools", ("published", True)),
        fetch_admin_table_counts(repo, "blog_posts"),
        fetch_admin_table_counts(repo, "blog_posts", ("published", True)),
        fetch_admin_table_counts(repo, "categories"),
        fetch_admin_table_counts(repo, "affiliate_links"),
        fetch_admin_table_counts(repo, "affiliate_clicks"),
    )
    return AdminCounts(
        tools=tools,
        published_tools=published_tools,
        posts=posts,
        published_posts=published_posts,
        categories=categories,
        affiliate_links=affiliate_links,
        affiliate_clicks=affiliate_clicks,
    )

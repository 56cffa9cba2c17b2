"""Single-tool review page: one published tool joined with its child rows."""
import logging
from datetime import datetime

from pydantic import BaseModel

from futureagent.comparison.hydrator import hydrate_tool
from futureagent.comparison.verdict import DEFAULT_CATEGORY
from futureagent.data.fetchers import fetch_tool_by_slug
from futureagent.data.records import FeatureRecord
from futureagent.data.repository import ToolRepository

logger = logging.getLogger(__name__)


class ToolReview(BaseModel):
    name: str
    slug: str
    tagline: str
    rating: float
    logo: str
    website_url: str
    category: str
    tags: list[str]
    intro: str
    description: str
    cta: str
    pros: list[str]
    cons: list[str]
    pricing: str
    integrations: list[str]
    features: list[FeatureRecord]
    published_date: datetime | None = None


def review_intro(name: str, review_intro: str | None, description: str | None) -> str:
    return review_intro or description or f"{name} is a powerful AI tool that helps you work smarter and faster."


async def build_tool_review(repo: ToolRepository, slug: str) -> ToolReview | None:
    """None when the tool is missing, unpublished, or unreadable."""
    tool = await fetch_tool_by_slug(repo, slug)
    if tool is None or not tool.published:
        logger.info("No published tool for review: %s", slug)
        return None

    # Child reads degrade independently, as in comparisons
    hydrated = await hydrate_tool(repo, tool)

    return ToolReview(
        name=tool.name,
        slug=tool.slug,
        tagline=tool.tagline or "",
        rating=tool.rating or 0.0,
        logo=hydrated.logo,
        website_url=tool.website_url or "#",
        category=tool.category or DEFAULT_CATEGORY,
        tags=tool.tags,
        intro=review_intro(tool.name, tool.review_intro, tool.description),
        description=tool.description or "",
        cta=hydrated.cta,
        pros=hydrated.pros,
        cons=hydrated.cons,
        pricing=hydrated.pricing,
        integrations=hydrated.integrations,
        features=hydrated.features,
        published_date=tool.published_date,
    )

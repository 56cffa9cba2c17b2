"""Typed read models returned by the repository.

Rows are validated here; loosely typed JSON columns never leave this module
unparsed.
"""
import json
import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)


def parse_string_list(value: Any) -> list[str]:
    """Coerce a JSON column into a list of strings.

    Accepts a list or a JSON-encoded list. Anything else yields ``[]``.
    """
    if not value:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            logger.debug("Discarding unparseable JSON list: %r", value[:80])
            return []
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


class Record(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CategoryRecord(Record):
    id: int
    slug: str
    name: str
    icon: str | None = None
    description: str | None = None
    long_description: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    image_url: str | None = None


class ToolRecord(Record):
    id: int
    name: str
    slug: str
    category: str | None = None
    rating: float | None = None
    logo: str | None = None
    website_url: str | None = None
    tagline: str | None = None
    description: str | None = None
    review_intro: str | None = None
    tags: list[str] = []
    pricing_model: str | None = None
    published: bool = False
    featured: bool = False
    published_date: datetime | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _parse_tags(cls, value: Any) -> list[str]:
        return parse_string_list(value)


class FeaturedTool(Record):
    """Narrow projection for the homepage."""
    id: int
    name: str
    slug: str
    logo: str | None = None
    tagline: str | None = None
    category: str | None = None
    rating: float | None = None


class BlogPostSummary(Record):
    id: int
    slug: str
    title: str
    excerpt: str | None = None
    featured_image: str | None = None
    category: str | None = None
    reading_time: int | None = None


class BlogPostRecord(BlogPostSummary):
    """A full article, for the post page."""
    content: str | None = None
    category_slug: str | None = None
    tags: list[str] = []
    published_date: datetime | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _parse_tags(cls, value: Any) -> list[str]:
        return parse_string_list(value)


class ComparisonLink(Record):
    title: str
    slug: str


class PricingPlanRecord(Record):
    price_label: str | None = None
    price: float | None = None
    period: str | None = None


class FeatureRecord(Record):
    title: str
    description: str | None = None


class AffiliateLinkRecord(Record):
    tool_id: int
    slug: str
    target_url: str

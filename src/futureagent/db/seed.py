"""
Database seeding with a small, fixed sample directory.

Usage:
    # On startup (dev and prod): only seeds an empty database
    await seed_if_empty()

    # Manually
    python -m futureagent.db.seed
"""
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from futureagent.db.taxonomy import PILLARS
from futureagent.models import (
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

logger = logging.getLogger(__name__)


# =============================================================================
# Sample Data
# =============================================================================

# days_ago < 0 schedules the row in the future
TOOLS_SAMPLE = [
    {
        "name": "Jasper AI",
        "slug": "jasper-ai",
        "category": "Writing",
        "rating": 4.7,
        "website_url": "https://www.jasper.ai",
        "tagline": "AI copilot for enterprise marketing teams",
        "description": "Jasper writes on-brand marketing copy, blog posts and campaigns.",
        "review_intro": "Jasper is the most polished long-form writing assistant we have tested.",
        "tags": ["content-creation", "marketing", "paid"],
        "pricing_model": "Paid",
        "featured": True,
        "days_ago": 30,
        "pros": ["Brand voice memory", "Strong long-form templates", "Team workflows"],
        "cons": ["No free plan", "Output needs fact-checking"],
        "pricing": [
            {"price_label": None, "price": 49, "period": "month"},
            {"price_label": "Business", "price": None, "period": "month"},
        ],
        "integrations": ["Google Docs", "Surfer SEO", "Chrome", "Webflow"],
        "features": [
            {"title": "Brand Voice", "description": "Learns your style guide and tone"},
            {"title": "Campaigns", "description": "Generates multi-channel campaign assets"},
            {"title": "Templates", "description": "50+ copywriting frameworks"},
            {"title": "Analytics", "description": "Content performance insights"},
        ],
        "affiliate": {"slug": "jasper", "target_url": "https://www.jasper.ai/?fpr=futureagent"},
    },
    {
        "name": "Copy.ai",
        "slug": "copy-ai",
        "category": "Writing",
        "rating": 4.5,
        "website_url": "https://www.copy.ai",
        "tagline": "GTM AI platform for sales and marketing copy",
        "description": "Copy.ai automates short-form copy and go-to-market workflows.",
        "tags": '["free", "beginner-friendly"]',
        "pricing_model": "Freemium",
        "featured": True,
        "days_ago": 20,
        "pros": ["Generous free plan", "Fast short-form output"],
        "cons": ["Weaker long-form"],
        "pricing": [{"price_label": "Free plan available", "price": 0, "period": "month"}],
        "integrations": ["HubSpot", "Salesforce"],
        "features": [
            {"title": "Workflows", "description": "Chains prompts into repeatable automations"},
            {"title": "Infobase", "description": None},
        ],
        "affiliate": None,
    },
    {
        "name": "Writesonic",
        "slug": "writesonic",
        "category": "writing",
        "rating": 4.2,
        "website_url": "https://writesonic.com",
        "tagline": "SEO-focused AI writer",
        "description": None,
        "tags": None,
        "pricing_model": None,
        "featured": False,
        "days_ago": 10,
        "pros": ["Built-in SEO checks"],
        "cons": ["Credit system is confusing", "Inconsistent quality"],
        "pricing": [{"price_label": None, "price": None, "period": None}],
        "integrations": [],
        "features": [],
        "affiliate": None,
    },
    {
        "name": "Surfer SEO",
        "slug": "surfer-seo",
        "category": "SEO & Content Optimization",
        "rating": 4.6,
        "website_url": "https://surferseo.com",
        "tagline": "Content optimization for search",
        "description": "Surfer scores your drafts against what ranks today.",
        "tags": ["seo"],
        "pricing_model": "Paid",
        "featured": False,
        "days_ago": 15,
        "pros": ["Clear content score", "SERP analyzer"],
        "cons": ["Pricey for solo writers"],
        "pricing": [{"price_label": None, "price": 89, "period": "month"}],
        "integrations": ["Google Docs", "WordPress", "Jasper AI"],
        "features": [{"title": "Content Editor", "description": "Real-time optimization guidance"}],
        "affiliate": {"slug": "surfer", "target_url": "https://surferseo.com/?via=futureagent"},
    },
    {
        "name": "ChatGPT",
        "slug": "chatgpt",
        "category": "Chatbots",
        "rating": 4.8,
        "website_url": "https://chatgpt.com",
        "tagline": "General-purpose AI assistant",
        "description": "OpenAI's conversational assistant.",
        "tags": ["free", "paid"],
        "pricing_model": "Freemium",
        "featured": True,
        "days_ago": 60,
        "pros": ["Versatile", "Huge plugin ecosystem"],
        "cons": ["Can hallucinate"],
        "pricing": [{"price_label": None, "price": 20, "period": "month"}],
        "integrations": ["Slack", "Zapier"],
        "features": [{"title": "Custom GPTs", "description": "Build your own assistants"}],
        "affiliate": None,
    },
    {
        "name": "Claude",
        "slug": "claude",
        "category": "chatbots",
        "rating": 4.8,
        "website_url": "https://claude.ai",
        "tagline": "Thoughtful AI assistant",
        "description": "A conversational assistant with long context.",
        "tags": [],
        "pricing_model": "Freemium",
        "featured": False,
        "days_ago": 45,
        "pros": ["Long context window"],
        "cons": ["Fewer integrations"],
        "pricing": [{"price_label": None, "price": 20, "period": "month"}],
        "integrations": [],
        "features": [{"title": "Projects", "description": "Shared knowledge per project"}],
        "affiliate": None,
    },
    {
        "name": "GitHub Copilot",
        "slug": "github-copilot",
        "category": "Coding",
        "rating": None,
        "logo": "https://github.githubassets.com/images/modules/site/copilot/copilot.png",
        "website_url": None,
        "tagline": "Your AI pair programmer",
        "description": None,
        "tags": ["paid"],
        "pricing_model": None,
        "featured": False,
        "days_ago": 5,
        "pros": [],
        "cons": [],
        "pricing": [],
        "integrations": [],
        "features": [],
        "affiliate": None,
    },
    {
        "name": "Scheduled Tool",
        "slug": "scheduled-tool",
        "category": "Automation",
        "rating": 4.9,
        "website_url": "https://example.com",
        "tagline": "Goes live next week",
        "description": None,
        "tags": [],
        "pricing_model": None,
        "featured": True,
        "days_ago": -7,
        "pros": [],
        "cons": [],
        "pricing": [],
        "integrations": [],
        "features": [],
        "affiliate": None,
    },
]

UNPUBLISHED_TOOL = {
    "name": "Draft Tool",
    "slug": "draft-tool",
    "category": "Research",
    "rating": 5.0,
    "published": False,
    "featured": True,
}

POSTS_SAMPLE = [
    {
        "title": "Jasper AI vs Copy.ai: Which Writer Wins?",
        "slug": "jasper-ai-vs-copy-ai",
        "excerpt": "Two writing assistants, head to head.",
        "content": "Jasper wins on long-form polish; Copy.ai wins on price and speed.",
        "category": "Comparisons",
        "category_slug": "comparisons",
        "tags": ["writing"],
        "reading_time": 8,
        "published": True,
        "days_ago": 3,
    },
    {
        "title": "The Best AI Writing Tools",
        "slug": "best-ai-writing-tools",
        "excerpt": "Our shortlist after testing a dozen writers.",
        "content": "We ranked writers on output quality, editing tools and price.",
        "category": "Writing",
        "category_slug": "writing",
        "tags": [],
        "reading_time": 12,
        "published": True,
        "days_ago": 1,
    },
    {
        "title": "ChatGPT vs Claude",
        "slug": "chatgpt-vs-claude",
        "excerpt": "Still in review.",
        "content": None,
        "category": "Comparisons",
        "category_slug": "comparisons",
        "tags": [],
        "reading_time": 10,
        "published": False,
        "days_ago": 2,
    },
    {
        "title": "Surfer SEO vs Jasper AI",
        "slug": "surfer-seo-vs-jasper-ai",
        "excerpt": "Scheduled for next month.",
        "content": None,
        "category": "Comparisons",
        "category_slug": "comparisons",
        "tags": [],
        "reading_time": 9,
        "published": True,
        "days_ago": -30,
    },
]


# =============================================================================
# Seed Functions
# =============================================================================

def _build_tool(entry: dict, published_date: datetime) -> Tool:
    tool = Tool(
        name=entry["name"],
        slug=entry["slug"],
        category=entry["category"],
        rating=entry["rating"],
        logo=entry.get("logo"),
        website_url=entry["website_url"],
        tagline=entry["tagline"],
        description=entry["description"],
        review_intro=entry.get("review_intro"),
        tags=entry["tags"],
        pricing_model=entry["pricing_model"],
        published=True,
        featured=entry["featured"],
        published_date=published_date,
    )
    tool.pros = [ToolPro(text=text, sort_order=i) for i, text in enumerate(entry["pros"])]
    tool.cons = [ToolCon(text=text, sort_order=i) for i, text in enumerate(entry["cons"])]
    tool.pricing_plans = [ToolPricingPlan(sort_order=i, **plan) for i, plan in enumerate(entry["pricing"])]
    tool.integrations = [
        ToolIntegration(integration_name=name, sort_order=i)
        for i, name in enumerate(entry["integrations"])
    ]
    tool.features = [ToolFeature(sort_order=i, **feature) for i, feature in enumerate(entry["features"])]
    if entry["affiliate"]:
        tool.affiliate_link = AffiliateLink(**entry["affiliate"])
    return tool


async def seed_if_empty(session_factory: async_sessionmaker[AsyncSession] | None = None) -> bool:
    """
    Seed database with sample data if empty.

    Returns:
        True if seeding occurred, False if data already exists.
    """
    if session_factory is None:
        from futureagent.core.database import AsyncSessionLocal
        session_factory = AsyncSessionLocal

    now = datetime.now(timezone.utc)

    async with session_factory() as session:
        result = await session.execute(select(Category).limit(1))
        if result.scalar():
            return False  # Already seeded

        session.add_all([Category(**pillar) for pillar in PILLARS])

        for entry in TOOLS_SAMPLE:
            session.add(_build_tool(entry, now - timedelta(days=entry["days_ago"])))
        session.add(Tool(published_date=now, **UNPUBLISHED_TOOL))

        for entry in POSTS_SAMPLE:
            post = {key: value for key, value in entry.items() if key != "days_ago"}
            session.add(
                BlogPost(
                    published_date=now - timedelta(days=entry["days_ago"]),
                    created_at=now - timedelta(days=entry["days_ago"]),
                    **post,
                )
            )

        await session.commit()

        logger.info(
            "Seeded %d categories, %d tools, %d posts",
            len(PILLARS), len(TOOLS_SAMPLE) + 1, len(POSTS_SAMPLE),
        )
        return True


# =============================================================================
# CLI for manual seeding
# =============================================================================

if __name__ == "__main__":
    import asyncio

    from futureagent.core.database import engine
    from futureagent.models import Base

    async def main():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        if await seed_if_empty():
            print("Done")
        else:
            print("Database already seeded. Delete dev.db to reseed.")

        await engine.dispose()

    asyncio.run(main())

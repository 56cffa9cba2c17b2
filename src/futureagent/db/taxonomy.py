"""
One-shot migration of legacy category labels onto the pillar taxonomy.

Steps:
    1. Replace the categories table with the fixed PILLARS.
    2. Map each tool's category through LEGACY_MAPPING (default: productivity).
    3. Same for blog posts, also matching on their legacy category_slug.

A legacy label that differs from the new pillar name is kept as a tag, so no
row loses its original classification. Re-running is a no-op for rows that
were already migrated.

Rows are updated one at a time with no transaction spanning them; a failure
mid-run leaves the tables partially migrated. Re-run to finish.

Usage:
    APP_MODE=prod python -m futureagent.db.taxonomy
"""
import logging
from dataclasses import dataclass

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from futureagent.data.records import parse_string_list
from futureagent.models import BlogPost, Category, Tool

logger = logging.getLogger(__name__)

DEFAULT_PILLAR = "productivity"

PILLARS = [
    {
        "name": "Marketing",
        "slug": "marketing",
        "icon": "📊",
        "description": "Strategies, ads, and tools to grow your brand and reach more customers.",
        "meta_title": "Best AI Marketing Tools | Grow Your Business",
        "meta_description": "Discover the top-rated AI marketing tools for advertising, email, and social media.",
    },
    {
        "name": "Writing",
        "slug": "writing",
        "icon": "✍️",
        "description": "AI-powered writing, copywriting, and content creation assistants.",
        "meta_title": "Top AI Writing & Copywriting Tools | Content Creation",
        "meta_description": "Transform your writing workflow with advanced AI content tools.",
    },
    {
        "name": "Coding",
        "slug": "coding",
        "icon": "💻",
        "description": "Advanced tools for programming, app development, and technical automation.",
        "meta_title": "AI Coding Assistants & Developer Tools | Future Agent",
        "meta_description": "Boost your development speed with AI-powered IDEs and code generators.",
    },
    {
        "name": "Automation",
        "slug": "automation",
        "icon": "⚡",
        "description": "Streamline workflows with AI agents, autonomous systems, and process automation.",
        "meta_title": "AI Automation & Agentic AI Tools | Productivity Boost",
        "meta_description": "Explore agentic AI and autonomous workflow automation systems.",
    },
    {
        "name": "Research",
        "slug": "research",
        "icon": "🔍",
        "description": "Deep analysis, data extraction, and AI-powered research tools.",
        "meta_title": "AI Research & Data Analysis Tools | Expert Insights",
        "meta_description": "The best AI tools for academic research, market analysis, and data extraction.",
    },
    {
        "name": "Productivity",
        "slug": "productivity",
        "icon": "⏰",
        "description": "Boost your daily output with smart scheduling, note-taking, and business efficiency.",
        "meta_title": "Top AI Productivity Tools | Master Your Workflow",
        "meta_description": "Optimize your daily tasks with AI-powered organizers and note-takers.",
    },
    {
        "name": "Chatbots",
        "slug": "chatbots",
        "icon": "💬",
        "description": "Intelligent AI assistants for customer support and personalized communication.",
        "meta_title": "Best AI Chatbots & Virtual Assistants | 24/7 Support",
        "meta_description": "Compare the smartest AI chatbots for customer service and personal assistance.",
    },
    {
        "name": "LLMs",
        "slug": "llms",
        "icon": "🧠",
        "description": "Large Language Models, open source foundations, and cutting-edge AI research.",
        "meta_title": "LLMs & Open Source AI Models | Future-Proof Research",
        "meta_description": "Deep dives into the LLMs and open-source foundations driving AI.",
    },
    {
        "name": "Comparisons",
        "slug": "comparisons",
        "icon": "⚖️",
        "description": "Detailed side-by-side head-to-head reviews of top AI software.",
        "meta_title": "AI Tool Comparisons & Head-to-Head Reviews",
        "meta_description": "Side-by-side comparisons of the leading AI tools to help you choose.",
    },
]

PILLAR_NAMES = {pillar["slug"]: pillar["name"] for pillar in PILLARS}

# pillar slug -> legacy labels and slugs that belong to it
LEGACY_MAPPING: dict[str, list[str]] = {
    "marketing": ["Marketing & Ads", "Email Marketing", "Social Media", "marketing", "Marketing"],
    "writing": ["AI Writing", "Copywriting", "Content Creation", "AI Writing Tools", "writing", "Writing"],
    "coding": ["AI Coding", "Coding Tools", "Programming", "Coding", "coding", "AI Coding Tools"],
    "automation": ["Workflow Automation", "Agentic AI", "Autogpt", "automation", "Automation"],
    "research": ["Research & Analysis", "Data", "Search", "research", "Research"],
    "productivity": [
        "Productivity", "Business Tools", "General", "general", "productivity",
        "Productivity & Workflow",
    ],
    "chatbots": ["Chatbots & Assistants", "Customer Service", "chatbots", "Chatbots"],
    "llms": ["AI Tools", "LLMs", "Open Source", "Foundation Models", "llms"],
    "comparisons": ["Comparison", "Tool Face-Offs", "Versus", "comparisons", "Comparisons"],
}


@dataclass
class MigrationReport:
    tools_updated: int = 0
    posts_updated: int = 0
    tags_added: int = 0


def map_legacy_category(category: str | None, category_slug: str | None = None) -> str:
    """Pillar slug for a legacy label (or legacy slug), else the default pillar."""
    for pillar, legacy_names in LEGACY_MAPPING.items():
        if category in legacy_names or (category_slug and category_slug in legacy_names):
            return pillar
    return DEFAULT_PILLAR


def migrate_record(
    category: str | None,
    tags: object,
    category_slug: str | None = None,
) -> tuple[str, list[str]]:
    """Return ``(pillar_slug, tags)`` for one row.

    The legacy label is appended to the tags when it is not the new pillar
    name and is not already tagged.
    """
    pillar = map_legacy_category(category, category_slug)
    new_tags = parse_string_list(tags)
    if category and category != PILLAR_NAMES[pillar] and category not in new_tags:
        new_tags.append(category)
    return pillar, new_tags


async def replace_categories(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session:
        await session.execute(delete(Category))
        session.add_all([Category(**pillar) for pillar in PILLARS])
        await session.commit()
    logger.info("Seeded %d pillars", len(PILLARS))


async def migrate_taxonomy(session_factory: async_sessionmaker[AsyncSession]) -> MigrationReport:
    report = MigrationReport()

    await replace_categories(session_factory)

    async with session_factory() as session:
        tools = (await session.execute(select(Tool.id, Tool.category, Tool.tags))).all()
    logger.info("Migrating %d tools", len(tools))

    for tool_id, category, tags in tools:
        pillar, new_tags = migrate_record(category, tags)
        async with session_factory() as session:
            tool = await session.get(Tool, tool_id)
            tool.category = PILLAR_NAMES[pillar]
            tool.tags = new_tags
            await session.commit()
        report.tools_updated += 1
        report.tags_added += len(new_tags) - len(parse_string_list(tags))

    async with session_factory() as session:
        posts = (
            await session.execute(
                select(BlogPost.id, BlogPost.category, BlogPost.category_slug, BlogPost.tags)
            )
        ).all()
    logger.info("Migrating %d blog posts", len(posts))

    for post_id, category, category_slug, tags in posts:
        pillar, new_tags = migrate_record(category, tags, category_slug)
        async with session_factory() as session:
            post = await session.get(BlogPost, post_id)
            post.category = PILLAR_NAMES[pillar]
            post.category_slug = pillar
            post.tags = new_tags
            await session.commit()
        report.posts_updated += 1
        report.tags_added += len(new_tags) - len(parse_string_list(tags))

    return report


if __name__ == "__main__":
    import asyncio

    from futureagent.core.database import AsyncSessionLocal, engine
    from futureagent.core.init_settings import settings
    from futureagent.core.logging_config import configure_logging

    configure_logging(settings)

    async def main():
        print("--- STARTING TAXONOMY MIGRATION ---")
        report = await migrate_taxonomy(AsyncSessionLocal)
        print(
            f"Migrated {report.tools_updated} tools and {report.posts_updated} posts, "
            f"kept {report.tags_added} legacy labels as tags"
        )
        await engine.dispose()

    asyncio.run(main())

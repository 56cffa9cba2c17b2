import strawberry
from strawberry.types import Info

from futureagent.comparison import build_comparison, parse_compare_tokens
from futureagent.core.errors import NotFoundError
from futureagent.data import fetchers
from futureagent.graphql.types import (
    BlogPost,
    Category,
    Comparison,
    Tool,
    category_from_record,
    comparison_from_model,
    post_from_record,
    tool_from_record,
)


@strawberry.type
class Query:
    @strawberry.field
    async def categories(self, info: Info) -> list[Category]:
        repo = info.context["repository"]
        return [category_from_record(c) for c in await fetchers.fetch_categories(repo)]

    @strawberry.field
    async def tools(self, info: Info) -> list[Tool]:
        repo = info.context["repository"]
        return [tool_from_record(t) for t in await fetchers.fetch_published_tools(repo)]

    @strawberry.field
    async def tool(self, info: Info, slug: str) -> Tool | None:
        repo = info.context["repository"]
        record = await fetchers.fetch_tool_by_slug(repo, slug)
        if record is None or not record.published:
            return None
        return tool_from_record(record)

    @strawberry.field
    async def featured_tools(self, info: Info) -> list[Tool]:
        repo = info.context["repository"]
        return [tool_from_record(t) for t in await fetchers.fetch_featured_tools(repo)]

    @strawberry.field
    async def latest_posts(self, info: Info) -> list[BlogPost]:
        repo = info.context["repository"]
        return [post_from_record(p) for p in await fetchers.fetch_latest_blog_posts(repo)]

    @strawberry.field
    async def comparison(self, info: Info, tools: str) -> Comparison | None:
        """Null unless ``tools`` names exactly two resolvable tools."""
        tokens = parse_compare_tokens(tools)
        if len(tokens) != 2:
            return None
        try:
            result = await build_comparison(info.context["repository"], tokens[0], tokens[1])
        except NotFoundError:
            return None
        return comparison_from_model(result)

import os
import tempfile
from collections import Counter

# Dev mode on a throwaway SQLite file, with near-zero retry delays.
# Must be set before the app (and its settings) are imported.
os.environ.setdefault("APP_MODE", "dev")
os.environ.setdefault("SQLITE_PATH", os.path.join(tempfile.mkdtemp(), "test.db"))
os.environ.setdefault("RETRY_BASE_DELAY_MS", "1")

import pytest
from httpx import ASGITransport, AsyncClient
from asgi_lifespan import LifespanManager

from futureagent.data.records import ToolRecord
from futureagent.data.retry import QueryResult
from futureagent.main import app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def client():
    """Async test client with lifespan support."""
    async with LifespanManager(app) as manager:
        async with AsyncClient(
            transport=ASGITransport(app=manager.app),
            base_url="http://test",
        ) as ac:
            yield ac


class FakeRepository:
    """In-memory stand-in for ToolRepository.

    ``failures`` maps a method name to an error message returned as a failed
    ``QueryResult``; ``raises`` maps a method name to an exception to raise.
    """

    def __init__(self):
        self.tools: list[ToolRecord] = []
        self.categories = []
        self.posts = []
        self.pros: dict[int, list[str]] = {}
        self.cons: dict[int, list[str]] = {}
        self.plans = {}
        self.integrations: dict[int, list[str]] = {}
        self.links = {}
        self.features = {}
        self.clicks: list[dict] = []
        self.failures: dict[str, str] = {}
        self.raises: dict[str, Exception] = {}
        self.calls: Counter = Counter()

    async def _respond(self, name, data):
        self.calls[name] += 1
        if name in self.raises:
            raise self.raises[name]
        if name in self.failures:
            return QueryResult.fail(self.failures[name])
        return QueryResult.ok(data)

    async def list_categories(self):
        return await self._respond("list_categories", list(self.categories))

    async def category_by_slug(self, slug):
        match = next((c for c in self.categories if c.slug == slug), None)
        return await self._respond("category_by_slug", match)

    async def published_tools(self, visible_before):
        return await self._respond("published_tools", [t for t in self.tools if t.published])

    async def tools_in_category(self, category_name):
        matches = [t for t in self.tools if (t.category or "").lower() == category_name.lower()]
        return await self._respond("tools_in_category", matches)

    async def tool_by_slug(self, slug):
        match = next((t for t in self.tools if t.slug == slug), None)
        return await self._respond("tool_by_slug", match)

    async def featured_tools(self, limit=3):
        return await self._respond("featured_tools", [t for t in self.tools if t.featured][:limit])

    async def latest_posts(self, visible_before, limit=3):
        return await self._respond("latest_posts", [])

    async def comparison_posts(self):
        return await self._respond("comparison_posts", [])

    async def post_by_slug(self, slug, visible_before):
        match = next((p for p in self.posts if p.slug == slug), None)
        return await self._respond("post_by_slug", match)

    async def posts_in_category(self, category_slug, visible_before):
        matches = [p for p in self.posts if p.category_slug == category_slug]
        return await self._respond("posts_in_category", matches)

    async def count_rows(self, table, where=None):
        return await self._respond("count_rows", len(self.tools))

    async def find_tools(self, tokens):
        matches = [t for t in self.tools if t.slug in tokens or t.name in tokens]
        return await self._respond("find_tools", matches)

    async def tool_pros(self, tool_id):
        return await self._respond("tool_pros", self.pros.get(tool_id, []))

    async def tool_cons(self, tool_id):
        return await self._respond("tool_cons", self.cons.get(tool_id, []))

    async def top_pricing_plan(self, tool_id):
        return await self._respond("top_pricing_plan", self.plans.get(tool_id))

    async def tool_integrations(self, tool_id):
        return await self._respond("tool_integrations", self.integrations.get(tool_id, []))

    async def tool_features(self, tool_id, limit=3):
        return await self._respond("tool_features", self.features.get(tool_id, [])[:limit])

    async def affiliate_link_for_tool(self, tool_id):
        return await self._respond("affiliate_link_for_tool", self.links.get(tool_id))

    async def affiliate_link_by_slug(self, slug):
        match = next((link for link in self.links.values() if link.slug == slug), None)
        return await self._respond("affiliate_link_by_slug", match)

    async def record_click(self, **click):
        result = await self._respond("record_click", len(self.clicks) + 1)
        if result.error is None:
            self.clicks.append(click)
        return result


@pytest.fixture
def fake_repo():
    return FakeRepository()


@pytest.fixture
def make_tool():
    """Factory for published ToolRecords with sensible defaults."""
    counter = iter(range(1, 10_000))

    def _make(**overrides) -> ToolRecord:
        tool_id = overrides.pop("id", next(counter))
        name = overrides.pop("name", f"Tool {tool_id}")
        fields = {
            "id": tool_id,
            "name": name,
            "slug": name.lower().replace(" ", "-"),
            "category": "Writing",
            "rating": 4.5,
            "website_url": f"https://{name.lower().replace(' ', '')}.example",
            "published": True,
        }
        fields.update(overrides)
        return ToolRecord(**fields)

    return _make

"""End-to-end tests against the seeded sample directory."""
import pytest

from futureagent.core.database import get_repository
from futureagent.data.records import AffiliateLinkRecord
from futureagent.main import app


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


# =============================================================================
# Health
# =============================================================================

@pytest.mark.anyio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-store, no-cache, must-revalidate"

    body = response.json()
    assert body["status"] == "healthy"
    assert body["version"] == "1.0.0"
    assert body["checks"]["database"]["status"] == "ok"
    assert isinstance(body["checks"]["database"]["responseTimeMs"], int)
    assert "error" not in body["checks"]["database"]


@pytest.mark.anyio
async def test_health_reports_database_failure(client, fake_repo):
    fake_repo.failures["count_rows"] = "could not connect to server"
    app.dependency_overrides[get_repository] = lambda: fake_repo

    response = await client.get("/health")

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "unhealthy"
    assert body["checks"]["database"] == {
        "status": "error",
        "responseTimeMs": body["checks"]["database"]["responseTimeMs"],
        "error": "could not connect to server",
    }


@pytest.mark.anyio
async def test_health_survives_a_raising_repository(client, fake_repo):
    fake_repo.raises["count_rows"] = ConnectionRefusedError(111, "Connect call failed")
    app.dependency_overrides[get_repository] = lambda: fake_repo

    response = await client.get("/health")

    assert response.status_code == 503
    assert response.headers["cache-control"] == "no-store, no-cache, must-revalidate"
    database = response.json()["checks"]["database"]
    assert database["status"] == "error"
    assert database["error"] == "[Errno 111] Connect call failed"


# =============================================================================
# Directory reads
# =============================================================================

@pytest.mark.anyio
async def test_list_tools_hides_drafts_and_scheduled(client):
    response = await client.get("/api/v1/tools")
    assert response.status_code == 200
    slugs = [tool["slug"] for tool in response.json()]
    assert len(slugs) == 7
    assert "scheduled-tool" not in slugs
    assert "draft-tool" not in slugs
    # Newest first
    assert slugs[0] == "github-copilot"
    assert slugs[-1] == "chatgpt"


@pytest.mark.anyio
async def test_tool_detail_parses_string_tags(client):
    response = await client.get("/api/v1/tools/copy-ai")
    assert response.status_code == 200
    assert response.json()["tags"] == ["free", "beginner-friendly"]


@pytest.mark.anyio
@pytest.mark.parametrize("slug", ["draft-tool", "no-such-tool"])
async def test_tool_detail_not_found(client, slug):
    response = await client.get(f"/api/v1/tools/{slug}")
    assert response.status_code == 404


@pytest.mark.anyio
async def test_featured_tools(client):
    response = await client.get("/api/v1/tools/featured")
    assert response.status_code == 200
    assert [t["name"] for t in response.json()] == ["Scheduled Tool", "ChatGPT", "Jasper AI"]


@pytest.mark.anyio
async def test_categories(client):
    response = await client.get("/api/v1/categories")
    assert response.status_code == 200
    assert len(response.json()) == 9

    writing = await client.get("/api/v1/categories/writing")
    assert writing.json()["name"] == "Writing"

    missing = await client.get("/api/v1/categories/nope")
    assert missing.status_code == 404


@pytest.mark.anyio
async def test_category_tools_match_case_insensitively(client):
    response = await client.get("/api/v1/categories/writing/tools")
    assert response.status_code == 200
    assert [t["slug"] for t in response.json()] == ["jasper-ai", "copy-ai", "writesonic"]


@pytest.mark.anyio
async def test_latest_posts(client):
    response = await client.get("/api/v1/posts/latest")
    assert [p["slug"] for p in response.json()] == ["best-ai-writing-tools", "jasper-ai-vs-copy-ai"]


@pytest.mark.anyio
async def test_comparison_posts(client):
    response = await client.get("/api/v1/posts/comparisons")
    assert [p["slug"] for p in response.json()] == ["surfer-seo-vs-jasper-ai", "jasper-ai-vs-copy-ai"]


@pytest.mark.anyio
async def test_reads_degrade_to_empty_on_outage(client, fake_repo):
    fake_repo.failures["published_tools"] = "timeout"
    app.dependency_overrides[get_repository] = lambda: fake_repo

    response = await client.get("/api/v1/tools")

    assert response.status_code == 200
    assert response.json() == []
    assert fake_repo.calls["published_tools"] == 4


# =============================================================================
# Comparison
# =============================================================================

@pytest.mark.anyio
async def test_compare_same_category(client):
    response = await client.get("/api/v1/compare", params={"tools": "jasper-ai,copy-ai"})
    assert response.status_code == 200

    body = response.json()
    assert body["tool_a"]["name"] == "Jasper AI"
    assert body["tool_a"]["cta"] == "/go/jasper"
    assert body["tool_a"]["pricing"] == "$49/month"
    assert body["tool_a"]["pros"] == [
        "Brand voice memory", "Strong long-form templates", "Team workflows",
    ]
    assert len(body["tool_a"]["features"]) == 3
    assert body["tool_b"]["pricing"] == "Free plan available"
    assert body["tool_b"]["cta"] == "https://www.copy.ai"
    assert body["tool_b"]["use_cases"] == ["free", "beginner-friendly"]

    assert body["verdict"]["winner"] == "toolA"
    assert body["verdict"]["summary"].startswith("Slight edge to **Jasper AI**")

    rows = body["features"]
    assert len(rows) == 5
    assert rows[0] == {"name": "Expert Rating", "tool_a_value": "4.7/5.0", "tool_b_value": "4.5/5.0"}
    assert rows[2] == {"name": "Campaigns", "tool_a_value": "Generates multi-channel campaign assets",
                       "tool_b_value": "Supported"}
    assert rows[-1]["tool_a_value"] == "Google Docs, Surfer SEO, Chrome"
    assert rows[-1]["tool_b_value"] == "HubSpot, Salesforce"


@pytest.mark.anyio
async def test_compare_across_categories(client):
    response = await client.get("/api/v1/compare", params={"tools": "jasper-ai,surfer-seo"})
    verdict = response.json()["verdict"]
    assert verdict["winner"] == "toolA"
    assert "Writing" in verdict["summary"]
    assert "SEO & Content Optimization" in verdict["summary"]


@pytest.mark.anyio
async def test_compare_tie(client):
    response = await client.get("/api/v1/compare", params={"tools": "chatgpt,claude"})
    verdict = response.json()["verdict"]
    assert verdict["winner"] == "tie"
    assert "4.8/5.0" in verdict["summary"]


@pytest.mark.anyio
async def test_compare_clear_win_and_fallbacks(client):
    response = await client.get("/api/v1/compare", params={"tools": "jasper-ai,writesonic"})
    body = response.json()
    assert "Clear winner" in body["verdict"]["summary"]
    assert body["tool_b"]["pricing"] == "Freemium"
    assert body["tool_b"]["description"] == "A powerful AI tool for various use cases."
    assert body["tool_b"]["logo"].endswith("text=W")
    assert body["features"][-1]["tool_b_value"] == "Direct Access"


@pytest.mark.anyio
async def test_compare_tool_without_plan_or_website(client):
    response = await client.get("/api/v1/compare", params={"tools": "github-copilot,chatgpt"})
    copilot = response.json()["tool_a"]
    assert copilot["pricing"] == "Contact Sales"
    assert copilot["cta"] == "#"
    assert copilot["rating"] == 4.0


@pytest.mark.anyio
async def test_compare_single_tool_redirects(client):
    response = await client.get("/api/v1/compare", params={"tools": "chatgpt"})
    assert response.status_code == 307
    assert response.headers["location"] == "/tools?compare=true&preselect=chatgpt"


@pytest.mark.anyio
@pytest.mark.parametrize("params", [{}, {"tools": ""}, {"tools": "a,b,c"}, {"tools": "jasper-ai,nope"}])
async def test_compare_not_found(client, params):
    response = await client.get("/api/v1/compare", params=params)
    assert response.status_code == 404


# =============================================================================
# Affiliate redirects
# =============================================================================

@pytest.mark.anyio
async def test_affiliate_redirect_records_click(client):
    before = (await client.get("/api/v1/admin/counts")).json()["affiliate_clicks"]

    response = await client.get(
        "/go/jasper",
        headers={"x-forwarded-for": "203.0.113.7", "referer": "https://futureagent.ai/tools"},
    )

    assert response.status_code == 302
    assert response.headers["location"] == "https://www.jasper.ai/?fpr=futureagent"
    after = (await client.get("/api/v1/admin/counts")).json()["affiliate_clicks"]
    assert after == before + 1


@pytest.mark.anyio
async def test_affiliate_redirect_unknown_slug(client):
    response = await client.get("/go/unknown")
    assert response.status_code == 404
    assert response.text == "Link not found"


@pytest.mark.anyio
async def test_affiliate_redirect_lookup_outage(client, fake_repo):
    fake_repo.failures["affiliate_link_by_slug"] = "connection reset"
    app.dependency_overrides[get_repository] = lambda: fake_repo

    response = await client.get("/go/jasper")

    assert response.status_code == 404
    assert fake_repo.calls["affiliate_link_by_slug"] == 4


@pytest.mark.anyio
async def test_affiliate_redirect_lookup_raises(client, fake_repo):
    fake_repo.raises["affiliate_link_by_slug"] = ConnectionRefusedError(111, "Connect call failed")
    app.dependency_overrides[get_repository] = lambda: fake_repo

    response = await client.get("/go/jasper")

    assert response.status_code == 404
    assert response.text == "Link not found"
    assert fake_repo.calls["affiliate_link_by_slug"] == 4


@pytest.mark.anyio
async def test_click_failure_does_not_block_redirect(client, fake_repo):
    fake_repo.links[1] = AffiliateLinkRecord(tool_id=1, slug="jasper", target_url="https://jasper.example")
    fake_repo.failures["record_click"] = "insert failed"
    app.dependency_overrides[get_repository] = lambda: fake_repo

    response = await client.get("/go/jasper", headers={"x-real-ip": "198.51.100.2"})

    assert response.status_code == 302
    assert response.headers["location"] == "https://jasper.example"
    assert fake_repo.clicks == []
    assert fake_repo.calls["record_click"] == 4


@pytest.mark.anyio
async def test_click_captures_request_metadata(client, fake_repo):
    fake_repo.links[1] = AffiliateLinkRecord(tool_id=1, slug="jasper", target_url="https://jasper.example")
    app.dependency_overrides[get_repository] = lambda: fake_repo

    await client.get(
        "/go/jasper",
        headers={"x-real-ip": "198.51.100.2", "user-agent": "pytest", "referer": "https://ref.example"},
    )

    assert fake_repo.clicks == [{
        "tool_id": 1,
        "tool_slug": "jasper",
        "user_ip": "198.51.100.2",
        "user_agent": "pytest",
        "referrer": "https://ref.example",
    }]


# =============================================================================
# Reviews and posts
# =============================================================================

@pytest.mark.anyio
async def test_tool_review(client):
    response = await client.get("/api/v1/tools/jasper-ai/review")
    assert response.status_code == 200

    review = response.json()
    assert review["intro"] == "Jasper is the most polished long-form writing assistant we have tested."
    assert review["category"] == "Writing"
    assert review["pricing"] == "$49/month"
    assert review["cta"] == "/go/jasper"
    assert review["pros"] == ["Brand voice memory", "Strong long-form templates", "Team workflows"]
    assert review["integrations"] == ["Google Docs", "Surfer SEO", "Chrome", "Webflow"]
    assert len(review["features"]) == 3


@pytest.mark.anyio
async def test_tool_review_defaults(client):
    response = await client.get("/api/v1/tools/github-copilot/review")
    review = response.json()
    assert review["rating"] == 0.0
    assert review["website_url"] == "#"
    assert review["intro"] == "GitHub Copilot is a powerful AI tool that helps you work smarter and faster."
    assert review["description"] == ""
    assert review["pricing"] == "Contact Sales"
    assert review["cta"] == "#"
    assert review["category"] == "Coding"
    assert (review["pros"], review["features"]) == ([], [])


@pytest.mark.anyio
@pytest.mark.parametrize("slug", ["draft-tool", "no-such-tool"])
async def test_tool_review_not_found(client, slug):
    response = await client.get(f"/api/v1/tools/{slug}/review")
    assert response.status_code == 404


@pytest.mark.anyio
async def test_post_by_slug(client):
    response = await client.get("/api/v1/posts/jasper-ai-vs-copy-ai")
    assert response.status_code == 200
    post = response.json()
    assert post["content"] == "Jasper wins on long-form polish; Copy.ai wins on price and speed."
    assert post["category_slug"] == "comparisons"


@pytest.mark.anyio
@pytest.mark.parametrize("slug", ["chatgpt-vs-claude", "surfer-seo-vs-jasper-ai", "no-such-post"])
async def test_post_by_slug_hides_drafts(client, slug):
    response = await client.get(f"/api/v1/posts/{slug}")
    assert response.status_code == 404


@pytest.mark.anyio
async def test_posts_in_category(client):
    comparisons = await client.get("/api/v1/categories/comparisons/posts")
    assert [p["slug"] for p in comparisons.json()] == ["jasper-ai-vs-copy-ai"]

    writing = await client.get("/api/v1/categories/writing/posts")
    assert [p["slug"] for p in writing.json()] == ["best-ai-writing-tools"]


# =============================================================================
# Admin
# =============================================================================

@pytest.mark.anyio
async def test_admin_counts(client):
    response = await client.get("/api/v1/admin/counts")
    assert response.status_code == 200
    counts = response.json()
    assert counts["tools"] == 9
    assert counts["published_tools"] == 8
    assert counts["posts"] == 4
    assert counts["published_posts"] == 3
    assert counts["categories"] == 9
    assert counts["affiliate_links"] == 2
    assert counts["affiliate_clicks"] >= 0


# =============================================================================
# GraphQL
# =============================================================================

@pytest.mark.anyio
async def test_graphql_categories_and_tools(client):
    query = """
        query {
            categories { slug name }
            tools { slug tags }
            featuredTools { name }
            latestPosts { slug }
        }
    """
    response = await client.post("/graphql", json={"query": query})
    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["categories"]) == 9
    assert len(data["tools"]) == 7
    assert [t["name"] for t in data["featuredTools"]] == ["Scheduled Tool", "ChatGPT", "Jasper AI"]
    assert [p["slug"] for p in data["latestPosts"]] == ["best-ai-writing-tools", "jasper-ai-vs-copy-ai"]


@pytest.mark.anyio
async def test_graphql_tool_detail(client):
    query = """
        query {
            live: tool(slug: "copy-ai") { name tags websiteUrl }
            draft: tool(slug: "draft-tool") { name }
        }
    """
    response = await client.post("/graphql", json={"query": query})
    data = response.json()["data"]
    assert data["live"] == {
        "name": "Copy.ai",
        "tags": ["free", "beginner-friendly"],
        "websiteUrl": "https://www.copy.ai",
    }
    assert data["draft"] is None


@pytest.mark.anyio
async def test_graphql_comparison(client):
    query = """
        query {
            comparison(tools: "chatgpt,claude") {
                toolA { name pricing }
                toolB { name }
                verdict { winner summary }
                features { name toolAValue toolBValue }
            }
            missing: comparison(tools: "chatgpt,nope") { verdict { winner } }
        }
    """
    response = await client.post("/graphql", json={"query": query})
    data = response.json()["data"]
    comparison = data["comparison"]
    assert comparison["toolA"] == {"name": "ChatGPT", "pricing": "$20/month"}
    assert comparison["toolB"]["name"] == "Claude"
    assert comparison["verdict"]["winner"] == "tie"
    assert comparison["features"][0] == {
        "name": "Expert Rating", "toolAValue": "4.8/5.0", "toolBValue": "4.8/5.0",
    }
    assert data["missing"] is None

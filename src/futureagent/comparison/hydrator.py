"""
Comparison assembly for two tools.

1. Resolve both tokens to tool rows (slug first, then name).
2. Hydrate each tool by reading its child tables concurrently.
3. Compute the verdict and the feature table.

Child reads are not retried here and fail independently: a failed read is
logged and degrades to its empty value, so one missing table never aborts
the comparison. Resolution failures do abort it with ``ToolNotFoundError``.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel

from futureagent.comparison.types import HydratedTool
from futureagent.comparison.verdict import (
    FeatureRow,
    PhrasingChooser,
    Verdict,
    build_feature_rows,
    compute_verdict,
)
from futureagent.core.errors import ToolNotFoundError
from futureagent.core.init_settings import settings
from futureagent.data.records import PricingPlanRecord, ToolRecord
from futureagent.data.repository import ToolRepository
from futureagent.data.retry import QueryResult, fetch_with_retry

logger = logging.getLogger(__name__)

DEFAULT_RATING = 4.0
DEFAULT_SUBSCRIPTION = "Freemium"


class Comparison(BaseModel):
    tool_a: HydratedTool
    tool_b: HydratedTool
    verdict: Verdict
    features: list[FeatureRow]


def parse_compare_tokens(raw: str | None) -> list[str]:
    """Split a comma-joined ``tools`` parameter into normalized tokens."""
    if not raw:
        return []
    return [token.strip().lower() for token in raw.split(",") if token.strip()]


def match_token(tools: list[ToolRecord], token: str) -> ToolRecord | None:
    """Exact slug match first, then a case-insensitive name match."""
    for tool in tools:
        if tool.slug == token:
            return tool
    as_name = token.replace("-", " ").lower()
    for tool in tools:
        if tool.name.lower() == as_name:
            return tool
    return None


async def resolve_tools(repo: ToolRepository, tokens: list[str]) -> list[ToolRecord]:
    """Resolve every token to a tool or raise ``ToolNotFoundError``."""
    candidates = await fetch_with_retry(
        lambda: repo.find_tools(tokens), [], operation="resolve_tools",
    )
    resolved = []
    for token in tokens:
        tool = match_token(candidates, token)
        if tool is None:
            logger.info("Comparison token did not resolve: %s", token)
            raise ToolNotFoundError(token)
        resolved.append(tool)
    return resolved


def format_pricing(plan: PricingPlanRecord | None) -> str:
    if plan is None:
        return "Contact Sales"
    if plan.price_label:
        return plan.price_label
    if plan.price:
        return f"${plan.price:g}/{plan.period or 'month'}"
    return "Freemium"


def placeholder_logo(name: str) -> str:
    letter = name[:1].upper() or "?"
    return settings.LOGO_PLACEHOLDER_URL.format(letter=letter)


def call_to_action(tool: ToolRecord, affiliate_slug: str | None) -> str:
    if affiliate_slug:
        return f"/go/{affiliate_slug}"
    return tool.website_url or "#"


async def _read_child(
    tool: ToolRecord,
    label: str,
    read: Callable[[], Awaitable[QueryResult[Any]]],
    empty: Any,
) -> Any:
    try:
        result = await read()
    except Exception as exc:
        logger.warning(
            "Reading %s for %s raised, continuing without it: %s", label, tool.slug, exc,
            extra={"operation": f"hydrate_{label}", "error": str(exc)},
        )
        return empty
    if result.error is not None:
        logger.warning(
            "Reading %s for %s failed, continuing without it: %s",
            label, tool.slug, result.error.message,
            extra={"operation": f"hydrate_{label}", "error": result.error.message},
        )
        return empty
    return empty if result.data is None else result.data


async def hydrate_tool(repo: ToolRepository, tool: ToolRecord) -> HydratedTool:
    logger.debug("Hydrating %s (id %s)", tool.name, tool.id)

    pros, cons, plan, integrations, link, features = await asyncio.gather(
        _read_child(tool, "pros", lambda: repo.tool_pros(tool.id), []),
        _read_child(tool, "cons", lambda: repo.tool_cons(tool.id), []),
        _read_child(tool, "pricing", lambda: repo.top_pricing_plan(tool.id), None),
        _read_child(tool, "integrations", lambda: repo.tool_integrations(tool.id), []),
        _read_child(tool, "affiliate_link", lambda: repo.affiliate_link_for_tool(tool.id), None),
        _read_child(tool, "features", lambda: repo.tool_features(tool.id, limit=3), []),
    )

    pricing = format_pricing(plan)
    logger.debug(
        "%s data: %d pros, %d cons, pricing %s", tool.name, len(pros), len(cons), pricing,
    )

    return HydratedTool(
        id=tool.id,
        name=tool.name,
        slug=tool.slug,
        logo=tool.logo or placeholder_logo(tool.name),
        rating=tool.rating or DEFAULT_RATING,
        cta=call_to_action(tool, link.slug if link else None),
        pros=pros,
        cons=cons,
        pricing=pricing,
        integrations=integrations,
        description=(
            tool.review_intro
            or tool.description
            or "A powerful AI tool for various use cases."
        ),
        tagline=tool.tagline or "",
        use_cases=tool.tags,
        subscription_details=tool.pricing_model or DEFAULT_SUBSCRIPTION,
        features=features[:3],
    )


async def build_comparison(
    repo: ToolRepository,
    token_a: str,
    token_b: str,
    *,
    choose_phrasing: PhrasingChooser | None = None,
) -> Comparison:
    """Resolve, hydrate and judge two tools. Raises ``ToolNotFoundError``."""
    logger.info("Starting comparison: %s vs %s", token_a, token_b)
    raw_a, raw_b = await resolve_tools(repo, [token_a, token_b])

    tool_a, tool_b = await asyncio.gather(
        hydrate_tool(repo, raw_a),
        hydrate_tool(repo, raw_b),
    )

    verdict = compute_verdict(
        tool_a, tool_b, raw_a.category, raw_b.category, choose_phrasing=choose_phrasing,
    )
    return Comparison(
        tool_a=tool_a,
        tool_b=tool_b,
        verdict=verdict,
        features=build_feature_rows(tool_a, tool_b),
    )

"""
Affiliate redirects: /go/<slug> -> partner URL.

The link lookup is retried and strict; the click record is written after the
response is sent and may fail without affecting the redirect.
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import PlainTextResponse, RedirectResponse

from futureagent.core.database import get_repository
from futureagent.core.init_settings import settings
from futureagent.data.records import AffiliateLinkRecord
from futureagent.data.repository import ToolRepository
from futureagent.data.retry import QueryError, log_retry, with_retry

logger = logging.getLogger(__name__)

redirect_router = APIRouter(tags=["Redirects"])


def log_affiliate_event(event: str, slug: str, **metadata) -> None:
    """Log a click/redirect event; failures at error level, the rest at info."""
    level = logging.ERROR if event == "redirect_failure" else logging.INFO
    logger.log(
        level,
        "Affiliate %s: %s %s", event, slug, metadata or "",
        extra={"action": event, "page": f"/go/{slug}", "slug": slug},
    )


async def record_click(
    repo: ToolRepository,
    link: AffiliateLinkRecord,
    user_ip: str,
    user_agent: str,
    referrer: str,
) -> None:
    """Best-effort click insert, retried, never raised to the caller."""
    async def insert():
        result = await repo.record_click(
            tool_id=link.tool_id,
            tool_slug=link.slug,
            user_ip=user_ip,
            user_agent=user_agent,
            referrer=referrer,
        )
        if result.error is not None:
            raise QueryError(result.error.message)

    try:
        await with_retry(
            insert,
            max_retries=settings.RETRY_MAX_RETRIES,
            base_delay_ms=settings.RETRY_BASE_DELAY_MS,
            on_retry=log_retry("click_insert"),
        )
        log_affiliate_event("click", link.slug)
    except Exception as exc:
        logger.error(
            "Could not record click for %s: %s", link.slug, exc,
            extra={"action": "click_insert", "page": f"/go/{link.slug}", "error": str(exc)},
        )


@redirect_router.get("/go/{slug}")
async def affiliate_redirect(
    slug: str,
    request: Request,
    background_tasks: BackgroundTasks,
    repo: ToolRepository = Depends(get_repository),
):
    async def lookup() -> AffiliateLinkRecord | None:
        result = await repo.affiliate_link_by_slug(slug)
        if result.error is not None:
            raise QueryError(result.error.message)
        return result.data

    try:
        link = await with_retry(
            lookup,
            max_retries=settings.RETRY_MAX_RETRIES,
            base_delay_ms=settings.RETRY_BASE_DELAY_MS,
            on_retry=log_retry("affiliate_lookup"),
        )
    except Exception as exc:
        message = exc.message if isinstance(exc, QueryError) else (str(exc) or type(exc).__name__)
        log_affiliate_event("redirect_failure", slug, error=message)
        return PlainTextResponse("Link not found", status_code=404)

    if link is None:
        log_affiliate_event("redirect_failure", slug, reason="link not found")
        return PlainTextResponse("Link not found", status_code=404)

    headers = request.headers
    background_tasks.add_task(
        record_click,
        repo,
        link,
        headers.get("x-forwarded-for") or headers.get("x-real-ip") or "",
        headers.get("user-agent", ""),
        headers.get("referer", ""),
    )

    log_affiliate_event("redirect_success", slug)
    return RedirectResponse(link.target_url, status_code=302)

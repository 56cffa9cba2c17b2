from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from futureagent.models.base import Base

if TYPE_CHECKING:
    from futureagent.models.tool import Tool


class AffiliateLink(Base):
    __tablename__ = "affiliate_links"

    id: Mapped[int] = mapped_column(primary_key=True)
    # At most one link per tool
    tool_id: Mapped[int] = mapped_column(ForeignKey("ai_tools.id"), unique=True)
    slug: Mapped[str] = mapped_column(String(120), unique=True, index=True)
    target_url: Mapped[str] = mapped_column(String(1000))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    tool: Mapped["Tool"] = relationship(back_populates="affiliate_link")


class AffiliateClick(Base):
    """One redirect through /go/<slug>. Written best-effort."""

    __tablename__ = "affiliate_clicks"

    id: Mapped[int] = mapped_column(primary_key=True)
    tool_id: Mapped[Optional[int]] = mapped_column(ForeignKey("ai_tools.id"), nullable=True)
    tool_slug: Mapped[str] = mapped_column(String(120))
    user_ip: Mapped[str] = mapped_column(String(100), default="")
    user_agent: Mapped[str] = mapped_column(Text, default="")
    referrer: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

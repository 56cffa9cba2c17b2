from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, ForeignKey, String, Text, Boolean, Integer, Float, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from futureagent.models.base import Base

if TYPE_CHECKING:
    from futureagent.models.affiliate import AffiliateLink


class Tool(Base):
    __tablename__ = "ai_tools"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    slug: Mapped[str] = mapped_column(String(120), unique=True, index=True)
    # Denormalized copy of the category display name
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    logo: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    website_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    tagline: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    review_intro: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Loosely typed: a JSON list, a JSON-encoded string, or null
    tags: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    pricing_model: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    published: Mapped[bool] = mapped_column(Boolean, default=False)
    featured: Mapped[bool] = mapped_column(Boolean, default=False)
    published_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    pros: Mapped[list["ToolPro"]] = relationship(
        back_populates="tool", cascade="all, delete-orphan"
    )
    cons: Mapped[list["ToolCon"]] = relationship(
        back_populates="tool", cascade="all, delete-orphan"
    )
    pricing_plans: Mapped[list["ToolPricingPlan"]] = relationship(
        back_populates="tool", cascade="all, delete-orphan"
    )
    integrations: Mapped[list["ToolIntegration"]] = relationship(
        back_populates="tool", cascade="all, delete-orphan"
    )
    features: Mapped[list["ToolFeature"]] = relationship(
        back_populates="tool", cascade="all, delete-orphan"
    )
    affiliate_link: Mapped[Optional["AffiliateLink"]] = relationship(
        back_populates="tool", cascade="all, delete-orphan"
    )


class ToolPro(Base):
    __tablename__ = "tool_pros"

    id: Mapped[int] = mapped_column(primary_key=True)
    tool_id: Mapped[int] = mapped_column(ForeignKey("ai_tools.id"), index=True)
    text: Mapped[str] = mapped_column(Text)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)

    tool: Mapped["Tool"] = relationship(back_populates="pros")


class ToolCon(Base):
    __tablename__ = "tool_cons"

    id: Mapped[int] = mapped_column(primary_key=True)
    tool_id: Mapped[int] = mapped_column(ForeignKey("ai_tools.id"), index=True)
    text: Mapped[str] = mapped_column(Text)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)

    tool: Mapped["Tool"] = relationship(back_populates="cons")


class ToolPricingPlan(Base):
    __tablename__ = "tool_pricing_plans"

    id: Mapped[int] = mapped_column(primary_key=True)
    tool_id: Mapped[int] = mapped_column(ForeignKey("ai_tools.id"), index=True)
    price_label: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    period: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)

    tool: Mapped["Tool"] = relationship(back_populates="pricing_plans")


class ToolIntegration(Base):
    __tablename__ = "tool_integrations"

    id: Mapped[int] = mapped_column(primary_key=True)
    tool_id: Mapped[int] = mapped_column(ForeignKey("ai_tools.id"), index=True)
    integration_name: Mapped[str] = mapped_column(String(100))
    sort_order: Mapped[int] = mapped_column(Integer, default=0)

    tool: Mapped["Tool"] = relationship(back_populates="integrations")


class ToolFeature(Base):
    __tablename__ = "tool_features"

    id: Mapped[int] = mapped_column(primary_key=True)
    tool_id: Mapped[int] = mapped_column(ForeignKey("ai_tools.id"), index=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)

    tool: Mapped["Tool"] = relationship(back_populates="features")

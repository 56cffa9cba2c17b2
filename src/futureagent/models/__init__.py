from futureagent.models.base import Base
from futureagent.models.tool import (
    Tool,
    ToolPro,
    ToolCon,
    ToolPricingPlan,
    ToolIntegration,
    ToolFeature,
)
from futureagent.models.category import Category
from futureagent.models.affiliate import AffiliateLink, AffiliateClick
from futureagent.models.blog import BlogPost

__all__ = [
    "Base",
    "Tool",
    "ToolPro",
    "ToolCon",
    "ToolPricingPlan",
    "ToolIntegration",
    "ToolFeature",
    "Category",
    "AffiliateLink",
    "AffiliateClick",
    "BlogPost",
]

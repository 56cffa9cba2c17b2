from futureagent.comparison.hydrator import (
    Comparison,
    build_comparison,
    hydrate_tool,
    parse_compare_tokens,
    resolve_tools,
)
from futureagent.comparison.review import ToolReview, build_tool_review
from futureagent.comparison.types import HydratedTool
from futureagent.comparison.verdict import FeatureRow, Verdict, build_feature_rows, compute_verdict

__all__ = [
    "Comparison",
    "FeatureRow",
    "HydratedTool",
    "ToolReview",
    "Verdict",
    "build_comparison",
    "build_feature_rows",
    "build_tool_review",
    "compute_verdict",
    "hydrate_tool",
    "parse_compare_tokens",
    "resolve_tools",
]

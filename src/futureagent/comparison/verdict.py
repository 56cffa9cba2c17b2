"""Pure verdict and feature-table rules for a two-tool comparison."""
from collections.abc import Callable, Sequence
from typing import Literal

from pydantic import BaseModel

from futureagent.comparison.types import HydratedTool

Winner = Literal["toolA", "toolB", "tie"]

DEFAULT_CATEGORY = "AI Tool"
CLEAR_WIN_GAP = 0.5
MAX_FEATURE_ROWS = 3
MAX_INTEGRATIONS_SHOWN = 3

# Picks one of the cross-category phrasings
PhrasingChooser = Callable[[Sequence[str]], str]


class Verdict(BaseModel):
    winner: Winner
    summary: str


class FeatureRow(BaseModel):
    name: str
    tool_a_value: str
    tool_b_value: str


def first_phrasing(phrasings: Sequence[str]) -> str:
    return phrasings[0]


def format_rating(rating: float) -> str:
    return f"{rating:.1f}/5.0"


def cross_category_phrasings(name_a: str, cat_a: str, name_b: str, cat_b: str) -> list[str]:
    return [
        f"Hold up, you're comparing apples to oranges here. **{name_a}** is built for {cat_a}, "
        f"while **{name_b}** tackles {cat_b}. Totally different categories. "
        f"Pick {name_a} if you need {cat_a} power. Pick {name_b} if you're focused on {cat_b}. "
        f"Or honestly? Use both.",

        f"These aren't really competitors. **{name_a}** ({cat_a}) and **{name_b}** ({cat_b}) "
        f"solve completely different problems. Choose {name_a} for {cat_a} work and "
        f"{name_b} for {cat_b}, based on what you actually need.",

        f"Not a fair fight. **{name_a}** is a {cat_a} tool, **{name_b}** is for {cat_b}. "
        f"They're in different categories entirely. If your workflow needs both {cat_a} "
        f"and {cat_b}, grab both. If you only need one, the choice is obvious.",
    ]


def pick_winner(rating_a: float, rating_b: float) -> Winner:
    if rating_a > rating_b:
        return "toolA"
    if rating_b > rating_a:
        return "toolB"
    return "tie"


def compute_verdict(
    tool_a: HydratedTool,
    tool_b: HydratedTool,
    category_a: str | None,
    category_b: str | None,
    *,
    choose_phrasing: PhrasingChooser | None = None,
) -> Verdict:
    """Declare a winner and write the summary.

    Tools in different categories are reported as not comparable; the winner
    field still reflects ratings. Within one category, a rating gap of at
    least 0.5 is a clear win and anything smaller is marginal.
    """
    cat_a = category_a or DEFAULT_CATEGORY
    cat_b = category_b or DEFAULT_CATEGORY
    winner = pick_winner(tool_a.rating, tool_b.rating)

    if cat_a.lower() != cat_b.lower():
        choose = choose_phrasing or first_phrasing
        summary = choose(cross_category_phrasings(tool_a.name, cat_a, tool_b.name, cat_b))
        return Verdict(winner=winner, summary=summary)

    if winner == "tie":
        return Verdict(
            winner="tie",
            summary=(
                f"Dead heat. Both {tool_a.name} and {tool_b.name} score "
                f"{format_rating(tool_a.rating)} in the {cat_a} category. Your call comes down "
                f"to pricing, integrations, and which interface you prefer."
            ),
        )

    top, other = (tool_a, tool_b) if winner == "toolA" else (tool_b, tool_a)
    gap = round(top.rating - other.rating, 2)

    if gap >= CLEAR_WIN_GAP:
        summary = (
            f"**{top.name}** takes this one with a {format_rating(top.rating)} vs "
            f"{format_rating(other.rating)} rating. Clear winner in the {cat_a} space. "
            f"{other.name} isn't bad, but {top.name} has the edge in features, polish, "
            f"and user satisfaction."
        )
    else:
        summary = (
            f"Slight edge to **{top.name}** ({format_rating(top.rating)} vs "
            f"{format_rating(other.rating)}), but we're splitting hairs here. Both are "
            f"top-tier {cat_a} tools. Test both free trials and see which workflow clicks "
            f"better for you."
        )
    return Verdict(winner=winner, summary=summary)


def build_feature_rows(tool_a: HydratedTool, tool_b: HydratedTool) -> list[FeatureRow]:
    rows = [
        FeatureRow(
            name="Expert Rating",
            tool_a_value=format_rating(tool_a.rating),
            tool_b_value=format_rating(tool_b.rating),
        )
    ]

    for i in range(MAX_FEATURE_ROWS):
        feature_a = tool_a.features[i] if i < len(tool_a.features) else None
        feature_b = tool_b.features[i] if i < len(tool_b.features) else None
        if feature_a is None and feature_b is None:
            continue
        name = (
            (feature_a.title if feature_a else None)
            or (feature_b.title if feature_b else None)
            or f"Core Feature {i + 1}"
        )
        rows.append(
            FeatureRow(
                name=name,
                tool_a_value=(feature_a.description if feature_a else None) or "Supported",
                tool_b_value=(feature_b.description if feature_b else None) or "Supported",
            )
        )

    rows.append(
        FeatureRow(
            name="Integrations",
            tool_a_value=_integrations_cell(tool_a.integrations),
            tool_b_value=_integrations_cell(tool_b.integrations),
        )
    )
    return rows


def _integrations_cell(integrations: list[str]) -> str:
    if not integrations:
        return "Direct Access"
    return ", ".join(integrations[:MAX_INTEGRATIONS_SHOWN])

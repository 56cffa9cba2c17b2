"""
GraphQL types.

Defined by hand and filled from the pydantic read models, so GraphQL and REST
serve the same validated data (tags already parsed, fallbacks applied).
"""
import strawberry

from futureagent import comparison
from futureagent.data import records


@strawberry.type
class Category:
    slug: str
    name: str
    icon: str | None
    description: str | None
    meta_title: str | None
    meta_description: str | None


@strawberry.type
class Tool:
    id: int
    name: str
    slug: str
    category: str | None
    rating: float | None
    logo: str | None
    website_url: str | None
    tagline: str | None
    description: str | None
    tags: list[str]
    pricing_model: str | None


@strawberry.type
class BlogPost:
    slug: str
    title: str
    excerpt: str | None
    featured_image: str | None
    category: str | None
    reading_time: int | None


@strawberry.type
class Feature:
    title: str
    description: str | None


@strawberry.type
class HydratedTool:
    name: str
    slug: str
    logo: str
    rating: float
    cta: str
    pros: list[str]
    cons: list[str]
    pricing: str
    integrations: list[str]
    description: str
    tagline: str
    use_cases: list[str]
    subscription_details: str
    features: list[Feature]


@strawberry.type
class Verdict:
    winner: str
    summary: str


@strawberry.type
class FeatureRow:
    name: str
    tool_a_value: str
    tool_b_value: str


@strawberry.type
class Comparison:
    tool_a: HydratedTool
    tool_b: HydratedTool
    verdict: Verdict
    features: list[FeatureRow]


def category_from_record(record: records.CategoryRecord) -> Category:
    return Category(
        slug=record.slug,
        name=record.name,
        icon=record.icon,
        description=record.description,
        meta_title=record.meta_title,
        meta_description=record.meta_description,
    )


def tool_from_record(record: records.ToolRecord | records.FeaturedTool) -> Tool:
    """Featured tools carry a narrow projection; missing fields become null."""
    return Tool(
        id=record.id,
        name=record.name,
        slug=record.slug,
        category=record.category,
        rating=record.rating,
        logo=record.logo,
        website_url=getattr(record, "website_url", None),
        tagline=record.tagline,
        description=getattr(record, "description", None),
        tags=getattr(record, "tags", []),
        pricing_model=getattr(record, "pricing_model", None),
    )


def post_from_record(record: records.BlogPostSummary) -> BlogPost:
    return BlogPost(
        slug=record.slug,
        title=record.title,
        excerpt=record.excerpt,
        featured_image=record.featured_image,
        category=record.category,
        reading_time=record.reading_time,
    )


def _hydrated(tool: comparison.HydratedTool) -> HydratedTool:
    return HydratedTool(
        name=tool.name,
        slug=tool.slug,
        logo=tool.logo,
        rating=tool.rating,
        cta=tool.cta,
        pros=tool.pros,
        cons=tool.cons,
        pricing=tool.pricing,
        integrations=tool.integrations,
        description=tool.description,
        tagline=tool.tagline,
        use_cases=tool.use_cases,
        subscription_details=tool.subscription_details,
        features=[Feature(title=f.title, description=f.description) for f in tool.features],
    )


def comparison_from_model(result: comparison.Comparison) -> Comparison:
    return Comparison(
        tool_a=_hydrated(result.tool_a),
        tool_b=_hydrated(result.tool_b),
        verdict=Verdict(winner=result.verdict.winner, summary=result.verdict.summary),
        features=[
            FeatureRow(name=row.name, tool_a_value=row.tool_a_value, tool_b_value=row.tool_b_value)
            for row in result.features
        ],
    )

from pydantic import BaseModel

from futureagent.data.records import FeatureRecord


class HydratedTool(BaseModel):
    """A tool joined with its child rows, ready for a comparison view."""
    id: int
    name: str
    slug: str
    logo: str
    rating: float
    cta: str
    pros: list[str] = []
    cons: list[str] = []
    pricing: str
    integrations: list[str] = []
    description: str
    tagline: str = ""
    use_cases: list[str] = []
    subscription_details: str
    features: list[FeatureRecord] = []

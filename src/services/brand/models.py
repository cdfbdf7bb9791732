"""Brand analysis models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BrandKit(BaseModel):
    """Structured brand profile produced by the brand analysis step."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    about_the_brand: str
    ideal_customer_profile: str
    brand_point_of_view: str
    tone_of_voice: str
    author_persona: str

"""Schema for personalized notification content."""

from engine.schemas.base_schema_model import BaseSchemaModel


class PersonalizedContent(BaseSchemaModel):
    """Title/message to deliver plus presentation hints for the channels."""

    title: str
    message: str
    include_details: bool = False
    add_urgency_indicator: bool = False
    title_rewritten: bool = False

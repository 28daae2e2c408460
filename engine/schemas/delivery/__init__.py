"""Delivery decision schemas."""

from engine.schemas.delivery.channel_result import ChannelResult
from engine.schemas.delivery.delivery_timing import DeliveryTiming
from engine.schemas.delivery.personalized_content import PersonalizedContent
from engine.schemas.delivery.rate_limit_check import RateLimitCheck

__all__ = [
    "ChannelResult",
    "DeliveryTiming",
    "PersonalizedContent",
    "RateLimitCheck",
]

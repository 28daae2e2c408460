"""Constants used throughout the smart notification service."""

from engine.enums import PriorityLevel

# HTTP Headers
REQUEST_ID_HEADER = "X-Request-ID"

# Score used for each level when a notification type has no priority model
BASIC_PRIORITY_SCORES = {
    PriorityLevel.CRITICAL: 90,
    PriorityLevel.HIGH: 70,
    PriorityLevel.MEDIUM: 50,
    PriorityLevel.LOW: 30,
}
BASIC_PRIORITY_CONFIDENCE = 0.5

# Engagement heuristics
HIGH_ENGAGEMENT_READ_RATE = 0.8
LOW_ENGAGEMENT_READ_RATE = 0.3
TYPE_BOOST_READ_RATE = 0.7
TYPE_PENALTY_READ_RATE = 0.3
EMAIL_FALLBACK_READ_RATE = 0.4
DETAIL_READ_RATE = 0.8
FAST_RESPONSE_MINUTES = 30

# Business-hours context window (local time, inclusive)
BUSINESS_HOURS_START = 9
BUSINESS_HOURS_END = 17
OFF_HOURS_BEFORE = 8
OFF_HOURS_AFTER = 20
OFF_HOURS_SCORE_CEILING = 80

# Rate-limit rescheduling
NEXT_DAY_DELIVERY_HOUR = 9
RATE_LIMIT_RETRY_MINUTES = 15

# Profile/pattern shaping
MAX_PREFERRED_HOURS = 6
MAX_PREFERRED_DAYS = 5
MAX_BEST_HOURS = 4

# Longest title a notification row can store
TITLE_MAX_LENGTH = 255

# Title prefixes used for low-engagement users, chosen by priority level
URGENCY_PREFIXES = {
    PriorityLevel.CRITICAL: "Urgent:",
    PriorityLevel.HIGH: "Action Required:",
    PriorityLevel.MEDIUM: "Important:",
    PriorityLevel.LOW: "Attention:",
}

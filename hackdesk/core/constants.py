"""Application constants.

This module contains magic strings and numbers used throughout the application.
Centralizing these values makes them easier to maintain and modify.
"""

# Meal Stations
# Meals an attendee can be credited for, in the order they are served.
# Deployments override the set through the MEAL_TAGS setting.
DEFAULT_MEAL_TAGS = (
    "sat_breakfast",
    "sat_lunch",
    "sat_dinner",
    "sun_breakfast",
    "sun_lunch",
)

# Applicant Decisions
# Organizers move a pending applicant to one of these; accepted gets a badge token
APPLICANT_DECISIONS = ("accepted", "waitlisted", "denied")
MAX_DECISION_NOTE_LENGTH = 1000
QR_TOKEN_BYTES = 8  # 16 hex characters on the badge

# Check-in Outcome Reasons (wire values)
REASON_ALREADY_CHECKED_IN = "ALREADY_CHECKED_IN"
REASON_NOT_FOUND = "NOT_FOUND"
REASON_STORE_ERROR = "STORE_ERROR"

# Applicant Listing
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200

# Postgres stored function backing the atomic meal check-in.
# Provisioned by the b7c8d9e0f1a2 migration.
MEAL_CHECKIN_FUNCTION = "set_meal_checkin_if_absent"

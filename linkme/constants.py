"""Domain vocabularies shared by the entities, services and API models."""

ROLE_USER = "user"
ROLE_VOLUNTEER = "volunteer"
ROLES = (ROLE_USER, ROLE_VOLUNTEER)

URGENCY_URGENT = "urgent"
URGENCY_FLEXIBLE = "flexible"
URGENCIES = (URGENCY_URGENT, URGENCY_FLEXIBLE)

STATUS_OPEN = "open"
STATUS_ACCEPTED = "accepted"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

HELP_CATEGORIES = ("shopping", "cleaning", "tools", "transport", "tech", "other")

MIN_RATING_SCORE = 1
MAX_RATING_SCORE = 5

JMBG_LENGTH = 13

# characters of the request description quoted in the acceptance greeting
GREETING_PREVIEW_LENGTH = 50

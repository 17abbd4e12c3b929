"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEVICE_API_KEY_HEADER = "X-Device-API-Key"

PENDING_CARD_TTL_MINUTES = 5
MAX_CARDS_PER_BATCH = 100

MAX_REGISTRATIONS_PER_IMPORT = 500
MAX_STUDENTS_PER_IMPORT = 1000
MAX_REPORTED_IMPORT_ERRORS = 10

DEFAULT_SESSION_DAYS = 7
UNKNOWN_DEVICE_ID = "unknown"

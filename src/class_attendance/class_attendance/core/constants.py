"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Percentage at or above which a student is in good standing.
DEFAULTER_THRESHOLD = 75

DEFAULT_PORT = 5000
DEFAULT_MARKED_DAYS_LIMIT = 30

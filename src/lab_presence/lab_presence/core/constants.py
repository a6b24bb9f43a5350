"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_HISTORY_LIMIT = 100
MAX_HISTORY_LIMIT = 500
DEFAULT_INSIDE_WINDOW_HOURS = 24
DEFAULT_TOGGLE_MAX_ATTEMPTS = 3
MAX_IDENTIFIER_LENGTH = 64
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CODE_DURATION_MINUTES = 5
MAX_CODE_DURATION_MINUTES = 24 * 60
CODE_MIN = 100000
CODE_MAX = 999999
CODE_GENERATION_ATTEMPTS = 5

# Shared with certificate gating.
ELIGIBILITY_THRESHOLD = 75

# Placeholders assigned to auto-provisioned users until an admin reassigns them.
DEFAULT_DOMAIN_ID = "web-dev"
DEFAULT_BATCH_ID = "batch-a"
DEFAULT_USER_NAME = "Student"

DEFAULT_TOKEN_MAX_AGE_SECONDS = 60 * 60
DEFAULT_DB_TIMEOUT_SECONDS = 10

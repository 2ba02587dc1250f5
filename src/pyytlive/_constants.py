"""Internal constants shared across the library."""

API_BASE_URL = "https://www.googleapis.com/youtube/v3"
AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
OAUTH_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/youtube",)

DEFAULT_REDIRECT_URL = "http://localhost:3000"

# ------------------------------------------------------------------
# Config defaults and limits
# ------------------------------------------------------------------

DEFAULT_MAX_BROADCASTS = 10
MAX_BROADCASTS_LIMIT = 50  # liveBroadcasts.list maxResults upper bound
DEFAULT_REFRESH_INTERVAL = 60.0
MIN_REFRESH_INTERVAL = 1.0
DEFAULT_UNFINISHED_COUNT = 3

#: Seconds subtracted from a credential's expiry before it is treated as stale.
CREDENTIAL_EXPIRY_SKEW = 60.0

#: Prefix of the broadcast option value that refers to an unfinished-broadcast slot.
UNFINISHED_SLOT_PREFIX = "unfinished_"

#: Instance label used in preset texts referencing module variables.
VARIABLE_NAMESPACE = "youtube"

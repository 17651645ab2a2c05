"""Constants used throughout the synchronization core."""

# HTTP Headers
AUTHORIZATION_HEADER = "Authorization"
BEARER_PREFIX = "Bearer"

# Remote API
DEFAULT_API_BASE_URL = "http://localhost:8080/api/v1"
DEFAULT_REQUEST_TIMEOUT = 10  # seconds

# Resource Cache
DEFAULT_LIST_STALE_SECONDS = 5.0  # Coalesces rapid re-renders of the same page
DEFAULT_CACHE_MAX_ENTRIES = 100

# Pagination (matches the console list screens)
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
FIRST_PAGE = 1

# Fetch retry policy (exponential backoff, capped)
DEFAULT_FETCH_MAX_RETRIES = 3
DEFAULT_FETCH_RETRY_BASE_DELAY = 1.0  # seconds
DEFAULT_FETCH_RETRY_MAX_DELAY = 30.0  # seconds

# Aggregate poller
DEFAULT_UNREAD_POLL_INTERVAL = 30  # seconds
POLLER_STOP_TIMEOUT = 5.0  # seconds
POLL_FAILURE_LOG_EVERY = 10  # Log a prolonged-outage warning every N failures

# Logging
DEFAULT_SERVICE_NAME = "admin-console-sync"
DEFAULT_LOG_FILE_PATH = "./logs/admin-console-sync.log"

"""
Shared constants for the wayback mirror.

Contains archive endpoints and common configuration values used across modules.
"""

# Wayback Machine host used for both index queries and capture downloads
ARCHIVE_HOST = "web.archive.org"

# CDX historical index endpoint
CDX_ENDPOINT = f"https://{ARCHIVE_HOST}/cdx/search/cdx"

# Time-travel address for a capture; the id_ flag returns the original bytes
# without the archive toolbar or rewritten links
SNAPSHOT_URL_TEMPLATE = "https://" + ARCHIVE_HOST + "/web/{timestamp}id_/{url}"

# Filename written inside directory-like URLs
DIRECTORY_INDEX = "index.html"

# Characters that are not allowed in local file names
RESERVED_CHARS = ':*?&=<>\\|'

# Parent directory for per-host backup trees
BACKUPS_DIRNAME = "backups"

# Default user agent string for all HTTP requests
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Default request timeout in seconds
DEFAULT_TIMEOUT = 30

# Default number of download workers (1 keeps the run strictly sequential)
DEFAULT_CONCURRENCY = 1

# Bytes read per chunk when streaming a capture to disk
DEFAULT_CHUNK_SIZE = 64 * 1024

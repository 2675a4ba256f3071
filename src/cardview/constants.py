"""Constants used across the cardview package."""

# Number of documents added to the display window per "load more"
DEFAULT_PAGE_SIZE = 50

# Minimum seconds between two excluded-set flushes during a search pass
DEFAULT_FLUSH_INTERVAL = 0.2

# Upper bound on memoized (path, mtime) -> match outcomes
DEFAULT_CACHE_SIZE = 10_000

# Seconds between vault rescans in the TUI (0 disables auto-refresh)
DEFAULT_REFRESH_INTERVAL = 10

# Rows from the bottom of the list at which the TUI loads another page
DEFAULT_LOAD_MORE_THRESHOLD = 10

# File extensions picked up when scanning a vault
DEFAULT_EXTENSIONS = (".md",)

# Drawings stored as markdown are never shown as cards
EXCALIDRAW_SUFFIX = ".excalidraw.md"

# Default number of characters shown in a card preview
DEFAULT_PREVIEW_CHAR_LIMIT = 1200

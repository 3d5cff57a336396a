"""Constants for tag graph extraction and maintenance."""

# Edge encoding
EDGE_SEPARATOR = "->"

# Extraction grammars
GRAMMAR_ARROW = "arrow"  # [a->b], [->b], [a->], [a->mid->c]
GRAMMAR_TAG = "tag"      # #[tag]
GRAMMARS = (GRAMMAR_ARROW, GRAMMAR_TAG)

ARROW_PATTERN = r"\[([^\]]*->[^\]]*)\]"
TAG_PATTERN = r"#\[([^#\[\]]*)\]"

# Completion trigger: an open tag right before the cursor, closing bracket auto-inserted
COMPLETION_PATTERN = r"#\[([^#\[\]]*)\]$"

# File naming
NAME_MODE_BASENAME = "basename"
NAME_MODE_PATH = "path"
NAME_MODES = (NAME_MODE_BASENAME, NAME_MODE_PATH)

# File filtering
WATCHED_EXTENSIONS = ("js", "jsx", "ts", "tsx", "md", "txt")
SOURCE_DIR = "src"
SKIP_DIRS = ("node_modules",)

# Notification message pushed to websocket clients
GRAPH_CHANGED = "graph_changed"

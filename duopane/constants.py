"""Constants and configuration defaults for duopane."""

# Box drawing characters: (top-left, top-right, bottom-left, bottom-right, horizontal, vertical).
BOX_DOUBLE = ("╔", "╗", "╚", "╝", "═", "║")
BOX_SINGLE = ("┌", "┐", "└", "┘", "─", "│")
BOX_ASCII = ("+", "+", "+", "+", "-", "|")

# Color pair IDs.
C_PANE_ACTIVE = 1
C_PANE_INACTIVE = 2
C_CURSOR = 3
C_SELECTION = 4
C_DIRECTORY = 5
C_FILE = 6
C_STATUS = 7
C_STATUS_ACTIVE = 8
C_PROMPT_INPUT = 9
C_PROMPT_CONFIRM = 10
C_PROMPT_OVERWRITE = 11
C_PREVIEW = 12
C_PROGRESS_BAR = 13
C_PROGRESS_TRACK = 14
C_HINT_KEY = 15
C_HINT_DESC = 16
C_ERROR = 17

# Layout constants
BOTTOM_BARS_HEIGHT = 2       # Status bar + key hints
PANE_BORDER_ROWS = 2         # Top and bottom border
PANE_HEADER_ROWS = 1         # Current path line
PREVIEW_H_OVERHEAD = 6       # Border (2) + padding (4)
PREVIEW_V_OVERHEAD = 4       # Border (2) + padding (2)
PROGRESS_BAR_WIDTH = 20
MIN_TERM_WIDTH = 40
MIN_TERM_HEIGHT = 8
PAGE_STEP = 10               # Cursor rows moved by pgup/pgdown in a pane

# Input loop
INPUT_TIMEOUT_MS = 100       # Short so progress redraws while idle
ESCAPE_SEQUENCE_TIMEOUT_MS = 25

# Preview and operations
PREVIEW_MAX_BYTES = 100 * 1024
PROGRESS_GRANULARITY = 256 * 1024
COPY_READ_SIZE = 64 * 1024

# config.py
#
# Input bounds, defaults and display settings shared by the Streamlit app and
# the command line. The engine does not read these; it accepts any integer
# pages and any frame count >= 1.

from engine import ReplacementPolicy

# REFERENCE STRING INPUT #
MIN_LENGTH = 5
MAX_LENGTH = 50
DEFAULT_LENGTH = 15

MIN_MAX_PAGE = 3
MAX_MAX_PAGE = 20
DEFAULT_MAX_PAGE = 9

DEFAULT_REFERENCE_STRING = "7,0,1,2,0,3,0,4,2,3,0,3,2"

# FRAMES #
MIN_FRAMES = 1
MAX_FRAMES = 10
DEFAULT_FRAMES = 3

# PLAYBACK #
MIN_SPEED = 0.5
MAX_SPEED = 3.0
DEFAULT_SPEED = 1.0
BASE_STEP_SECONDS = 1.0  # delay between steps at 1.0x

# EVENT LOG #
EVENT_LOG_DEPTH = 20  # most recent entries shown, newest first

# COLORS (frame cell states) #
COLORS = {
    "hit": "#4caf50",
    "fault": "#e53935",
    "normal": "#90caf9",
    "empty": "#e0e0e0",
}

ALGORITHM_INFO = {
    ReplacementPolicy.FIFO: {
        "title": "FIFO",
        "description": "First In First Out - The simplest page replacement algorithm. "
                       "Pages are replaced in the order they were loaded into memory.",
    },
    ReplacementPolicy.LRU: {
        "title": "LRU",
        "description": "Least Recently Used - Replaces the page that has not been accessed "
                       "for the longest period of time.",
    },
    ReplacementPolicy.OPTIMAL: {
        "title": "Optimal",
        "description": "Optimal Page Replacement - Replaces the page that will not be used "
                       "for the longest time in the future. This is theoretical.",
    },
    ReplacementPolicy.SECOND_CHANCE: {
        "title": "Second Chance (Clock)",
        "description": "Second Chance gives pages a second opportunity before replacement "
                       "using a reference bit. Improves upon FIFO.",
    },
    ReplacementPolicy.LFU: {
        "title": "LFU",
        "description": "Least Frequently Used - Replaces the page with the lowest access "
                       "frequency count.",
    },
}

# Label for the auxiliary structure each algorithm keeps
AUX_LABELS = {
    ReplacementPolicy.FIFO: "Arrival Queue (oldest first)",
    ReplacementPolicy.LRU: "Recency List (least recent first)",
    ReplacementPolicy.OPTIMAL: "Resident Pages",
    ReplacementPolicy.SECOND_CHANCE: "Reference Bits (by frame)",
    ReplacementPolicy.LFU: "Access Frequency (by frame)",
}

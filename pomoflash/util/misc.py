import math
import time
from datetime import datetime


# Simply returns the current local time as an ISO8601 string with timezone offset.
def now_iso():
    return datetime.now().astimezone().isoformat()

# Wall-clock seconds since the epoch. This is what lastActiveTime is stamped with, so it has to survive restarts,
# unlike time.monotonic().
def now_epoch():
    return time.time()

# Countdown display, rounding partial seconds up so "00:00" only shows once the phase is actually over.
def format_time(seconds):
    s = max(0, int(math.ceil(seconds)))
    return f"{s // 60:02d}:{s % 60:02d}"

# Configured-length display for whole seconds.
def format_duration(seconds):
    s = max(0, int(seconds))
    return f"{s // 60:02d}:{s % 60:02d}"

def format_epoch(epoch):
    if not epoch or epoch <= 0:
        return "—"
    return datetime.fromtimestamp(epoch).strftime("%b %d, %Y %H:%M")

# Returns fallback when the given text is empty or only whitespace.
def if_empty(text, fallback):
    return text if text and text.strip() else fallback

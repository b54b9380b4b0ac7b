# Rough totals for the stats panel. Only whole completed Work sessions count towards focus time.

def estimated_focus_seconds(sessions, work_seconds):
    return max(0, int(sessions)) * max(0, int(work_seconds))

def format_focus(seconds):
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    return f"{h}h {m}m" if h > 0 else f"{m}m"

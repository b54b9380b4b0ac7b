from pomoflash.util.misc import now_iso, now_epoch, format_time, format_duration, format_epoch, if_empty

__all__ = ["now_iso", "now_epoch", "format_time", "format_duration", "format_epoch", "if_empty"]

_SIZE_UNITS = ('B', 'KB', 'MB', 'GB', 'TB')


def human_size(num_bytes: float, precision: int = 0) -> str:
    """Formats a byte count with a binary unit, e.g. 1536 -> '1.5 KB'."""
    value = float(num_bytes)
    for unit in _SIZE_UNITS:
        if abs(value) < 1024 or unit == _SIZE_UNITS[-1]:
            break
        value /= 1024
    if unit == 'B':
        return f"{int(value)} B"
    return f"{value:.{precision}f} {unit}"


def human_interval(seconds: float) -> str:
    """Formats seconds as H:MM:SS (or M:SS under an hour)."""
    total = max(int(round(seconds)), 0)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"

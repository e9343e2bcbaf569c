"""Byte count rendering for the interval files"""

KB = 1024
MB = 1024 * 1024


def _scaled(byte_count: int, unit: int) -> str:
    """byte_count / unit truncated to one decimal, no decimal if integral"""
    whole, remainder = divmod(byte_count, unit)
    if remainder == 0:
        return str(whole)
    return f"{whole}.{remainder * 10 // unit}"


def format_bytes(byte_count: int, scaling_enabled: bool = True) -> str:
    """
    Render byte_count as text

    Without scaling this is the plain integer. With scaling, counts above
    1 MiB become "<x.y>MB", counts above 1 KiB become "<x.y>KB" and anything
    else "<n>B". The boundaries are exclusive: 1024 is "1024B" and 1048576
    is "1024KB".
    """
    if not scaling_enabled:
        return str(byte_count)

    if byte_count > MB:
        return _scaled(byte_count, MB) + "MB"
    elif byte_count > KB:
        return _scaled(byte_count, KB) + "KB"
    else:
        return f"{byte_count}B"

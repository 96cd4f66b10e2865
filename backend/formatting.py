"""Human-readable rendering of byte sizes."""
from typing import Optional

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_file_size(size_bytes: Optional[float]) -> str:
    """
    Render a byte count with the largest fitting unit.

    Examples:
        >>> format_file_size(0)
        '0 Bytes'
        >>> format_file_size(1536)
        '1.5 KB'
        >>> format_file_size(10 * 1024 * 1024)
        '10 MB'
    """
    if not size_bytes:
        return "0 Bytes"

    exponent = 0
    value = float(size_bytes)
    while value >= 1024 and exponent < len(SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1
    value = round(value, 2)
    # Drop trailing zeros: 10.00 -> 10, 1.50 -> 1.5
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[exponent]}"


def mb_to_bytes(size_mb: float) -> int:
    """Convert a size in megabytes (may be fractional) to bytes."""
    return int(size_mb * 1024 * 1024)

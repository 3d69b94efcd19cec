from typing import Any, Optional

# Upper bound of the integer columns (ids, stock, quantity)
MAX_INT_COLUMN = 2147483647


def as_int(value: Any) -> Optional[int]:
    """Integer value of ``value`` or None; bools and fractional numbers are rejected."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def fits_int_column(value: int) -> bool:
    return 0 <= value <= MAX_INT_COLUMN

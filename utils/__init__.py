"""Utility modules for cross-cutting concerns."""

from utils.timezone import now_utc, to_utc, parse_iso
from utils.user_context import (
    get_current_user_id_or_none,
    set_current_user_id,
    clear_current_user_id,
)

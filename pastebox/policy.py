"""
Availability rules for pastes.

Both functions are pure: they read the paste and never touch the store.
"""
from typing import Optional

from pastebox.models import Paste


def is_available(paste: Paste, now: int) -> bool:
    """Return True while the paste is neither expired nor out of views."""
    if paste.expires_at is not None and now >= paste.expires_at:
        return False

    if paste.max_views is not None and paste.view_count >= paste.max_views:
        return False

    return True


def remaining_views(paste: Paste) -> Optional[int]:
    """Views left before the limit, or None when unlimited."""
    if paste.max_views is None:
        return None
    return max(0, paste.max_views - paste.view_count)

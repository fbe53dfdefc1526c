"""
Paste lifecycle: create, then retrieve with expiry and view accounting.
"""
import logging
import secrets
from typing import Optional

from pastebox.clock import current_time_ms, format_timestamp
from pastebox.config import settings
from pastebox.database import PasteStore
from pastebox.errors import NotFoundError, ValidationError
from pastebox.models import MAX_TTL_SECONDS, Paste, PasteView
from pastebox.policy import is_available, remaining_views

logger = logging.getLogger(__name__)


def generate_paste_id(nbytes: Optional[int] = None) -> str:
    """Generate a short URL-safe paste ID."""
    return secrets.token_urlsafe(nbytes or settings.PASTE_ID_BYTES)


def _check_positive(name: str, value: Optional[int], maximum: Optional[int] = None) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(
            f"{name} must be a positive integer",
            details=[{"field": name, "message": "must be >= 1"}],
        )
    if maximum is not None and value > maximum:
        raise ValidationError(
            f"{name} must be at most {maximum}",
            details=[{"field": name, "message": f"must be <= {maximum}"}],
        )


class PasteService:
    """Create and retrieve pastes against an injected store."""

    def __init__(self, store: PasteStore):
        self.store = store

    def create_paste(
        self,
        content: str,
        ttl_seconds: Optional[int] = None,
        max_views: Optional[int] = None,
        now: Optional[int] = None,
    ) -> Paste:
        """
        Validate input and store a new paste.

        Args:
            content: Text content, must not be blank
            ttl_seconds: Optional time-to-live in seconds
            max_views: Optional maximum view count
            now: Creation time in epoch milliseconds (defaults to wall clock)

        Returns:
            The stored paste

        Raises:
            ValidationError: If any argument is malformed
            StorageError: If the backend write fails
        """
        if not isinstance(content, str) or not content.strip():
            raise ValidationError(
                "content is required and must be non-empty",
                details=[{"field": "content", "message": "must be non-empty"}],
            )
        _check_positive("ttl_seconds", ttl_seconds, maximum=MAX_TTL_SECONDS)
        _check_positive("max_views", max_views)

        if now is None:
            now = current_time_ms()

        paste = Paste(
            id=generate_paste_id(),
            content=content,
            created_at=now,
            expires_at=now + ttl_seconds * 1000 if ttl_seconds is not None else None,
            max_views=max_views,
        )
        self.store.create(paste, now=now)
        return paste

    def peek_paste(self, paste_id: str, now: Optional[int] = None) -> Paste:
        """Return an available paste without counting a view."""
        if now is None:
            now = current_time_ms()

        paste = self.store.get(paste_id)
        if paste is None:
            logger.warning(f"Paste {paste_id} not found")
            raise NotFoundError(paste_id)
        if not is_available(paste, now):
            logger.warning(f"Paste {paste_id} expired or view limit exceeded")
            raise NotFoundError(paste_id)
        return paste

    def fetch_paste(self, paste_id: str, now: Optional[int] = None) -> PasteView:
        """
        Retrieve a paste, counting one view.

        Availability is checked before the increment, so a paste that has
        reached its limit is never served or counted again. Absent, expired
        and exhausted pastes all raise the same NotFoundError.
        """
        paste = self.peek_paste(paste_id, now)
        # Must happen before the increment
        expires_at = format_timestamp(paste.expires_at) if paste.expires_at is not None else None

        self.store.increment_view(paste_id)

        updated = self.store.get(paste_id)
        if updated is None:
            raise NotFoundError(paste_id)

        return PasteView(
            content=updated.content,
            remaining_views=remaining_views(updated),
            expires_at=expires_at,
        )

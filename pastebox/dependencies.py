"""
FastAPI dependencies shared by the routers.
"""
from typing import Optional

from fastapi import Depends, Header, Request

from pastebox.clock import current_time_ms
from pastebox.database import PasteStore
from pastebox.service import PasteService


def get_store(request: Request) -> PasteStore:
    """The paste store attached to the running app."""
    return request.app.state.store


def get_paste_service(store: PasteStore = Depends(get_store)) -> PasteService:
    return PasteService(store)


def get_now(
    request: Request,
    x_test_now_ms: Optional[str] = Header(None),
) -> int:
    """Current time in ms; the x-test-now-ms header counts only in test mode."""
    return current_time_ms(x_test_now_ms, test_mode=request.app.state.test_mode)

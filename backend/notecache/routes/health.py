"""
NoteCache — Health Check Route
===============================

What:  Health check endpoint for monitoring and container probes.
How:   Verifies that the storage root exists and is writable, and reports how
       many notes it holds (a directory scan, no file contents are read).

Status levels:
    - healthy:   Storage root writable
    - unhealthy: Storage root missing, unreadable, or read-only
"""

import logging
import time

from fastapi import APIRouter, Depends

from notecache import __version__
from notecache.dependencies import get_note_store
from notecache.exceptions import FileStorageError
from notecache.schemas.note import HealthResponse
from notecache.services.note_store import NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(store: NoteStore = Depends(get_note_store)) -> HealthResponse:
    storage_status = "writable"
    overall = "healthy"
    count = 0

    if not store.is_writable():
        storage_status = "unavailable"
        overall = "unhealthy"
        logger.warning("Health check: storage root %s is not writable", store.root)
    else:
        try:
            count = store.count()
        except FileStorageError:
            storage_status = "unavailable"
            overall = "unhealthy"

    return HealthResponse(
        status=overall,
        version=__version__,
        storage=storage_status,
        notes=count,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
